import logging

import click

from blockscope.cli.utils import (
    abi_file_option,
    abi_store_option,
    address_option,
    full_option,
    group_options,
    json_output_option,
    verbose_option,
)

# isort: skip_file
# pylint: disable=too-many-arguments,import-outside-toplevel

root_logger = logging.getLogger("blockscope")
logger = root_logger.getChild("cli").getChild("decode")


@click.group("decode", short_help="Decode Call Data & Event Logs")
def decode_group():
    """Decode Call Data & Event Logs with a contract ABI"""


@decode_group.command("input")
@click.argument("calldata")
@group_options(abi_file_option, address_option, abi_store_option, full_option, json_output_option, verbose_option)
def decode_input(calldata, abi_file, address, abi_store, full, json_output, verbose):
    """Decode transaction input CALLDATA"""
    from blockscope.cli.utils import cli_logger_config, echo_json, load_cli_abi, print_decoded_call
    from blockscope.decoding import decode_call, extract_function_selector

    console = cli_logger_config(root_logger, verbose)
    abi = load_cli_abi(abi_file, address, abi_store)

    selector = extract_function_selector(calldata)
    if not selector:
        if json_output:
            echo_json(None)
        else:
            console.print("No input data.  Transaction is a plain value transfer")
        return

    decoded = decode_call(calldata, abi, full=full)

    if json_output:
        echo_json(decoded.to_dict() if decoded else None)
    elif decoded is None:
        console.print(f"Function not found in ABI. The function selector is {selector}")
    else:
        print_decoded_call(console, decoded)


@decode_group.command("log")
@click.option("--topic", "-t", "topics", multiple=True, required=True, help="Log topic.  Pass once per topic, in order")
@click.option("--data", "-d", "data", default="0x", help="Log data")
@click.option("--log-address", default="", help="Address of the contract that emitted the log")
@group_options(abi_file_option, address_option, abi_store_option, full_option, json_output_option, verbose_option)
def decode_event_log(topics, data, log_address, abi_file, address, abi_store, full, json_output, verbose):
    """Decode an event log from its topics and data"""
    from blockscope.cli.utils import cli_logger_config, echo_json, load_cli_abi, print_decoded_event
    from blockscope.decoding import LogEntry, decode_log

    console = cli_logger_config(root_logger, verbose)
    abi = load_cli_abi(abi_file, address or log_address or None, abi_store)

    log = LogEntry(address=log_address or address or "", topics=tuple(topics), data=data)
    decoded = decode_log(log, abi, full=full)

    if json_output:
        echo_json(decoded.to_dict() if decoded else None)
    elif decoded is None:
        console.print(f"Event not found in ABI. The event topic is {topics[0]}")
    else:
        print_decoded_event(console, decoded)


@click.command("selector")
@click.argument("signature")
@click.option("--event", is_flag=True, default=False, help="Print the full 32 byte event topic")
def selector_command(signature, event):
    """
    Print the selector of a canonical SIGNATURE, ie transfer(address,uint256)
    """
    from blockscope.decoding import derive_event_topic, derive_selector

    click.echo(derive_event_topic(signature) if event else derive_selector(signature))
