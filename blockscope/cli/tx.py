import logging

import click

from blockscope.cli.utils import (
    abi_store_option,
    full_option,
    group_options,
    json_output_option,
    json_rpc_option,
    verbose_option,
)

# isort: skip_file
# pylint: disable=too-many-arguments,import-outside-toplevel,too-many-locals

root_logger = logging.getLogger("blockscope")
logger = root_logger.getChild("cli").getChild("tx")


@click.command("tx")
@click.argument("tx_hash")
@group_options(json_rpc_option, abi_store_option, full_option, json_output_option, verbose_option)
def tx_command(tx_hash: str, json_rpc: str, abi_store: str | None, full: bool, json_output: bool, verbose: bool):
    """
    Fetch transaction TX_HASH and its receipt, then decode its input and logs with saved ABIs.
    Logs emitted by other contracts are decoded with the ABI saved for the emitting address.
    """
    from blockscope.abi_store import JsonFileAbiStore
    from blockscope.cli.utils import (
        cli_logger_config,
        echo_json,
        log_results_to_json,
        print_decoded_call,
        print_log_results,
    )
    from blockscope.decoding import LogEntry, decode_call, decode_receipt_logs, extract_function_selector
    from blockscope.exceptions import RPCError
    from blockscope.rpc import JsonRpcClient, hex_to_int

    console = cli_logger_config(root_logger, verbose)
    client = JsonRpcClient(json_rpc)
    store = JsonFileAbiStore(abi_store)

    try:
        transaction = client.get_transaction(tx_hash)
        receipt = client.get_transaction_receipt(tx_hash)
    except RPCError as e:
        raise click.ClickException(f"RPC Error: {e}")

    if transaction is None:
        raise click.ClickException(f"Transaction {tx_hash} not found")

    to_address = transaction.get("to")
    input_data = transaction.get("input") or "0x"
    primary_abi = store.get(to_address) if to_address else None

    selector = extract_function_selector(input_data)
    decoded_call = decode_call(input_data, primary_abi, full=full) if selector and primary_abi else None

    logs = [LogEntry.from_rpc(log) for log in (receipt or {}).get("logs", [])]
    log_results = decode_receipt_logs(logs, to_address, primary_abi, store, full=full)

    if json_output:
        echo_json(
            {
                "hash": tx_hash,
                "from": transaction.get("from"),
                "to": to_address,
                "value": str(hex_to_int(transaction.get("value"))),
                "selector": selector,
                "decodedInput": decoded_call.to_dict() if decoded_call else None,
                "logs": log_results_to_json(log_results),
            }
        )
        return

    console.print(f"[bold]Transaction:[/bold] {tx_hash}")
    console.print(f"[bold]From:[/bold] {transaction.get('from')}  [bold]To:[/bold] {to_address or 'Contract Creation'}")
    console.print(f"[bold]Value:[/bold] {hex_to_int(transaction.get('value'))} wei")

    if not selector:
        console.print("No input data.  Transaction is a plain value transfer")
    elif primary_abi is None:
        console.print(f"No ABI saved for {to_address}.  Add the contract ABI to decode the input")
    elif decoded_call is None:
        console.print(f"Function not found in ABI. The function selector is {selector}")
    else:
        print_decoded_call(console, decoded_call)

    if log_results:
        console.print(f"\n[bold]{len(log_results)} event{'s' if len(log_results) != 1 else ''} emitted")

    print_log_results(console, log_results)
