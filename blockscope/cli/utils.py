import json
import logging
import os
from logging import Logger
from typing import IO, Any, Sequence

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from blockscope.abi_store import JsonFileAbiStore
from blockscope.decoding.abi import parse_abi
from blockscope.exceptions import MalformedAbi
from blockscope.rpc import DEFAULT_RPC
from blockscope.types.abi import AbiDescriptor
from blockscope.decoding.dispatcher import LogDecodeResult
from blockscope.types.decoding import DecodedCall, DecodedEvent, DecodedParameter

root_logger = logging.getLogger("blockscope")
logger = root_logger.getChild("cli")


def cli_logger_config(instrument_logger: Logger, verbose: bool = False) -> Console:
    """Routes package logs through rich, and returns the console used for CLI output"""
    rich_console = Console()
    instrument_logger.handlers.clear()

    instrument_logger.addHandler(RichHandler(show_path=False, console=rich_console))
    instrument_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    return rich_console


def group_options(*options):
    """Decorator to group multiple click options together"""

    def wrapper(function):
        for option in reversed(options):
            function = option(function)
        return function

    return wrapper


# -------------------------------------------------------
#    CLI Connections and Configurations
# -------------------------------------------------------
json_rpc_option = click.option(
    "--json-rpc",
    "-rpc",
    "json_rpc",
    default=os.environ.get("JSON_RPC", DEFAULT_RPC),
    show_default=True,
    help="RPC url to fetch transactions from.  If not provided, will use the JSON_RPC environment variable",
)
abi_store_option = click.option(
    "--abi-store",
    "abi_store",
    default=None,
    help="Path of the ABI store JSON file.  If not provided, will use the BLOCKSCOPE_ABI_STORE environment "
    "variable, or the blockscope app directory",
)
verbose_option = click.option("--verbose", "-v", is_flag=True, default=False, help="Print debug logs")


# -------------------------------------------------------
#    Decoding Parameters
# -------------------------------------------------------
abi_file_option = click.option(
    "--abi",
    "abi_file",
    type=click.File("r"),
    default=None,
    help="ABI JSON file to decode with",
)
address_option = click.option(
    "--address",
    "address",
    default=None,
    help="Contract address to load a saved ABI for.  Ignored if --abi is provided",
)
full_option = click.option(
    "--full",
    is_flag=True,
    default=False,
    help="Decode dynamic types, arrays and tuples instead of returning raw 32 byte slots",
)
json_output_option = click.option(
    "--json",
    "json_output",
    is_flag=True,
    default=False,
    help="Print results as JSON",
)


def load_cli_abi(abi_file: IO[str] | None, address: str | None, abi_store: str | None) -> list[AbiDescriptor]:
    """
    Loads the ABI to decode with, from a file or from the ABI store.

    :raises click.UsageError: If no ABI source was provided, or no ABI is saved for address
    :raises click.BadParameter: If the ABI file is malformed
    """
    if abi_file is not None:
        try:
            return parse_abi(abi_file.read())
        except MalformedAbi as e:
            raise click.BadParameter(str(e), param_hint="--abi")

    if address:
        abi = JsonFileAbiStore(abi_store).get(address)
        if abi is None:
            raise click.UsageError(f"No ABI saved for {address}.  Add one with 'blockscope abi add'")
        return abi

    raise click.UsageError("Provide an ABI with --abi, or a contract address with a saved ABI with --address")


def echo_json(value: dict[str, Any] | list[Any] | None):
    click.echo(json.dumps(value, indent=2))


def params_table(params: Sequence[DecodedParameter], show_indexed: bool = False) -> Table:
    """Returns rich table of decoded parameters"""
    table = Table(box=None)
    table.add_column("Name", style="bold")
    table.add_column("Type", style="cyan")
    if show_indexed:
        table.add_column("Indexed")
    table.add_column("Value", overflow="fold")

    for param in params:
        if show_indexed:
            table.add_row(param.name, param.type, "indexed" if param.indexed else "", param.value)
        else:
            table.add_row(param.name, param.type, param.value)

    return table


def print_decoded_call(console: Console, decoded: DecodedCall):
    console.print(f"[bold]Function:[/bold] {decoded.name}  [magenta]{decoded.state_mutability}")
    console.print(f"[bold]Signature:[/bold] {decoded.signature} ({decoded.selector})")
    if decoded.params:
        console.print(params_table(decoded.params))


def print_decoded_event(console: Console, decoded: DecodedEvent):
    console.print(f"[bold]Event:[/bold] {decoded.name}  [dim]{decoded.address}")
    console.print(f"[bold]Signature:[/bold] {decoded.signature}")
    if decoded.params:
        console.print(params_table(decoded.params, show_indexed=True))


def log_results_to_json(log_results: Sequence[LogDecodeResult]) -> list[dict[str, Any]]:
    return [
        {
            "address": result.log.address,
            "topics": list(result.log.topics),
            "data": result.log.data,
            "needsAbi": result.needs_abi,
            "decoded": result.event.to_dict() if result.event else None,
        }
        for result in log_results
    ]


def print_log_results(console: Console, log_results: Sequence[LogDecodeResult]):
    """Prints decoded logs.  Logs from contracts without a saved ABI are printed with a hint to add one"""
    for index, result in enumerate(log_results):
        console.print(f"\n[bold magenta]Log {index}[/bold magenta] {result.log.address}")
        if result.event is not None:
            print_decoded_event(console, result.event)
        elif result.needs_abi:
            console.print(f"No ABI saved for {result.log.address}.  Add the contract ABI to decode this log")
        else:
            console.print("Event not found in ABI")
