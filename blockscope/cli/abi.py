import logging

import click

from blockscope.cli.utils import abi_store_option, group_options

# isort: skip_file
# pylint: disable=import-outside-toplevel

root_logger = logging.getLogger("blockscope")
logger = root_logger.getChild("cli").getChild("abi")


@click.group("abi", short_help="Manage Saved Contract ABIs")
def abi_group():
    """Manage the ABIs saved for contract addresses"""


@abi_group.command("add")
@click.argument("address")
@click.argument("abi_json", type=click.File("r"))
@group_options(abi_store_option)
def add_abi(address: str, abi_json, abi_store: str | None):
    """Save ABI_JSON as the ABI of contract ADDRESS"""
    import json
    from blockscope.abi_store import JsonFileAbiStore
    from blockscope.cli.utils import cli_logger_config
    from blockscope.decoding import filter_events, filter_functions, load_abi
    from blockscope.exceptions import MalformedAbi

    console = cli_logger_config(root_logger)

    try:
        abi_entries = json.loads(abi_json.read())
        descriptors = load_abi(abi_entries)
    except (json.JSONDecodeError, MalformedAbi) as e:
        raise click.BadParameter(f"Invalid ABI format. Please provide a valid JSON ABI.  {e}", param_hint="ABI_JSON")

    store = JsonFileAbiStore(abi_store)
    store.save(address, abi_entries)

    console.print(
        f"[green]Saved ABI for {address.lower()} with {len(filter_functions(descriptors))} functions "
        f"and {len(filter_events(descriptors))} events"
    )


@abi_group.command("list")
@group_options(abi_store_option)
def list_abis(abi_store: str | None):
    """List all contract addresses with a saved ABI"""
    from rich.table import Table
    from blockscope.abi_store import JsonFileAbiStore
    from blockscope.cli.utils import cli_logger_config
    from blockscope.decoding import filter_events, filter_functions

    console = cli_logger_config(root_logger)
    store = JsonFileAbiStore(abi_store)

    addresses = store.list_addresses()
    if not addresses:
        console.print("No ABIs saved")
        return

    abi_table = Table(box=None)
    abi_table.add_column("Address", style="bold")
    abi_table.add_column("Functions")
    abi_table.add_column("Events")
    for address in addresses:
        descriptors = store.get(address) or []
        abi_table.add_row(address, str(len(filter_functions(descriptors))), str(len(filter_events(descriptors))))

    console.print(abi_table)


@abi_group.command("show")
@click.argument("address")
@group_options(abi_store_option)
def show_abi(address: str, abi_store: str | None):
    """Print the functions of the ABI saved for ADDRESS"""
    from blockscope.abi_store import JsonFileAbiStore
    from blockscope.decoding import format_abi_for_display

    abi = JsonFileAbiStore(abi_store).get(address)
    if abi is None:
        raise click.UsageError(f"No ABI saved for {address}")

    click.echo(format_abi_for_display(abi))


@abi_group.command("remove")
@click.argument("address")
@group_options(abi_store_option)
def remove_abi(address: str, abi_store: str | None):
    """Remove the ABI saved for ADDRESS"""
    from blockscope.abi_store import JsonFileAbiStore

    if JsonFileAbiStore(abi_store).remove(address):
        click.echo(f"Removed ABI for {address.lower()}")
    else:
        click.echo(f"No ABI saved for {address.lower()}")
