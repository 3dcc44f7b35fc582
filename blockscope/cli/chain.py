import logging
from typing import Any, get_args

import click

from blockscope.cli.utils import (
    abi_store_option,
    full_option,
    group_options,
    json_output_option,
    json_rpc_option,
    verbose_option,
)
from blockscope.rpc import BlockIdentifier, BlockTag, parse_block_identifier

# isort: skip_file
# pylint: disable=too-many-arguments,import-outside-toplevel,too-many-locals,raise-missing-from

root_logger = logging.getLogger("blockscope")
logger = root_logger.getChild("cli").getChild("chain")


def _parse_cli_block(value: str, param_hint: str) -> BlockIdentifier:
    try:
        return parse_block_identifier(value)
    except ValueError:
        raise click.BadParameter(
            f"Expected a block number or one of {', '.join(get_args(BlockTag))}, not {value!r}",
            param_hint=param_hint,
        )


@click.command("block")
@click.argument("block_id", default="latest")
@group_options(json_rpc_option, json_output_option, verbose_option)
def block_command(block_id: str, json_rpc: str, json_output: bool, verbose: bool):
    """
    Fetch block BLOCK_ID by number or tag, ie 17000000, 0x1036640 or latest.  Defaults to the latest block
    """
    import datetime
    from rich.table import Table
    from blockscope.cli.utils import cli_logger_config, echo_json
    from blockscope.exceptions import RPCError
    from blockscope.rpc import JsonRpcClient, hex_to_int

    console = cli_logger_config(root_logger, verbose)
    block_identifier = _parse_cli_block(block_id, "BLOCK_ID")

    try:
        block = JsonRpcClient(json_rpc).get_block(block_identifier, full_transactions=False)
    except RPCError as e:
        raise click.ClickException(f"RPC Error: {e}")

    if block is None:
        raise click.ClickException(f"Block {block_id} not found")

    timestamp = hex_to_int(block.get("timestamp"))
    gas_used, gas_limit = hex_to_int(block.get("gasUsed")), hex_to_int(block.get("gasLimit"))
    base_fee = hex_to_int(block["baseFeePerGas"]) if block.get("baseFeePerGas") else None
    size = hex_to_int(block.get("size"))

    summary = {
        "number": hex_to_int(block.get("number")),
        "hash": block.get("hash"),
        "parentHash": block.get("parentHash"),
        "timestamp": timestamp,
        "miner": block.get("miner"),
        "transactions": len(block.get("transactions") or []),
        "gasUsed": gas_used,
        "gasLimit": gas_limit,
        "baseFeePerGas": base_fee,
        "size": size,
    }

    if json_output:
        echo_json(summary)
        return

    block_time = datetime.datetime.fromtimestamp(timestamp, tz=datetime.timezone.utc)
    gas_pct = f" ({gas_used / gas_limit:.2%})" if gas_limit else ""

    block_table = Table(box=None, show_header=False)
    block_table.add_column("Field", style="bold")
    block_table.add_column("Value", overflow="fold")
    block_table.add_row("Block", str(summary["number"]))
    block_table.add_row("Hash", str(summary["hash"]))
    block_table.add_row("Parent Hash", str(summary["parentHash"]))
    block_table.add_row("Timestamp", block_time.strftime("%Y-%m-%d %H:%M:%S UTC"))
    block_table.add_row("Miner", str(summary["miner"]))
    block_table.add_row("Transactions", str(summary["transactions"]))
    block_table.add_row("Gas Used", f"{gas_used:,}{gas_pct}")
    block_table.add_row("Gas Limit", f"{gas_limit:,}")
    if base_fee is not None:
        block_table.add_row("Base Fee", f"{base_fee:,} wei")
    block_table.add_row("Size", f"{size / 1024:.2f} KB")

    console.print(block_table)


@click.command("address")
@click.argument("address")
@group_options(json_rpc_option, abi_store_option, json_output_option, verbose_option)
def address_command(address: str, json_rpc: str, abi_store: str | None, json_output: bool, verbose: bool):
    """
    Print the balance, nonce and account type of ADDRESS, and whether an ABI is saved for it
    """
    from blockscope.abi_store import JsonFileAbiStore
    from blockscope.cli.utils import cli_logger_config, echo_json
    from blockscope.decoding import filter_events, filter_functions
    from blockscope.exceptions import RPCError
    from blockscope.rpc import JsonRpcClient, format_ether, is_contract_code

    console = cli_logger_config(root_logger, verbose)
    client = JsonRpcClient(json_rpc)

    try:
        balance = client.get_balance(address)
        nonce = client.get_transaction_count(address)
        code = client.get_code(address)
    except RPCError as e:
        raise click.ClickException(f"RPC Error: {e}")

    is_contract = is_contract_code(code)
    abi = JsonFileAbiStore(abi_store).get(address)

    summary = {
        "address": address.lower(),
        "balance": str(balance),
        "transactionCount": nonce,
        "isContract": is_contract,
        "codeSize": (len(code) - 2) // 2 if is_contract else 0,
        "abiSaved": abi is not None,
        "functions": len(filter_functions(abi)) if abi else 0,
        "events": len(filter_events(abi)) if abi else 0,
    }

    if json_output:
        echo_json(summary)
        return

    console.print(f"[bold]Address:[/bold] {summary['address']}")
    console.print(f"[bold]Type:[/bold] {'Contract' if is_contract else 'EOA'}")
    console.print(f"[bold]Balance:[/bold] {format_ether(balance)}")
    console.print(f"[bold]Transactions:[/bold] {nonce}")

    if not is_contract:
        return

    console.print(f"[bold]Bytecode:[/bold] {summary['codeSize']} bytes")
    if abi is None:
        console.print(f"No ABI saved.  Add one with 'blockscope abi add {summary['address']} ABI_JSON'")
    else:
        console.print(f"[bold]ABI:[/bold] {summary['functions']} functions, {summary['events']} events")


@click.command("logs")
@click.option("--address", "address", default=None, help="Only fetch logs emitted by this contract")
@click.option("--from-block", "from_block", default="latest", show_default=True, help="First block to search")
@click.option("--to-block", "to_block", default="latest", show_default=True, help="Last block to search")
@click.option(
    "--topic",
    "-t",
    "topics",
    multiple=True,
    help="Topic filter.  Pass once per topic position, in order.  Use 'any' to match any value at a position",
)
@group_options(json_rpc_option, abi_store_option, full_option, json_output_option, verbose_option)
def logs_command(from_block, to_block, address, topics, json_rpc, abi_store, full, json_output, verbose):
    """
    Fetch logs with eth_getLogs and decode them with saved ABIs.  Logs are decoded with the ABI saved for the
    contract that emitted them.
    """
    from blockscope.abi_store import JsonFileAbiStore
    from blockscope.cli.utils import cli_logger_config, echo_json, log_results_to_json, print_log_results
    from blockscope.decoding import LogEntry, decode_receipt_logs
    from blockscope.exceptions import RPCError
    from blockscope.rpc import JsonRpcClient, hex_to_int, to_block_param

    console = cli_logger_config(root_logger, verbose)
    store = JsonFileAbiStore(abi_store)

    log_filter: dict[str, Any] = {
        "fromBlock": to_block_param(_parse_cli_block(from_block, "--from-block")),
        "toBlock": to_block_param(_parse_cli_block(to_block, "--to-block")),
    }
    if address:
        log_filter["address"] = address
    if topics:
        log_filter["topics"] = [None if topic.lower() == "any" else topic for topic in topics]

    try:
        raw_logs = JsonRpcClient(json_rpc).get_logs(log_filter)
    except RPCError as e:
        raise click.ClickException(f"RPC Error: {e}")

    logs = [LogEntry.from_rpc(log) for log in raw_logs]
    primary_abi = store.get(address) if address else None
    log_results = decode_receipt_logs(logs, address, primary_abi, store, full=full)

    if json_output:
        echo_json(
            [
                {
                    "blockNumber": hex_to_int(raw_log.get("blockNumber")),
                    "transactionHash": raw_log.get("transactionHash"),
                    **log_json,
                }
                for raw_log, log_json in zip(raw_logs, log_results_to_json(log_results))
            ]
        )
        return

    console.print(f"[bold]{len(log_results)} log{'s' if len(log_results) != 1 else ''} found")
    print_log_results(console, log_results)


@click.command("status")
@group_options(json_rpc_option, json_output_option, verbose_option)
def status_command(json_rpc: str, json_output: bool, verbose: bool):
    """Check the connection to the RPC node, and print its chain id, latest block and gas price"""
    from blockscope.cli.utils import cli_logger_config, echo_json
    from blockscope.exceptions import RPCError
    from blockscope.rpc import JsonRpcClient, format_gwei

    console = cli_logger_config(root_logger, verbose)
    client = JsonRpcClient(json_rpc)

    if not client.is_connected():
        raise click.ClickException(f"Could not connect to RPC {json_rpc}")

    try:
        status = {
            "rpc": json_rpc,
            "chainId": client.get_chain_id(),
            "blockNumber": client.get_block_number(),
            "gasPrice": client.get_gas_price(),
        }
    except RPCError as e:
        raise click.ClickException(f"RPC Error: {e}")

    if json_output:
        echo_json(status)
        return

    console.print(f"[green]Connected to {json_rpc}")
    console.print(f"[bold]Chain ID:[/bold] {status['chainId']}")
    console.print(f"[bold]Latest Block:[/bold] {status['blockNumber']}")
    console.print(f"[bold]Gas Price:[/bold] {format_gwei(status['gasPrice'])}")
