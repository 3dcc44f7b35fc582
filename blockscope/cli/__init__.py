import click

from blockscope.cli.abi import abi_group
from blockscope.cli.chain import address_command, block_command, logs_command, status_command
from blockscope.cli.decode import decode_group, selector_command
from blockscope.cli.tx import tx_command


@click.group()
def blockscope_cli():
    """Command Line Interface for Blockscope"""


# Adding Command Groups
blockscope_cli.add_command(decode_group, name="decode")
blockscope_cli.add_command(abi_group, name="abi")
blockscope_cli.add_command(selector_command, name="selector")
blockscope_cli.add_command(tx_command, name="tx")
blockscope_cli.add_command(block_command, name="block")
blockscope_cli.add_command(address_command, name="address")
blockscope_cli.add_command(logs_command, name="logs")
blockscope_cli.add_command(status_command, name="status")
