import logging
from decimal import Decimal
from typing import Any, Literal, get_args

import requests

from blockscope.exceptions import RPCError

root_logger = logging.getLogger("blockscope")
logger = root_logger.getChild("rpc")

DEFAULT_RPC = "http://localhost:8545"
DEFAULT_HEADERS = {"Content-Type": "application/json"}

BlockTag = Literal["latest", "earliest", "pending", "safe", "finalized"]
BlockIdentifier = int | BlockTag

WEI_PER_ETHER = 10**18
WEI_PER_GWEI = 10**9

# pylint: disable=raise-missing-from


def to_hex(value: int) -> str:
    """Converts an int to a 0x prefixed JSON-RPC quantity"""
    return hex(value)


def hex_to_int(value: str | None) -> int:
    """Converts a JSON-RPC quantity to an int.  None and 0x are converted to 0"""
    if not value or value == "0x":
        return 0
    return int(value, 16)


def to_block_param(block: BlockIdentifier) -> str:
    """Converts a block number or tag into the block parameter of a JSON-RPC request"""
    return to_hex(block) if isinstance(block, int) else block


def parse_block_identifier(value: str) -> BlockIdentifier:
    """
    Parses a block number or tag from user input.  Numbers can be decimal or 0x prefixed hex

    >>> parse_block_identifier("17000000"), parse_block_identifier("0x10"), parse_block_identifier("Latest")
    (17000000, 16, 'latest')

    :raises ValueError: If value is neither a non-negative number nor a block tag
    """
    value = value.strip().lower()
    if value in get_args(BlockTag):
        return value  # type: ignore[return-value]

    block_number = int(value, 16) if value.startswith("0x") else int(value)
    if block_number < 0:
        raise ValueError(f"Block number must be positive, not {block_number}")
    return block_number


def is_contract_code(code: str | None) -> bool:
    """Returns True if eth_getCode returned deployed bytecode"""
    return bool(code) and code not in ("0x", "0x0")


def format_ether(wei: int) -> str:
    """Formats a wei amount as ether, ie 1.5 ETH"""
    ether = Decimal(wei) / Decimal(WEI_PER_ETHER)
    return f"{ether.normalize():f} ETH"


def format_gwei(wei: int) -> str:
    return f"{Decimal(wei) / Decimal(WEI_PER_GWEI):.2f} Gwei"


class JsonRpcClient:
    """
    Minimal JSON-RPC 2.0 client for EVM nodes.  Used by the CLI to fetch transactions, receipts and logs for
    decoding.
    """

    url: str
    timeout: int
    request_id: int

    def __init__(self, url: str = DEFAULT_RPC, timeout: int = 30):
        self.url = url
        self.timeout = timeout
        self.request_id = 1

    def _create_request(self, method: str, params: list[Any]) -> dict[str, Any]:
        request = {"jsonrpc": "2.0", "method": method, "params": params, "id": self.request_id}
        self.request_id += 1
        return request

    def call(self, method: str, params: list[Any] | None = None) -> Any:
        """
        Sends a JSON-RPC request and returns the result field of the response

        :param method: JSON-RPC method, ie eth_getTransactionByHash
        :param params: Method parameters
        :raises RPCError: If the request fails, the response is not JSON, or the node returns an error
        """
        request = self._create_request(method, params or [])
        logger.debug(f"Sending {method} request to {self.url}")

        try:
            response = requests.post(self.url, json=request, headers=DEFAULT_HEADERS, timeout=self.timeout)
        except requests.RequestException as e:
            raise RPCError(f"Could not connect to RPC {self.url}: {e}")

        if not response.ok:
            raise RPCError(f"HTTP error from RPC {self.url}! status: {response.status_code}")

        try:
            response_json = response.json()
        except ValueError:
            raise RPCError(
                f"Invalid RPC endpoint. Expected JSON but received {response.headers.get('content-type')}"
            )

        if response_json.get("error"):
            error = response_json["error"]
            logger.debug(f"Error in RPC response for {method}: {error}")
            raise RPCError(error.get("message", str(error)), error.get("code"))

        return response_json.get("result")

    def get_block_number(self) -> int:
        return hex_to_int(self.call("eth_blockNumber"))

    def get_block(self, block: BlockIdentifier = "latest", full_transactions: bool = True) -> dict[str, Any] | None:
        """Returns block by number or tag.  Transactions are returned as objects if full_transactions is True"""
        return self.call("eth_getBlockByNumber", [to_block_param(block), full_transactions])

    def get_transaction(self, tx_hash: str) -> dict[str, Any] | None:
        return self.call("eth_getTransactionByHash", [tx_hash])

    def get_transaction_receipt(self, tx_hash: str) -> dict[str, Any] | None:
        return self.call("eth_getTransactionReceipt", [tx_hash])

    def get_logs(self, log_filter: dict[str, Any]) -> list[dict[str, Any]]:
        return self.call("eth_getLogs", [log_filter]) or []

    def get_code(self, address: str, block: BlockIdentifier = "latest") -> str:
        return self.call("eth_getCode", [address, to_block_param(block)]) or "0x"

    def get_balance(self, address: str, block: BlockIdentifier = "latest") -> int:
        return hex_to_int(self.call("eth_getBalance", [address, to_block_param(block)]))

    def get_transaction_count(self, address: str, block: BlockIdentifier = "latest") -> int:
        return hex_to_int(self.call("eth_getTransactionCount", [address, to_block_param(block)]))

    def get_chain_id(self) -> int:
        return hex_to_int(self.call("eth_chainId"))

    def get_gas_price(self) -> int:
        return hex_to_int(self.call("eth_gasPrice"))

    def is_connected(self) -> bool:
        """Returns True if the node responds to net_version"""
        try:
            self.call("net_version")
            return True
        except RPCError:
            return False
