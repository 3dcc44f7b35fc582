import json

from blockscope.abi_store import InMemoryAbiStore
from blockscope.decoding import LogEntry, decode_receipt_logs, derive_event_topic, resolve_log_abi
from tests.resources.abi import ERC20_ABI_JSON, TRANSFER_TOPIC, WETH_ABI_JSON
from tests.utils import encode_address, encode_slot


ROUTER = "0x7a250d5630B4cF539739dF2C5dAcb4c659F2488D"
WETH = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"
DAI = "0x6B175474E89094C44Da98b954EedeAC495271d0F"
SENDER = "0xc0140cfc3988101a7c1ac769af92fb1ffca80f58"


def _deposit_log(address: str) -> LogEntry:
    return LogEntry(
        address=address,
        topics=(derive_event_topic("Deposit(address,uint256)"), "0x" + encode_address(SENDER)),
        data="0x" + encode_slot(5),
    )


def _transfer_log(address: str) -> LogEntry:
    return LogEntry(
        address=address,
        topics=(TRANSFER_TOPIC, "0x" + encode_address(SENDER), "0x" + encode_address(ROUTER)),
        data="0x" + encode_slot(7),
    )


def test_primary_contract_uses_primary_abi(erc20_abi):
    log = _transfer_log(DAI.lower())
    assert resolve_log_abi(log, DAI, erc20_abi) is erc20_abi


def test_other_contract_uses_lookup(erc20_abi):
    store = InMemoryAbiStore({WETH: json.loads(WETH_ABI_JSON)})

    resolved = resolve_log_abi(_deposit_log(WETH), DAI, erc20_abi, store)
    assert resolved is not None
    assert resolved != erc20_abi
    assert [d.name for d in resolved][:2] == ["deposit", "withdraw"]


def test_other_contract_without_abi(erc20_abi):
    assert resolve_log_abi(_deposit_log(WETH), DAI, erc20_abi) is None
    assert resolve_log_abi(_deposit_log(WETH), DAI, erc20_abi, InMemoryAbiStore()) is None


def test_decode_receipt_logs(erc20_abi):
    store = InMemoryAbiStore({DAI: json.loads(ERC20_ABI_JSON)})
    logs = [_deposit_log(WETH), _transfer_log(DAI), _transfer_log(ROUTER)]

    results = decode_receipt_logs(logs, WETH, None, store)

    assert [r.log for r in results] == logs
    # Primary contract without an ABI
    assert results[0].event is None and results[0].needs_abi
    assert results[1].event.name == "Transfer" and not results[1].needs_abi
    assert results[1].event.params[2].value == "7"
    assert results[2].event is None and results[2].needs_abi


def test_decode_receipt_logs_with_primary_abi():
    store = InMemoryAbiStore({DAI: json.loads(ERC20_ABI_JSON)})
    dai_abi = store.get(DAI)

    results = decode_receipt_logs([_transfer_log(DAI), _deposit_log(DAI)], DAI, dai_abi, store)

    assert results[0].event.name == "Transfer"
    # ABI is known, but Deposit is not part of it
    assert results[1].event is None
    assert not results[1].needs_abi


def test_receipt_log_with_null_topic(erc20_abi):
    broken = LogEntry(address=DAI, topics=(TRANSFER_TOPIC, None, "0x" + encode_address(ROUTER)), data="0x")

    results = decode_receipt_logs([broken, _transfer_log(DAI)], DAI, erc20_abi)

    assert results[0].event is None and not results[0].needs_abi
    assert results[1].event.name == "Transfer"
