import pytest

from blockscope.decoding import (
    filter_events,
    filter_functions,
    format_abi_for_display,
    load_abi,
    parse_abi,
)
from blockscope.exceptions import MalformedAbi
from blockscope.types import AbiParameter, DescriptorKind, StateMutability
from tests.resources.abi import ERC20_ABI_JSON, WETH_ABI_JSON


def test_parse_rejects_invalid_json():
    with pytest.raises(MalformedAbi):
        parse_abi("not json")


def test_parse_rejects_non_array():
    with pytest.raises(MalformedAbi):
        parse_abi('{"type":"function"}')

    with pytest.raises(MalformedAbi):
        load_abi({"type": "function"})


def test_malformed_abi_is_value_error():
    with pytest.raises(ValueError):
        parse_abi("[")


def test_parse_drops_unsupported_kinds():
    abi = parse_abi(WETH_ABI_JSON)

    assert [d.kind for d in abi] == [
        DescriptorKind.function,
        DescriptorKind.function,
        DescriptorKind.constructor,
        DescriptorKind.event,
    ]
    assert [d.name for d in abi] == ["deposit", "withdraw", "", "Deposit"]


def test_parse_is_idempotent_on_filtered_abi():
    abi = parse_abi(WETH_ABI_JSON)
    reparsed = load_abi([d.raw for d in abi])

    assert reparsed == abi


def test_parse_empty_array():
    assert parse_abi("[]") == []


def test_parse_skips_entries_without_type():
    assert parse_abi('[{"name": "foo"}, 12, "bar"]') == []


def test_parse_parameters():
    abi = parse_abi(ERC20_ABI_JSON)
    transfer = [f for f in filter_functions(abi) if f.name == "transfer"][0]

    assert transfer.inputs == (AbiParameter("address", "recipient"), AbiParameter("uint256", "amount"))
    assert transfer.outputs == (AbiParameter("bool", ""),)
    assert transfer.state_mutability is StateMutability.nonpayable

    transfer_event = [e for e in filter_events(abi) if e.name == "Transfer"][0]
    assert [p.indexed for p in transfer_event.inputs] == [True, True, False]
    assert transfer_event.outputs == ()


def test_missing_state_mutability_displays_nonpayable():
    abi = parse_abi(ERC20_ABI_JSON)
    approve = [f for f in filter_functions(abi) if f.name == "approve"][0]

    assert approve.state_mutability is None
    assert approve.display_mutability == "nonpayable"


def test_unknown_state_mutability():
    abi = parse_abi('[{"type": "function", "name": "f", "inputs": [], "stateMutability": "constant"}]')
    assert abi[0].state_mutability is None


def test_missing_parameter_name_is_allowed():
    abi = parse_abi('[{"type": "function", "name": "f", "inputs": [{"type": "uint256"}]}]')
    assert abi[0].inputs[0].name == ""


def test_parameter_without_type_is_malformed():
    with pytest.raises(MalformedAbi):
        parse_abi('[{"type": "function", "name": "f", "inputs": [{"name": "x", "type": ""}]}]')


def test_duplicate_entries_are_kept():
    entry = '{"type": "function", "name": "f", "inputs": []}'
    abi = parse_abi(f"[{entry}, {entry}]")

    assert len(abi) == 2
    assert abi[0] == abi[1]


def test_format_abi_for_display():
    abi = parse_abi(ERC20_ABI_JSON)
    lines = format_abi_for_display(abi).split("\n")

    assert len(lines) == 7
    assert "transfer(address recipient, uint256 amount) nonpayable returns (bool)" in lines
    assert "approve(address spender, uint256 amount) nonpayable returns (bool)" in lines
    assert "name() view returns (string)" in lines


def test_format_void_functions():
    abi = parse_abi(WETH_ABI_JSON)
    assert format_abi_for_display(abi) == (
        "deposit() payable returns (void)\nwithdraw(uint256 wad) nonpayable returns (void)"
    )
