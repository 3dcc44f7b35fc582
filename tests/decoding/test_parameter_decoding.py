import pytest

from blockscope.decoding import AbiTypeKind, classify_type, decode_parameters, decode_slot
from blockscope.exceptions import DecodingError
from blockscope.types import AbiParameter, DecodedParameter
from tests.utils import encode_address, encode_slot, uint_max


@pytest.mark.parametrize(
    "abi_type, kind",
    [
        ("address", AbiTypeKind.address),
        ("bool", AbiTypeKind.bool),
        ("uint256", AbiTypeKind.integer),
        ("uint8", AbiTypeKind.integer),
        ("int128", AbiTypeKind.integer),
        ("string", AbiTypeKind.raw),
        ("bytes", AbiTypeKind.raw),
        ("bytes32", AbiTypeKind.raw),
        ("uint256[]", AbiTypeKind.raw),
        ("address[3]", AbiTypeKind.raw),
        ("tuple", AbiTypeKind.raw),
    ],
)
def test_classify_type(abi_type, kind):
    assert classify_type(abi_type) is kind


def test_address_slot():
    slot = "0x000000000000000000000000742d35cc6634c0532925a3b844bc9e7595f0beb"
    assert decode_slot(slot[2:], "address") == "0x742d35cc6634c0532925a3b844bc9e7595f0beb"

    full_slot = encode_address("0xf8e81D47203A594245E36C48e151709F0C19fBe8")
    assert decode_slot(full_slot, "address") == "0xf8e81d47203a594245e36c48e151709f0c19fbe8"


def test_bool_slots():
    assert decode_slot("0" * 62 + "01", "bool") == "true"
    assert decode_slot("0" * 64, "bool") == "false"
    assert decode_slot("0" * 62 + "02", "bool") == "false"


def test_large_integer_fidelity():
    value = 123456789012345678901234567890
    assert decode_slot(encode_slot(value), "uint256") == "123456789012345678901234567890"
    assert decode_slot(encode_slot(uint_max(256)), "uint256") == str(2**256 - 1)
    assert decode_slot(encode_slot(2**53 + 1), "uint64") == "9007199254740993"


def test_signed_integers_are_rendered_unsigned():
    assert decode_slot("f" * 64, "int256") == str(uint_max(256))


def test_raw_passthrough():
    slot = encode_slot(0x20)
    assert decode_slot(slot, "string") == "0x" + slot
    assert decode_slot(slot, "bytes32") == "0x" + slot


def test_empty_slots():
    assert decode_slot("", "address") == "0x"
    assert decode_slot("", "uint256") == ""
    assert decode_slot("", "bool") == "false"
    assert decode_slot("", "bytes") == "0x"


def test_invalid_hex_slot():
    with pytest.raises(DecodingError):
        decode_slot("zz" * 32, "uint256")


def test_empty_input():
    assert decode_parameters("", []) == []
    assert decode_parameters("0x", []) == []


def test_decode_parameters_in_order():
    params = [AbiParameter("address", "to"), AbiParameter("uint256", "amount"), AbiParameter("bool", "")]
    blob = encode_address("0xbEbc44782C7dB0a1A60Cb6fe97d0b483032FF1C7") + encode_slot(36124523) + encode_slot(1)

    assert decode_parameters(blob, params) == [
        DecodedParameter("to", "address", "0xbebc44782c7db0a1a60cb6fe97d0b483032ff1c7"),
        DecodedParameter("amount", "uint256", "36124523"),
        DecodedParameter("param2", "bool", "true"),
    ]
    assert decode_parameters("0x" + blob, params) == decode_parameters(blob, params)


def test_unnamed_output_prefix():
    decoded = decode_parameters(encode_slot(7), [AbiParameter("uint256")], name_prefix="return")
    assert decoded[0].name == "return0"


def test_short_blob_degrades():
    params = [AbiParameter("uint256", "a"), AbiParameter("address", "b"), AbiParameter("bool", "c")]
    decoded = decode_parameters(encode_slot(5) + "0" * 30, params)

    assert [p.value for p in decoded] == ["5", "0x000000", "false"]


def test_dynamic_types_return_raw_slot():
    params = [AbiParameter("string", "name"), AbiParameter("uint256[]", "ids")]
    blob = encode_slot(0x40) + encode_slot(0x80) + encode_slot(5) + "68656c6c6f".ljust(64, "0")

    decoded = decode_parameters(blob, params)
    assert decoded[0].value == "0x" + encode_slot(0x40)
    assert decoded[1].value == "0x" + encode_slot(0x80)


def test_full_decoding_of_dynamic_types():
    params = [AbiParameter("string", "name"), AbiParameter("uint256[]", "ids"), AbiParameter("bool", "")]
    blob = (
        encode_slot(0x60)
        + encode_slot(0xA0)
        + encode_slot(1)
        + encode_slot(5)
        + "68656c6c6f".ljust(64, "0")
        + encode_slot(2)
        + encode_slot(1)
        + encode_slot(2)
    )

    decoded = decode_parameters(blob, params, full=True)
    assert [p.value for p in decoded] == ["hello", "[1, 2]", "true"]
    assert decoded[2].name == "param2"


def test_full_decoding_of_tuples():
    params = [
        AbiParameter(
            "tuple",
            "order",
            components=(AbiParameter("address", "maker"), AbiParameter("int256", "amount")),
        )
    ]
    blob = encode_address("0xf8e81D47203A594245E36C48e151709F0C19fBe8") + "f" * 64

    decoded = decode_parameters(blob, params, full=True)
    assert decoded[0].value == "(0xf8e81d47203a594245e36c48e151709f0c19fbe8, -1)"


def test_full_decoding_falls_back_to_slots():
    params = [AbiParameter("string", "name")]
    # Offset points past the end of the data
    blob = encode_slot(0x400)

    decoded = decode_parameters(blob, params, full=True)
    assert decoded[0].value == "0x" + encode_slot(0x400)


def test_full_decoding_empty_params():
    assert decode_parameters("", [], full=True) == []
