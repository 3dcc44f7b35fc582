import logging
import string
import traceback
from enum import Enum
from typing import Any, Sequence

from eth_abi import decode as eth_abi_decode
from eth_abi.exceptions import DecodingError as EthAbiDecodingError
from eth_abi.exceptions import InsufficientDataBytes, NonEmptyPaddingBytes, ParseError
from eth_abi.grammar import ABIType, TupleType
from eth_abi.grammar import parse as parse_abi_type

from blockscope.exceptions import DecodingError
from blockscope.types.abi import AbiParameter
from blockscope.types.decoding import DecodedParameter

from .selectors import collapse_if_tuple

root_logger = logging.getLogger("blockscope")
logger = root_logger.getChild("decoding").getChild("parameters")

SLOT_SIZE = 64
""" Hex characters in a single 32 byte ABI slot """

_HEX_DIGITS = frozenset(string.hexdigits)


class AbiTypeKind(Enum):
    """Decoding rule applied to a single 32 byte slot"""

    address = "address"
    integer = "integer"
    bool = "bool"
    raw = "raw"


def classify_type(abi_type: str) -> AbiTypeKind:
    """
    Classifies an ABI type string into the slot decoding rule used for it.  Arrays, tuples, dynamic types
    and fixed size byte arrays are all decoded as raw hex.

    >>> classify_type("uint256"), classify_type("int8"), classify_type("uint256[]")
    (<AbiTypeKind.integer: 'integer'>, <AbiTypeKind.integer: 'integer'>, <AbiTypeKind.raw: 'raw'>)
    """
    if abi_type == "address":
        return AbiTypeKind.address
    if abi_type == "bool":
        return AbiTypeKind.bool
    if abi_type.startswith(("uint", "int")) and "[" not in abi_type:
        return AbiTypeKind.integer
    return AbiTypeKind.raw


def strip_hex_prefix(hex_str: str) -> str:
    """Removes a leading 0x from a hexstring if present"""
    if hex_str[:2] in ("0x", "0X"):
        return hex_str[2:]
    return hex_str


def decode_slot(slot_hex: str, abi_type: str) -> str:
    """
    Decodes a single 32 byte slot into a display string.  Slots shorter than 32 bytes are decoded
    on a best effort basis, an empty slot decodes to ``0x`` for addresses & raw values, an empty string
    for integers, and ``false`` for bools.

    :param slot_hex: Hex characters of the slot without a 0x prefix
    :param abi_type: ABI type of the parameter stored in the slot
    :raises DecodingError: If the slot contains non-hex characters
    """
    if not _HEX_DIGITS.issuperset(slot_hex):
        raise DecodingError(f"Slot {slot_hex!r} for type {abi_type} is not valid hex")

    match classify_type(abi_type):
        case AbiTypeKind.address:
            return "0x" + slot_hex[24:].lower()
        case AbiTypeKind.integer:
            # Slots are rendered as unsigned big endian ints, including intN types
            return str(int(slot_hex, 16)) if slot_hex else ""
        case AbiTypeKind.bool:
            return "true" if slot_hex and int(slot_hex, 16) == 1 else "false"
        case AbiTypeKind.raw:
            return "0x" + slot_hex
        case _:
            raise NotImplementedError(f"No slot decoder for type {abi_type}")


def decode_parameters(
    hex_blob: str,
    params: Sequence[AbiParameter],
    name_prefix: str = "param",
    full: bool = False,
) -> list[DecodedParameter]:
    """
    Decodes an ABI encoded parameter block.  By default, each parameter consumes a single 32 byte slot in
    declaration order.  Dynamic types are not followed through their offsets, and are returned as the raw
    contents of their slot.  If the blob is shorter than the parameter list, missing slots decode to empty
    values instead of raising.

    :param hex_blob: ABI encoded parameters, with or without a 0x prefix.  For calldata, this is everything
        after the 4 byte selector
    :param params: Parameter descriptors in declaration order
    :param name_prefix: Prefix used to name unnamed parameters, ie ``param0``, ``return1``
    :param full: If True, decodes dynamic types, arrays, and tuples with eth_abi.  Falls back to slot
        decoding if eth_abi fails to decode the data
    :return: Decoded parameters in declaration order
    """
    blob = strip_hex_prefix(hex_blob)

    if full and params:
        full_result = _decode_full(blob, params, name_prefix)
        if full_result is not None:
            return full_result
        logger.debug(f"Falling back to slot decoding for types {[p.type for p in params]}")

    decoded = []
    for index, param in enumerate(params):
        slot = blob[index * SLOT_SIZE : (index + 1) * SLOT_SIZE]
        decoded.append(
            DecodedParameter(
                name=param.name or f"{name_prefix}{index}",
                type=param.type,
                value=decode_slot(slot, param.type),
            )
        )

    return decoded


def decode_abi_from_types(types: list[str], data: bytes | bytearray) -> tuple[Any, ...] | None:
    """
    Decodes ABI data from types and data bytes using eth_abi.  Handles decoding errors by logging and
    returning None.

    :param types: ABI type strings, with tuples collapsed into parenthesized component types
    :param data: ABI encoded bytes
    """
    try:
        return eth_abi_decode(types, data)
    except InsufficientDataBytes:
        logger.debug(f"Insufficient data bytes while decoding {data.hex()} for types {types}")
        return None
    except NonEmptyPaddingBytes:
        logger.debug(f"Non-empty padding bytes while decoding {data.hex()} for types {types}")
        return None
    except OverflowError:
        logger.debug(f"Overflow error while decoding {data.hex()} for types {types}")
        return None
    except EthAbiDecodingError as e:
        logger.debug(f"Decoding error while decoding {data.hex()} for types {types}: {e}")
        return None
    except Exception as e:  # pylint: disable=broad-exception-caught
        logger.error(
            f"Unknown error while decoding {data.hex()} for types {types}: "
            f"{traceback.format_exception(type(e), e, e.__traceback__)}"
        )
        return None


def format_abi_value(value: Any, abi_type: ABIType) -> str:
    """
    Formats a value returned from eth_abi into a display string.  Arrays are rendered as [a, b], and
    tuples as (a, b)

    :param value: Decoded python value
    :param abi_type: Parsed eth_abi type of the value
    """
    if abi_type.is_array:
        return "[" + ", ".join(format_abi_value(v, abi_type.item_type) for v in value) + "]"

    if isinstance(abi_type, TupleType):
        return "(" + ", ".join(format_abi_value(v, t) for v, t in zip(value, abi_type.components, strict=True)) + ")"

    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (bytes, bytearray)):
        return "0x" + value.hex()
    if isinstance(value, int):
        return str(value)
    if abi_type.base == "address":  # type: ignore[attr-defined]
        return str(value).lower()
    return str(value)


def _decode_full(blob: str, params: Sequence[AbiParameter], name_prefix: str) -> list[DecodedParameter] | None:
    types = [collapse_if_tuple(p) for p in params]
    try:
        data = bytes.fromhex(blob)
        parsed_types = [parse_abi_type(t) for t in types]
    except (ValueError, ParseError) as e:
        logger.debug(f"Cannot decode {types} from {blob!r}: {e}")
        return None

    decoded = decode_abi_from_types(types, data)
    if decoded is None:
        return None

    return [
        DecodedParameter(
            name=param.name or f"{name_prefix}{index}",
            type=param.type,
            value=format_abi_value(value, parsed_type),
        )
        for index, (param, value, parsed_type) in enumerate(zip(params, decoded, parsed_types, strict=True))
    ]
