import functools
from typing import Protocol, Sequence

from eth_utils.abi import (
    event_signature_to_log_topic,
    function_signature_to_4byte_selector,
)


class _Param(Protocol):
    type: str
    components: Sequence["_Param"]


class _Signed(Protocol):
    name: str
    inputs: Sequence[_Param]


@functools.lru_cache(maxsize=4096)
def derive_selector(signature: str) -> str:
    """
    Returns the 4 byte function selector for a canonical signature as a 0x prefixed hexstring.  Selectors are
    the first 4 bytes of the keccak-256 hash of the signature.

    >>> derive_selector("transfer(address,uint256)")
    '0xa9059cbb'

    :param signature: Canonical signature without parameter names or spaces
    """
    return "0x" + function_signature_to_4byte_selector(signature).hex()


@functools.lru_cache(maxsize=4096)
def derive_event_topic(signature: str) -> str:
    """
    Returns the full 32 byte keccak-256 hash of an event signature.  Used to match topic 0 of a log

    >>> derive_event_topic("Transfer(address,address,uint256)")
    '0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef'
    """
    return "0x" + event_signature_to_log_topic(signature).hex()


def collapse_if_tuple(param: _Param) -> str:
    """
    Converts a tuple parameter into a parenthesized list of its component types.  Tuples without
    components are returned unchanged.

    >>> from blockscope.types import AbiParameter
    >>> collapse_if_tuple(
    ...     AbiParameter(
    ...         type="tuple[]",
    ...         components=(AbiParameter("address", "anAddress"), AbiParameter("uint256", "anInt")),
    ...     )
    ... )
    '(address,uint256)[]'
    """
    typ = param.type
    if not typ.startswith("tuple") or not param.components:
        return typ

    delimited = ",".join(collapse_if_tuple(c) for c in param.components)
    # Whatever comes after "tuple" is the array dims.  "", "[]", or "[k]"
    array_dim = typ[5:]
    return f"({delimited}){array_dim}"


def abi_to_signature(abi: _Signed) -> str:
    """
    Builds the canonical signature of a function or event descriptor.  Parameter names are excluded.

    >>> from blockscope.decoding import parse_abi
    >>> abi_to_signature(parse_abi('[{"type": "function", "name": "approve", "inputs": '
    ...     '[{"name": "spender", "type": "address"}, {"name": "value", "type": "uint256"}]}]')[0])
    'approve(address,uint256)'
    """
    return f"{abi.name}({','.join(collapse_if_tuple(param) for param in abi.inputs)})"


def signature_to_name(signature: str) -> str:
    """
    Removes types from a signature

    >>> signature_to_name("swap(address,address,uint256,uint256,int128)")
    'swap'
    """
    index = signature.find("(")
    if index != -1:
        return signature[:index]
    return signature
