import json
import logging
from typing import Any, Sequence

from blockscope.exceptions import MalformedAbi
from blockscope.types.abi import (
    AbiDescriptor,
    AbiParameter,
    DescriptorKind,
    StateMutability,
)

root_logger = logging.getLogger("blockscope")
logger = root_logger.getChild("decoding").getChild("abi")

RETAINED_KINDS = {kind.value: kind for kind in DescriptorKind}


def parse_abi(json_text: str) -> list[AbiDescriptor]:
    """
    Parses ABI JSON text into descriptors.  Only function, constructor and event entries are retained,
    fallback, receive, error and any other entry kinds are silently dropped.  Input order is preserved,
    and duplicate entries are not removed.

    :param json_text: ABI JSON array
    :raises MalformedAbi: If the text is not JSON, or does not contain a JSON array
    """
    try:
        abi_json = json.loads(json_text)
    except (json.JSONDecodeError, TypeError) as e:
        raise MalformedAbi("Invalid ABI format. Please paste a valid JSON ABI.") from e

    return load_abi(abi_json)


def load_abi(abi_json: Any) -> list[AbiDescriptor]:
    """
    Loads descriptors from already decoded ABI JSON.

    :param abi_json: List of ABI entry dicts
    :raises MalformedAbi: If abi_json is not a list, or a parameter is missing its type
    """
    if not isinstance(abi_json, list):
        raise MalformedAbi(f"ABI must be a JSON array, not {type(abi_json).__name__}")

    descriptors = []
    for entry in abi_json:
        if not isinstance(entry, dict):
            continue

        kind = RETAINED_KINDS.get(entry.get("type", ""))
        if kind is None:
            logger.debug(f"Dropping ABI entry with type {entry.get('type')!r}")
            continue

        descriptors.append(_load_descriptor(entry, kind))

    return descriptors


def _load_descriptor(entry: dict[str, Any], kind: DescriptorKind) -> AbiDescriptor:
    mutability = entry.get("stateMutability")
    try:
        state_mutability = StateMutability(mutability) if mutability else None
    except ValueError:
        state_mutability = None

    return AbiDescriptor(
        kind=kind,
        name=entry.get("name") or "",
        inputs=tuple(_load_parameter(p) for p in entry.get("inputs") or []),
        outputs=(
            tuple(_load_parameter(p) for p in entry.get("outputs") or []) if kind is DescriptorKind.function else ()
        ),
        state_mutability=state_mutability,
        anonymous=bool(entry.get("anonymous", False)),
        raw=entry,
    )


def _load_parameter(param: Any) -> AbiParameter:
    if not isinstance(param, dict) or not isinstance(param.get("type"), str) or not param["type"]:
        raise MalformedAbi(f"ABI parameter must have a non-empty type: {param!r}")

    return AbiParameter(
        type=param["type"],
        name=param.get("name") or "",
        indexed=bool(param.get("indexed", False)),
        components=tuple(_load_parameter(c) for c in param.get("components") or []),
    )


def filter_functions(descriptors: Sequence[AbiDescriptor]) -> list[AbiDescriptor]:
    """Filters out all non-function descriptors"""
    return [d for d in descriptors if d.kind is DescriptorKind.function]


def filter_events(descriptors: Sequence[AbiDescriptor]) -> list[AbiDescriptor]:
    """Filters out all non-event descriptors"""
    return [d for d in descriptors if d.kind is DescriptorKind.event]


def format_abi_for_display(descriptors: Sequence[AbiDescriptor]) -> str:
    """
    Formats ABI functions for display, one function per line

    >>> print(format_abi_for_display(parse_abi('[{"type": "function", "name": "balanceOf", '
    ...     '"inputs": [{"name": "owner", "type": "address"}], "outputs": [{"name": "", "type": "uint256"}], '
    ...     '"stateMutability": "view"}]')))
    balanceOf(address owner) view returns (uint256)
    """
    lines = []
    for func in filter_functions(descriptors):
        params = ", ".join(f"{p.type} {p.name}" for p in func.inputs)
        returns = ", ".join(p.type for p in func.outputs) or "void"
        lines.append(f"{func.name}({params}) {func.display_mutability} returns ({returns})")

    return "\n".join(lines)
