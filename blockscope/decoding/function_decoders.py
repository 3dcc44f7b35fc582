import logging
from typing import Sequence

from blockscope.exceptions import DecodingError
from blockscope.types.abi import AbiDescriptor
from blockscope.types.decoding import DecodedCall, DecodedParameter

from .abi import filter_functions
from .parameters import decode_parameters
from .selectors import derive_selector

root_logger = logging.getLogger("blockscope")
logger = root_logger.getChild("decoding").getChild("functions")

SELECTOR_LENGTH = 10
""" Length of a 0x prefixed 4 byte selector """


def extract_function_selector(input_data: str | None) -> str:
    """
    Returns the 0x prefixed 4 byte selector from transaction input.  Returns an empty string if the input
    is too short to contain a selector, which is the case for plain value transfers.
    """
    if not input_data or input_data == "0x" or len(input_data) < SELECTOR_LENGTH:
        return ""
    return input_data[:SELECTOR_LENGTH].lower()


def find_matching_function(descriptors: Sequence[AbiDescriptor], selector: str) -> AbiDescriptor | None:
    """
    Finds the function whose derived selector matches.  Comparison is case-insensitive.  If multiple
    functions share a selector, the first one in declaration order is returned.

    :param descriptors: Parsed ABI
    :param selector: 0x prefixed 4 byte selector
    :return: Matching function descriptor, or None if the function is not in the ABI
    """
    selector = selector.lower()
    for func in filter_functions(descriptors):
        if derive_selector(func.signature) == selector:
            return func
    return None


def decode_call(
    input_data: str | None,
    descriptors: Sequence[AbiDescriptor],
    full: bool = False,
) -> DecodedCall | None:
    """
    Matches & decodes transaction input against an ABI.

    :param input_data: 0x prefixed transaction input
    :param descriptors: Parsed ABI of the called contract
    :param full: Decode dynamic types with eth_abi instead of returning their raw slots
    :return: DecodedCall, or None for plain transfers, unknown selectors & undecodable input
    """
    selector = extract_function_selector(input_data)
    if not selector:
        return None

    function = find_matching_function(descriptors, selector)
    if function is None:
        logger.debug(f"Function with selector {selector} not found in ABI")
        return None

    try:
        params = decode_parameters(input_data[SELECTOR_LENGTH:], function.inputs, full=full)  # type: ignore[index]
    except (DecodingError, ValueError) as e:
        logger.debug(f"Error Decoding {function.signature} For Input {input_data}: {e}")
        return None

    return DecodedCall(descriptor=function, selector=selector, params=params)


def decode_function_result(
    output_data: str | None,
    function: AbiDescriptor,
    full: bool = False,
) -> list[DecodedParameter] | None:
    """
    Decodes the return data of a function call, ie the result of eth_call.  Unnamed outputs are
    named return0, return1, ...

    :param output_data: 0x prefixed return data
    :param function: Function descriptor that produced the return data
    :param full: Decode dynamic types with eth_abi instead of returning their raw slots
    :return: Decoded outputs, or None if the data could not be decoded
    """
    if not output_data or output_data == "0x":
        return []

    try:
        return decode_parameters(output_data, function.outputs, name_prefix="return", full=full)
    except (DecodingError, ValueError) as e:
        logger.debug(f"Error Decoding {function.signature} Result {output_data}: {e}")
        return None
