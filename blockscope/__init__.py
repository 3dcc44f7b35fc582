from blockscope.decoding import (
    decode_call,
    decode_log,
    decode_parameters,
    decode_receipt_logs,
    derive_event_topic,
    derive_selector,
    find_matching_event,
    find_matching_function,
    parse_abi,
)
from blockscope.exceptions import DecodingError, MalformedAbi, RPCError
