from .abi import filter_events, filter_functions, format_abi_for_display, load_abi, parse_abi
from .dispatcher import AbiLookup, LogDecodeResult, decode_receipt_logs, resolve_log_abi
from .event_decoders import LogEntry, decode_log, find_matching_event
from .function_decoders import (
    decode_call,
    decode_function_result,
    extract_function_selector,
    find_matching_function,
)
from .parameters import AbiTypeKind, classify_type, decode_parameters, decode_slot
from .selectors import abi_to_signature, derive_event_topic, derive_selector
