import logging
from dataclasses import dataclass
from typing import Any, Sequence

from blockscope.exceptions import DecodingError
from blockscope.types.abi import AbiDescriptor
from blockscope.types.decoding import DecodedEvent, DecodedParameter

from .abi import filter_events
from .parameters import SLOT_SIZE, decode_parameters, decode_slot, strip_hex_prefix
from .selectors import derive_event_topic

root_logger = logging.getLogger("blockscope")
logger = root_logger.getChild("decoding").getChild("events")


@dataclass(frozen=True, slots=True)
class LogEntry:
    """Log emitted by a contract, in the shape returned by eth_getTransactionReceipt & eth_getLogs"""

    address: str
    topics: tuple[str, ...]
    data: str = "0x"

    @classmethod
    def from_rpc(cls, log: dict[str, Any]) -> "LogEntry":
        """Builds LogEntry from a JSON-RPC log dict"""
        return cls(
            address=log.get("address") or "",
            topics=tuple(log.get("topics") or ()),
            data=log.get("data") or "0x",
        )


def find_matching_event(descriptors: Sequence[AbiDescriptor], topic: str) -> AbiDescriptor | None:
    """
    Finds the event whose signature hash matches topic 0 of a log.  Event topics are the full 32 byte hash
    of the signature.  Anonymous events do not emit their signature, and are never matched.

    :param descriptors: Parsed ABI
    :param topic: 0x prefixed 32 byte topic
    :return: Matching event descriptor, or None if the event is not in the ABI
    """
    topic = topic.lower()
    for event in filter_events(descriptors):
        if event.anonymous:
            continue
        if derive_event_topic(event.signature) == topic:
            return event
    return None


def decode_log(log: LogEntry, descriptors: Sequence[AbiDescriptor], full: bool = False) -> DecodedEvent | None:
    """
    Decodes a log with the ABI of the contract that emitted it.  Indexed parameters are read from
    topics[1:] in order, and non-indexed parameters are read from the data blob using the slot decoder.

    Decoding is best effort.  Missing topics, malformed hex and other decoding errors are logged and
    returned as None.

    :param log: Log to decode
    :param descriptors: ABI of the emitting contract
    :param full: Decode dynamic data parameters with eth_abi instead of returning their raw slots
    :return: DecodedEvent, or None if the log could not be matched or decoded
    """
    if not log.topics:
        return None

    try:
        event = find_matching_event(descriptors, log.topics[0])
        if event is None:
            logger.debug(f"Event with topic {log.topics[0]} not found in ABI")
            return None

        params = _decode_event_params(event, log, full)
    except (DecodingError, ValueError, IndexError, TypeError, AttributeError) as e:
        logger.debug(f"Error Decoding Log {log.address} with topics {log.topics} and data {log.data}: {e}")
        return None

    return DecodedEvent(name=event.name, signature=event.signature, address=log.address, params=params)


def _decode_event_params(event: AbiDescriptor, log: LogEntry, full: bool) -> list[DecodedParameter]:
    data_params = [p for p in event.inputs if not p.indexed]
    decoded_data = iter(decode_parameters(log.data, data_params, full=full))

    params, topic_index = [], 1
    for index, param in enumerate(event.inputs):
        name = param.name or f"param{index}"

        if param.indexed:
            topic = strip_hex_prefix(log.topics[topic_index])
            topic_index += 1
            if len(topic) != SLOT_SIZE:
                raise DecodingError(f"Topic {topic_index - 1} for {name} is not 32 bytes")
            params.append(
                DecodedParameter(name=name, type=param.type, value=decode_slot(topic, param.type), indexed=True)
            )
        else:
            value = next(decoded_data)
            params.append(DecodedParameter(name=name, type=param.type, value=value.value))

    return params
