import logging
from dataclasses import dataclass
from typing import Protocol, Sequence

from blockscope.types.abi import AbiDescriptor
from blockscope.types.decoding import DecodedEvent

from .event_decoders import LogEntry, decode_log

root_logger = logging.getLogger("blockscope")
logger = root_logger.getChild("decoding").getChild("dispatcher")


class AbiLookup(Protocol):
    """Address to ABI lookup.  Implementations normalize addresses to lowercase"""

    def get(self, address: str) -> list[AbiDescriptor] | None:
        """Returns the ABI saved for an address, or None if no ABI is available"""
        raise NotImplementedError()


@dataclass(frozen=True, slots=True)
class LogDecodeResult:
    """Decoding result for a single receipt log"""

    log: LogEntry
    event: DecodedEvent | None

    needs_abi: bool = False
    """ True if the log was emitted by a contract without an available ABI """


def resolve_log_abi(
    log: LogEntry,
    primary_address: str | None,
    primary_abi: Sequence[AbiDescriptor] | None,
    lookup: AbiLookup | None = None,
) -> Sequence[AbiDescriptor] | None:
    """
    Selects the ABI to decode a log with.  Logs emitted by the primary contract are decoded with the primary
    ABI.  Logs emitted by other contracts, ie token transfers triggered by a router, use the ABI saved for
    the emitting address.

    :param log: Log to resolve
    :param primary_address: Address of the contract the transaction was sent to
    :param primary_abi: ABI of the primary contract
    :param lookup: Address to ABI lookup used for logs from other contracts
    :return: ABI for the emitting contract, or None if no ABI is available
    """
    if primary_address and log.address.lower() == primary_address.lower():
        return primary_abi or None

    if lookup is not None:
        abi = lookup.get(log.address)
        if abi:
            return abi

    return None


def decode_receipt_logs(
    logs: Sequence[LogEntry],
    primary_address: str | None,
    primary_abi: Sequence[AbiDescriptor] | None,
    lookup: AbiLookup | None = None,
    full: bool = False,
) -> list[LogDecodeResult]:
    """
    Decodes every log of a transaction receipt, resolving the ABI of each emitting contract.

    :param logs: Receipt logs in emission order
    :param primary_address: Address of the contract the transaction was sent to
    :param primary_abi: ABI of the primary contract
    :param lookup: Address to ABI lookup used for logs from other contracts
    :param full: Decode dynamic data parameters with eth_abi
    :return: One result per log, in the same order as logs
    """
    results = []
    for log in logs:
        abi = resolve_log_abi(log, primary_address, primary_abi, lookup)
        if abi is None:
            logger.debug(f"No ABI available for log emitted by {log.address}")
            results.append(LogDecodeResult(log=log, event=None, needs_abi=True))
            continue

        results.append(LogDecodeResult(log=log, event=decode_log(log, abi, full=full)))

    return results
