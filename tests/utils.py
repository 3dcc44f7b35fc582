def encode_slot(value: int) -> str:
    """Encodes an unsigned int as a 32 byte hex slot without 0x prefix"""
    return f"{value:064x}"


def encode_address(address: str) -> str:
    """Left pads a 0x prefixed address to a 32 byte hex slot without 0x prefix"""
    return address[2:].lower().rjust(64, "0")


def uint_max(bits: int) -> int:
    return 2**bits - 1
