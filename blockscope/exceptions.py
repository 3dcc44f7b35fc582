class MalformedAbi(ValueError):
    """

    Raised when ABI text is not valid JSON, is not a JSON array, or contains a parameter without a type.
    Raised at ABI entry time, never while decoding.

    """


class DecodingError(Exception):
    """

    Raised when call data, return data, or log data cannot be decoded.  Always caught at the
    decode boundary and converted to a ``None`` result

    """


class RPCError(Exception):
    """
    Raised when the JSON-RPC endpoint cannot be reached, returns a non JSON response, or replies with an
    error object.  ``code`` holds the JSON-RPC error code when the server returned one.
    """

    code: int | None

    def __init__(self, message: str, code: int | None = None):
        super().__init__(message)
        self.code = code
