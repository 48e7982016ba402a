"""
Exceptions raised by the nibble reader.

Argument problems are ``ValueError`` subclasses and running out of bits is an
``EOFError`` subclass, so callers can catch either the builtin family or the
specific class. I/O failures from the byte source are not wrapped: the
original ``OSError`` is raised again once the bits read before it are drained.
"""


class NibsError(Exception):
    """Base class for stream conditions reported by the reader."""


class NibbleSizeError(NibsError, ValueError):
    """Requested nibble width is outside the range accepted by the call."""

    def __init__(self, width: object, limit: int) -> None:
        super().__init__(
            f"invalid nibble size {width!r} (must be 1-{limit} bits inclusive)"
        )
        self.width = width
        self.limit = limit


class StreamUnknown(NibsError):
    """End of stream has not been discovered yet."""

    def __init__(self) -> None:
        super().__init__("end of stream not yet known; read at least one nibble")


class StreamExhausted(NibsError, EOFError):
    """Every bit of the stream has been consumed."""

    def __init__(self, message: str = "end of stream") -> None:
        super().__init__(message)


class UnexpectedEndOfStream(StreamExhausted):
    """Fewer bits remain than the nibble width asked for."""

    def __init__(self, requested: int, remaining: int) -> None:
        super().__init__(
            f"unexpected end of stream: need {requested} bits, have {remaining}"
        )
        self.requested = requested
        self.remaining = remaining


class ReaderStateError(RuntimeError):
    """
    Internal consistency failure.

    Raised when the buffer ran dry without the source reporting end of
    stream or an error. This means the byte source broke its contract and is
    never a normal end-of-stream condition.
    """
