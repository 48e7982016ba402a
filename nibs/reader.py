"""
Sequential nibble reader over a byte source.

This module provides bit-level reading from any object implementing the
``readinto()`` protocol of the ``io`` module (files opened in binary mode,
``io.BytesIO``, raw streams, ...). A "nibble" here is any run of 1 to 64
bits, not only 4.

Bit Ordering:
Bits are read MSB-first within each byte:
- First bit read is bit position 7 (MSB)
- Last bit read is bit position 0 (LSB)

A nibble is returned as an integer whose most significant bit is the first
bit read.

Buffering:
Bytes are pulled from the source into a fixed-size lookahead buffer. When the
read position reaches the low-water mark, or runs out of valid bytes, the
unread tail is moved to the front of the buffer and the freed space is
refilled. A short read is always followed by one more read so the end of the
stream is known exactly; bits_remaining() depends on it.
"""

import io
import logging

from nibs.errors import (
    NibbleSizeError,
    ReaderStateError,
    StreamExhausted,
    StreamUnknown,
    UnexpectedEndOfStream,
)

log = logging.getLogger(__name__)

DEFAULT_BUFFER_SIZE = 64
MIN_BUFFER_SIZE = 16
# One maximal nibble
LOW_WATER_GAP = 8
MAX_NIBBLE = 64


class Nibs:
    """Reads a stream of bytes in nibbles of 1 to 64 bits."""

    def __init__(self, source, buffer_size: int = DEFAULT_BUFFER_SIZE) -> None:
        """
        Initialize a reader bound to a byte source.

        No I/O happens until the first nibble is read. The reader never
        closes the source.

        Args:
            source: Object with a ``readinto(buffer)`` method
            buffer_size: Lookahead buffer capacity in bytes

        Raises:
            ValueError: If buffer_size is below MIN_BUFFER_SIZE
        """
        if buffer_size < MIN_BUFFER_SIZE:
            raise ValueError(f"buffer_size must be at least {MIN_BUFFER_SIZE} bytes")

        self._source = source
        self._buf = bytearray(buffer_size)
        self._low_water = buffer_size - LOW_WATER_GAP
        self._used = 0
        # Bit positions relative to the start of _buf
        self._cursor = 0
        self._mark = 0
        # StreamExhausted or the source's OSError, once known
        self._err = None

    @classmethod
    def from_bytes(cls, data: bytes, buffer_size: int = DEFAULT_BUFFER_SIZE) -> "Nibs":
        """Create a reader over in-memory bytes."""
        return cls(io.BytesIO(data), buffer_size)

    def __repr__(self) -> str:
        state = "streaming" if self._err is None else type(self._err).__name__
        return (
            f"Nibs(cursor={self._cursor},used={self._used},"
            f"size={len(self._buf)},state={state})"
        )

    def bits_remaining(self) -> int:
        """
        Number of bits left before the stream is exhausted.

        Only known once a read has hit the end of the source (or an I/O
        error), so at least one nibble must be read first.

        Returns:
            Bits still available; 0 once everything has been consumed

        Raises:
            StreamUnknown: If the end of the stream has not been reached yet
        """
        if self._err is None:
            raise StreamUnknown()
        return self._used * 8 - self._cursor

    def nibble(self, width: int) -> int:
        """
        Read ``width`` bits and return them as an integer.

        Either all bits are consumed and returned, or an exception is raised
        and nothing is consumed.

        Args:
            width: Number of bits to read (1-64)

        Returns:
            Integer value of the bits (MSB-first)

        Raises:
            NibbleSizeError: If width is outside 1-64
            StreamExhausted: If the stream holds no more bits
            UnexpectedEndOfStream: If fewer than width bits remain
            OSError: The source's error, once the bits read before it are used up
        """
        return self._nibble(width, MAX_NIBBLE)

    def nibble8(self, width: int = 8) -> int:
        """Read up to 8 bits. See nibble()."""
        return self._nibble(width, 8)

    def nibble16(self, width: int = 16) -> int:
        """Read up to 16 bits. See nibble()."""
        return self._nibble(width, 16)

    def nibble32(self, width: int = 32) -> int:
        """Read up to 32 bits. See nibble()."""
        return self._nibble(width, 32)

    def _nibble(self, width: int, limit: int) -> int:
        if isinstance(width, bool) or not isinstance(width, int):
            raise NibbleSizeError(width, limit)
        if width < 1 or width > limit:
            raise NibbleSizeError(width, limit)

        if self._err is not None:
            remaining = self._used * 8 - self._cursor
            if remaining == 0:
                raise self._terminal()
            # Reported as end of stream even when the source actually failed
            if width > remaining:
                raise UnexpectedEndOfStream(width, remaining)

        self._mark = self._cursor
        result = 0
        try:
            for _ in range(width):
                result = (result << 1) | self._read_bit()
        except BaseException:
            self._cursor = self._mark
            raise

        return result

    def _read_bit(self) -> int:
        byte_index, bit_index = divmod(self._cursor, 8)

        if (
            bit_index == 0
            and self._err is None
            and (byte_index >= self._low_water or byte_index >= self._used)
        ):
            self._refill()
            byte_index = self._cursor // 8

        if byte_index >= self._used:
            if self._err is None:
                raise ReaderStateError(
                    f"no data at byte {byte_index} and no end of stream "
                    f"reported by {self._source!r}"
                )
            raise self._terminal()

        # MSB-first: bit 0 in stream is bit 7 of first byte
        bit = (self._buf[byte_index] >> (7 - bit_index)) & 1
        self._cursor += 1
        return bit

    def _refill(self) -> None:
        # Bytes of the nibble in progress are kept so a failure can rewind
        shift = self._mark // 8
        if shift > 0:
            tail = self._used - shift
            self._buf[:tail] = self._buf[shift : self._used]
            self._used = tail
            self._cursor -= shift * 8
            self._mark -= shift * 8

        wanted = len(self._buf) - self._used
        if wanted == 0:
            return

        produced = self._fill()
        # A short read may or may not mean end of stream; ask once more
        if produced < wanted and self._err is None:
            produced += self._fill()

        log.debug(
            "refill: dropped %d bytes, read %d of %d, %d buffered",
            shift,
            produced,
            wanted,
            self._used,
        )

    def _fill(self) -> int:
        """
        Read from the source into the free end of the buffer.

        Records the terminal state when the source reports end of stream
        (a zero-byte read) or raises OSError.

        Returns:
            Number of bytes added to the buffer
        """
        with memoryview(self._buf)[self._used :] as view:
            try:
                n = self._source.readinto(view)
            except OSError as e:
                log.debug("source failed with %d bytes buffered: %s", self._used, e)
                self._err = e
                return 0

        # Non-blocking source with nothing available yet
        if n is None:
            return 0

        if n == 0:
            log.debug("end of stream with %d bytes buffered", self._used)
            self._err = StreamExhausted()
            return 0

        self._used += n
        return n

    def _terminal(self) -> Exception:
        if isinstance(self._err, StreamExhausted):
            return StreamExhausted()
        return self._err.with_traceback(None)
