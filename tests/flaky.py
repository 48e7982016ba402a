"""Byte sources that misbehave in controlled ways, for tests."""

import io


class FlakyError(OSError):
    """Error raised when simulating flaky IO."""


class FlakyReader(io.RawIOBase):
    """
    Delivers a limited number of good bytes, then fails forever.

    Reads are deliberately short (at most ``chunk`` bytes) so the reader's
    short-read handling is exercised as well.
    """

    def __init__(self, data: bytes, good_bytes: int, chunk: int = 7) -> None:
        super().__init__()
        self._reader = io.BytesIO(data)
        self._count = good_bytes
        self._chunk = chunk

    def readable(self) -> bool:
        return True

    def readinto(self, b) -> int:
        if self._count <= 0:
            raise FlakyError("flaky test")

        size = min(len(b), self._count, self._chunk)
        n = self._reader.readinto(memoryview(b)[:size])
        self._count -= n
        return n


class TrickleReader(io.RawIOBase):
    """Returns ``None`` (no data yet) before every chunk, like a non-blocking stream."""

    def __init__(self, data: bytes, chunk: int = 1) -> None:
        super().__init__()
        self._reader = io.BytesIO(data)
        self._chunk = chunk
        self._ready = False

    def readable(self) -> bool:
        return True

    def readinto(self, b):
        if not self._ready:
            self._ready = True
            return None

        self._ready = False
        return self._reader.readinto(memoryview(b)[: self._chunk])


class StallingReader(io.RawIOBase):
    """Never produces data and never reports end of stream."""

    def readable(self) -> bool:
        return True

    def readinto(self, b):
        return None


class BrokenReader:
    """Raises a non-I/O error, as a buggy source would."""

    def readinto(self, b):
        raise TypeError("broken source")
