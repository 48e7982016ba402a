"""
nibs: read a byte stream in nibbles of 1 to 64 bits.

A small bit-level reader for parsing packed binary formats from files,
sockets or in-memory buffers, with exact end-of-stream accounting.
"""

__version__ = "1.0.0"

from nibs.errors import (
    NibbleSizeError,
    NibsError,
    ReaderStateError,
    StreamExhausted,
    StreamUnknown,
    UnexpectedEndOfStream,
)
from nibs.reader import Nibs

__all__ = [
    "Nibs",
    "NibsError",
    "NibbleSizeError",
    "StreamUnknown",
    "StreamExhausted",
    "UnexpectedEndOfStream",
    "ReaderStateError",
    "__version__",
]
