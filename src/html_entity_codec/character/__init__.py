"""Character processing layer for the HTML entity codec.

This module adapts byte sources and sinks to the character level: UTF-8
decoding with position tracking on the way in, UTF-8 encoding on the way out.
"""

from .stream import (
    CharacterSink,
    CharacterStream,
    CharacterStreamError,
    InvalidEncodingError,
    SinkWriteError,
    StreamReadError,
    chars,
)

__all__ = [
    "CharacterSink",
    "CharacterStream",
    "CharacterStreamError",
    "InvalidEncodingError",
    "SinkWriteError",
    "StreamReadError",
    "chars",
]
