"""Character stream adapter and output sink.

``CharacterStream`` turns a binary reader into a lazy sequence of
``(position, character)`` pairs using an incremental UTF-8 decoder, and
``CharacterSink`` writes text back to a binary writer as UTF-8. Failures of
the underlying byte source or sink surface as ``CharacterStreamError``
subclasses carrying the character position they occurred at.
"""

import codecs
from typing import BinaryIO, Iterator, Optional, Tuple

DEFAULT_CHUNK_SIZE = 8192
OUTPUT_ENCODING = "utf-8"


class CharacterStreamError(Exception):
    """Base class for byte source and sink failures."""

    def __init__(self, message: str, position: int = 0) -> None:
        super().__init__(message)
        self.position = position


class InvalidEncodingError(CharacterStreamError):
    """The byte source produced a sequence that is not valid UTF-8."""

    def __init__(self, position: int, byte_offset: Optional[int] = None) -> None:
        super().__init__(f"invalid UTF-8 at character {position}", position)
        self.byte_offset = byte_offset


class StreamReadError(CharacterStreamError):
    """Reading from the byte source failed."""


class SinkWriteError(CharacterStreamError):
    """Writing to the byte sink failed."""


class CharacterStream:
    """Single-use iterator of characters decoded from a UTF-8 byte source.

    Iterating yields ``(position, character)`` where ``position`` is the
    zero-based index of the character in the decoded stream. Characters that
    precede an invalid byte sequence are always yielded before
    ``InvalidEncodingError`` is raised for it.

    Example:
        >>> import io
        >>> list(CharacterStream(io.BytesIO("hå".encode())))
        [(0, 'h'), (1, 'å')]
    """

    def __init__(self, reader: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be > 0")
        self._reader = reader
        self._chunk_size = chunk_size
        self._consumed = False
        self.bytes_read = 0

    def __iter__(self) -> Iterator[Tuple[int, str]]:
        if self._consumed:
            raise RuntimeError("CharacterStream can only be iterated once")
        self._consumed = True
        return self._characters()

    def _characters(self) -> Iterator[Tuple[int, str]]:
        decoder = codecs.getincrementaldecoder(OUTPUT_ENCODING)()
        position = 0

        while True:
            try:
                chunk = self._reader.read(self._chunk_size)
            except OSError as e:
                raise StreamReadError(f"read failed: {e}", position) from e

            final = not chunk
            if not final:
                self.bytes_read += len(chunk)

            try:
                text = decoder.decode(chunk or b"", final=final)
            except UnicodeDecodeError as e:
                # Bytes before e.start decoded cleanly, so they are valid UTF-8.
                for char in e.object[:e.start].decode(OUTPUT_ENCODING):
                    yield position, char
                    position += 1
                byte_offset = self.bytes_read - len(e.object) + e.start
                raise InvalidEncodingError(position, byte_offset) from e

            for char in text:
                yield position, char
                position += 1

            if final:
                return


class CharacterSink:
    """UTF-8 writer over a binary sink."""

    def __init__(self, writer: BinaryIO) -> None:
        self._writer = writer
        self.characters_written = 0

    def write(self, text: str) -> None:
        """Write ``text`` as UTF-8.

        Raises:
            SinkWriteError: if the underlying writer fails
        """
        try:
            self._writer.write(text.encode(OUTPUT_ENCODING))
        except OSError as e:
            raise SinkWriteError(f"write failed: {e}", self.characters_written) from e
        self.characters_written += len(text)


def chars(reader: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[str]:
    """Iterate the characters of a UTF-8 byte source, without positions."""
    for _, char in CharacterStream(reader, chunk_size):
        yield char
