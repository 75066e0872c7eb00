"""Decode error taxonomy for HTML entity decoding.

Every failure of a decode call is reported as a single ``DecodeError`` carrying
the character position at which the problem was detected and a
``DecodeErrorKind`` describing it.
"""

from enum import Enum, auto
from typing import Any, Optional


class DecodeErrorKind(Enum):
    """Kinds of decode failures."""

    UNKNOWN_ENTITY = auto()        # &nosuchentity; or &;
    MALFORMED_NUM_ESCAPE = auto()  # &#32a, &#xfoo, &#x100000000;
    INVALID_CHARACTER = auto()     # &#xD800;, &#xffffff;
    PREMATURE_END = auto()         # input ended inside a reference
    ENCODING_ERROR = auto()        # source bytes are not valid UTF-8
    IO_ERROR = auto()              # reading the source or writing the sink failed

    @property
    def is_stream_failure(self) -> bool:
        """Whether the kind comes from the byte source or sink, not entity syntax."""
        return self in (DecodeErrorKind.ENCODING_ERROR, DecodeErrorKind.IO_ERROR)


_DESCRIPTIONS = {
    DecodeErrorKind.UNKNOWN_ENTITY: "unknown named entity",
    DecodeErrorKind.MALFORMED_NUM_ESCAPE: "malformed numeric character reference",
    DecodeErrorKind.INVALID_CHARACTER: "numeric reference is not a Unicode scalar value",
    DecodeErrorKind.PREMATURE_END: "input ended inside an entity reference",
    DecodeErrorKind.ENCODING_ERROR: "input is not valid UTF-8",
    DecodeErrorKind.IO_ERROR: "I/O error",
}


class DecodeError(Exception):
    """Raised when an entity-encoded stream cannot be decoded.

    Attributes:
        position: Number of characters read from the input before the error.
            For entity syntax errors this is the start of the offending
            reference, not the character that revealed the problem.
        kind: Type of error
        fragment: Raw text of the offending reference, when known
    """

    def __init__(
        self,
        position: int,
        kind: DecodeErrorKind,
        fragment: Optional[str] = None
    ) -> None:
        self.position = position
        self.kind = kind
        self.fragment = fragment
        message = f"{_DESCRIPTIONS[kind]} at position {position}"
        if fragment:
            message += f" ({fragment!r})"
        super().__init__(message)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, DecodeError):
            return NotImplemented
        return (self.position, self.kind) == (other.position, other.kind)

    def __hash__(self) -> int:
        return hash((self.position, self.kind))

    def __repr__(self) -> str:
        return f"DecodeError(position={self.position}, kind={self.kind.name})"
