"""Entity encoding engine.

Two escaping policies share one forward pass:

* minimal: the five characters that can break out of HTML text or quoted
  attribute values (``" & ' < >``) become entity references;
* attribute: additionally every character in the Latin-1 range that is not an
  ASCII letter or digit becomes a two-digit hex reference (``&#x2C;``),
  following the OWASP recommendation for untrusted attribute values.

No character is ever dropped and order is preserved.
"""

from bisect import bisect_left
from typing import BinaryIO, Optional, Tuple

from html_entity_codec.character.stream import CharacterSink
from html_entity_codec.shared.config import EncodePolicy

# Sorted by character for binary search
MINIMAL_ENTITIES: Tuple[Tuple[str, str], ...] = (
    ('"', "&quot;"),
    ("&", "&amp;"),
    ("'", "&#x27;"),
    ("<", "&lt;"),
    (">", "&gt;"),
)

_ESCAPED_CHARS = tuple(char for char, _ in MINIMAL_ENTITIES)

LATIN1_LIMIT = 256
ASCII_MAX = 127


def get_entity(char: str) -> Optional[str]:
    """Return the minimal-table replacement for ``char``, or None."""
    index = bisect_left(_ESCAPED_CHARS, char)
    if index < len(_ESCAPED_CHARS) and _ESCAPED_CHARS[index] == char:
        return MINIMAL_ENTITIES[index][1]
    return None


def is_ascii_alnum(char: str) -> bool:
    return "a" <= char <= "z" or "A" <= char <= "Z" or "0" <= char <= "9"


def needs_hex_escape(char: str) -> bool:
    """Whether the attribute policy hex-escapes ``char`` (after the minimal table)."""
    code = ord(char)
    return code < LATIN1_LIMIT and (code > ASCII_MAX or not is_ascii_alnum(char))


def hex_reference(char: str) -> str:
    """Two-digit uppercase hex reference for a Latin-1 character."""
    return f"&#x{ord(char):02X};"


class EntityEncoder:
    """Encoder bound to one escaping policy.

    Example:
        >>> EntityEncoder(EncodePolicy.ATTRIBUTE).encode("a b")
        'a&#x20;b'
    """

    def __init__(self, policy: EncodePolicy = EncodePolicy.MINIMAL) -> None:
        self.policy = policy

    def escape_char(self, char: str) -> str:
        entity = get_entity(char)
        if entity is not None:
            return entity
        if self.policy is EncodePolicy.ATTRIBUTE and needs_hex_escape(char):
            return hex_reference(char)
        return char

    def encode_to(self, text: str, writer: BinaryIO) -> None:
        """Write the encoded form of ``text`` to ``writer`` as UTF-8.

        Raises:
            SinkWriteError: if the writer fails; earlier output is not rolled back
        """
        sink = CharacterSink(writer)
        escape_char = self.escape_char
        for char in text:
            sink.write(escape_char(char))

    def encode(self, text: str) -> str:
        return "".join(map(self.escape_char, text))
