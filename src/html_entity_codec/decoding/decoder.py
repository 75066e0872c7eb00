"""Entity decoding state machine.

This module implements a single-pass, streaming decoder that resolves named
(``&amp;``), decimal (``&#65;``) and hexadecimal (``&#x41;``) character
references embedded in literal text. The machine is an explicit transition
table keyed by ``(DecodeState, CharClass)``; malformed references are handed
to a ``RecoveryPolicy`` which either raises or tells the decoder what to emit.
"""

import time
from enum import Enum, auto
from typing import BinaryIO, Callable, Dict, List, Optional, Tuple

from html_entity_codec.character.stream import (
    DEFAULT_CHUNK_SIZE,
    CharacterSink,
    CharacterStream,
    InvalidEncodingError,
    SinkWriteError,
    StreamReadError,
)
from html_entity_codec.entities import lookup
from html_entity_codec.shared.errors import DecodeError, DecodeErrorKind
from html_entity_codec.shared.logging import get_logger
from html_entity_codec.shared.result import DecodeStatistics

from .recovery import RecoveryAction, RecoveryPolicy, StrictRecovery

# Numeric references are parsed as unsigned 32-bit integers
MAX_NUMERIC_VALUE = 0xFFFFFFFF
MAX_CODE_POINT = 0x10FFFF
SURROGATE_RANGE_START = 0xD800
SURROGATE_RANGE_END = 0xDFFF

COMPONENT = "entity_decoder"


class DecodeState(Enum):
    """State machine states for entity decoding."""

    NORMAL = auto()    # Literal text
    ENTITY = auto()    # Just read '&'
    NAMED = auto()     # Inside &name
    NUMERIC = auto()   # Just read '&#'
    HEX = auto()       # Inside &#x...
    DEC = auto()       # Inside &#...


class CharClass(Enum):
    """Input character classes that drive transitions."""

    AMPERSAND = auto()
    HASH = auto()
    SEMICOLON = auto()
    HEX_MARKER = auto()   # 'x'
    DIGIT = auto()
    HEX_LETTER = auto()   # a-f, A-F
    OTHER = auto()


_MARKERS = {
    "&": CharClass.AMPERSAND,
    "#": CharClass.HASH,
    ";": CharClass.SEMICOLON,
    "x": CharClass.HEX_MARKER,
}

# Length of the pending-buffer prefix before the digits of a numeric reference
_DIGITS_OFFSET = {
    DecodeState.NUMERIC: 2,  # "&#"
    DecodeState.DEC: 2,      # "&#"
    DecodeState.HEX: 3,      # "&#x"
}


def classify(char: str) -> CharClass:
    """Return the transition class of a single character."""
    char_class = _MARKERS.get(char)
    if char_class is not None:
        return char_class
    if "0" <= char <= "9":
        return CharClass.DIGIT
    if "a" <= char <= "f" or "A" <= char <= "F":
        return CharClass.HEX_LETTER
    return CharClass.OTHER


def is_scalar_value(value: int) -> bool:
    """Whether ``value`` is a Unicode scalar value (a code point, not a surrogate)."""
    return (
        0 <= value <= MAX_CODE_POINT
        and not SURROGATE_RANGE_START <= value <= SURROGATE_RANGE_END
    )


def _build_transitions() -> Dict[Tuple[DecodeState, CharClass], str]:
    table = {}
    for char_class in CharClass:
        table[(DecodeState.NORMAL, char_class)] = "_emit_literal"
        table[(DecodeState.ENTITY, char_class)] = "_begin_named"
        table[(DecodeState.NAMED, char_class)] = "_accumulate"
        for state in (DecodeState.NUMERIC, DecodeState.DEC, DecodeState.HEX):
            table[(state, char_class)] = "_malformed_numeric"

    table.update({
        (DecodeState.NORMAL, CharClass.AMPERSAND): "_begin_entity",
        (DecodeState.ENTITY, CharClass.HASH): "_begin_numeric",
        (DecodeState.ENTITY, CharClass.SEMICOLON): "_empty_entity",
        (DecodeState.NAMED, CharClass.SEMICOLON): "_resolve_named",
        (DecodeState.NUMERIC, CharClass.DIGIT): "_begin_decimal",
        (DecodeState.NUMERIC, CharClass.HEX_MARKER): "_begin_hex",
        (DecodeState.NUMERIC, CharClass.SEMICOLON): "_resolve_numeric",
        (DecodeState.DEC, CharClass.DIGIT): "_accumulate",
        (DecodeState.DEC, CharClass.SEMICOLON): "_resolve_numeric",
        (DecodeState.HEX, CharClass.DIGIT): "_accumulate",
        (DecodeState.HEX, CharClass.HEX_LETTER): "_accumulate",
        (DecodeState.HEX, CharClass.SEMICOLON): "_resolve_numeric",
    })
    return table


TRANSITIONS = _build_transitions()


class EntityDecoder:
    """Streaming entity decoder.

    One instance performs one decode at a time; the recovery policy decides
    between strict and sloppy handling of malformed references.

    Example:
        >>> import io
        >>> out = io.BytesIO()
        >>> EntityDecoder().decode(io.BytesIO(b"&lt;b&gt; &#65;"), out).entities_resolved
        3
        >>> out.getvalue()
        b'<b> A'
    """

    def __init__(
        self,
        policy: Optional[RecoveryPolicy] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        correlation_id: Optional[str] = None
    ) -> None:
        self.policy = policy or StrictRecovery(correlation_id)
        self.chunk_size = chunk_size
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, COMPONENT).bind(
            mode=self.policy.mode.name
        )
        self._transitions: Dict[Tuple[DecodeState, CharClass], Callable[[str], None]] = {
            key: getattr(self, name) for key, name in TRANSITIONS.items()
        }
        self._reset_state()

    def _reset_state(self) -> None:
        self.state = DecodeState.NORMAL
        self.good_position = 0
        self.pending: List[str] = []
        self.statistics = DecodeStatistics()
        self._sink: Optional[CharacterSink] = None

    def decode(self, reader: BinaryIO, writer: BinaryIO) -> DecodeStatistics:
        """Decode UTF-8 entity-encoded text from ``reader`` into ``writer``.

        Output is written incrementally; on failure whatever was already
        written stays in ``writer``.

        Returns:
            Statistics of the run

        Raises:
            DecodeError: on the first unrecoverable problem
        """
        self._reset_state()
        self._sink = CharacterSink(writer)
        start_time = time.time()

        self.logger.debug("Starting entity decode", extra={"chunk_size": self.chunk_size})

        try:
            try:
                self._run(CharacterStream(reader, self.chunk_size))
            except InvalidEncodingError as e:
                raise DecodeError(e.position, DecodeErrorKind.ENCODING_ERROR) from e
            except StreamReadError as e:
                raise DecodeError(e.position, DecodeErrorKind.IO_ERROR) from e
            except SinkWriteError as e:
                raise DecodeError(self.good_position, DecodeErrorKind.IO_ERROR) from e
        except DecodeError as e:
            self.logger.debug(
                "Entity decode aborted",
                extra={
                    "kind": e.kind.name,
                    "position": e.position,
                    "state": self.state.name,
                }
            )
            raise
        finally:
            self.statistics.processing_time_ms = (time.time() - start_time) * 1000

        self.logger.debug(
            "Entity decode completed",
            extra={
                "characters_processed": self.statistics.characters_processed,
                "entities_resolved": self.statistics.entities_resolved,
                "fragments_recovered": self.statistics.fragments_recovered,
            }
        )
        return self.statistics

    def _run(self, stream: CharacterStream) -> None:
        transitions = self._transitions
        for position, char in stream:
            transitions[(self.state, classify(char))](char)
            if self.state is DecodeState.NORMAL:
                self.good_position = position + 1
            self.statistics.characters_processed = position + 1

        if self.state is not DecodeState.NORMAL:
            self._recover(
                DecodeErrorKind.PREMATURE_END,
                self._pending_text(),
                RecoveryAction.DROP
            )

    # Helpers

    def _pending_text(self) -> str:
        return "".join(self.pending)

    def _finish(self) -> None:
        self.pending.clear()
        self.state = DecodeState.NORMAL

    def _emit(self, text: str) -> None:
        self._sink.write(text)

    def _recover(self, kind: DecodeErrorKind, fragment: str, action: RecoveryAction) -> None:
        replacement = self.policy.recover(kind, self.good_position, fragment, action)
        self.statistics.fragments_recovered += 1
        self._finish()
        if replacement:
            self._emit(replacement)

    # Transitions

    def _emit_literal(self, char: str) -> None:
        self._emit(char)

    def _begin_entity(self, char: str) -> None:
        self.pending.append(char)
        self.state = DecodeState.ENTITY

    def _begin_named(self, char: str) -> None:
        self.pending.append(char)
        self.state = DecodeState.NAMED

    def _begin_numeric(self, char: str) -> None:
        self.pending.append(char)
        self.state = DecodeState.NUMERIC

    def _begin_decimal(self, char: str) -> None:
        self.pending.append(char)
        self.state = DecodeState.DEC

    def _begin_hex(self, char: str) -> None:
        self.pending.append(char)
        self.state = DecodeState.HEX

    def _accumulate(self, char: str) -> None:
        self.pending.append(char)

    def _empty_entity(self, char: str) -> None:
        self.pending.append(char)
        self._recover(
            DecodeErrorKind.UNKNOWN_ENTITY, self._pending_text(), RecoveryAction.DROP
        )

    def _resolve_named(self, char: str) -> None:
        self.pending.append(char)
        reference = self._pending_text()
        replacement = lookup(reference)
        if replacement is None:
            self._recover(
                DecodeErrorKind.UNKNOWN_ENTITY, reference, RecoveryAction.EMIT_VERBATIM
            )
            return
        self._finish()
        self._emit(replacement)
        self.statistics.named_entities_resolved += 1

    def _resolve_numeric(self, char: str) -> None:
        radix = 16 if self.state is DecodeState.HEX else 10
        digits = self._pending_text()[_DIGITS_OFFSET[self.state]:]
        self.pending.append(char)
        reference = self._pending_text()

        try:
            value = int(digits, radix)
        except ValueError:
            value = None
        if value is None or value > MAX_NUMERIC_VALUE:
            self._recover(
                DecodeErrorKind.MALFORMED_NUM_ESCAPE, reference, RecoveryAction.DROP
            )
            return
        if not is_scalar_value(value):
            raise DecodeError(
                self.good_position, DecodeErrorKind.INVALID_CHARACTER, reference
            )

        self._finish()
        self._emit(chr(value))
        self.statistics.numeric_references_resolved += 1

    def _malformed_numeric(self, char: str) -> None:
        self._recover(
            DecodeErrorKind.MALFORMED_NUM_ESCAPE, self._pending_text(), RecoveryAction.DROP
        )
        # The offending character is not part of the reference; read it as text.
        self._transitions[(self.state, classify(char))](char)
