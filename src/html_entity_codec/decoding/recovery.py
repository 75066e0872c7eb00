"""Recovery policies for malformed entity references.

The decoder reports every malformed fragment it meets (unknown names, broken
numeric references, input ending inside a reference) to a ``RecoveryPolicy``.
The strict policy turns the report into a ``DecodeError``; the sloppy policy
records a diagnostic and tells the decoder what text, if any, to emit in the
fragment's place.
"""

from abc import ABC, abstractmethod
from enum import Enum, auto
from typing import List, Optional

from html_entity_codec.shared.config import DEFAULT_MAX_DIAGNOSTICS, DecodeMode
from html_entity_codec.shared.errors import DecodeError, DecodeErrorKind
from html_entity_codec.shared.logging import get_logger
from html_entity_codec.shared.result import DiagnosticEntry, DiagnosticSeverity

COMPONENT = "entity_recovery"

_RECOVERABLE_KINDS = frozenset({
    DecodeErrorKind.UNKNOWN_ENTITY,
    DecodeErrorKind.MALFORMED_NUM_ESCAPE,
    DecodeErrorKind.PREMATURE_END,
})


class RecoveryAction(Enum):
    """What sloppy decoding does with a malformed fragment."""

    EMIT_VERBATIM = auto()  # Write the raw fragment to the output
    DROP = auto()           # Discard the fragment


class RecoveryPolicy(ABC):
    """Decides the fate of malformed fragments during one decode call."""

    mode: DecodeMode

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        self.correlation_id = correlation_id
        self.recovered_count = 0
        self.diagnostics: List[DiagnosticEntry] = []
        self.logger = get_logger(__name__, correlation_id, COMPONENT)

    @abstractmethod
    def recover(
        self,
        kind: DecodeErrorKind,
        position: int,
        fragment: str,
        action: RecoveryAction
    ) -> str:
        """Handle a malformed fragment.

        Args:
            kind: Error kind the fragment would raise in strict mode
            position: Start of the fragment in the input
            fragment: Raw text of the fragment
            action: Recovery to apply if the policy recovers at all

        Returns:
            Text to write in place of the fragment

        Raises:
            DecodeError: if the policy does not recover
        """


class StrictRecovery(RecoveryPolicy):
    """Every malformed fragment is fatal."""

    mode = DecodeMode.STRICT

    def recover(
        self,
        kind: DecodeErrorKind,
        position: int,
        fragment: str,
        action: RecoveryAction
    ) -> str:
        raise DecodeError(position, kind, fragment)


class SloppyRecovery(RecoveryPolicy):
    """Unknown names pass through, malformed references are dropped.

    Only entity-syntax kinds are recoverable; anything else is raised even in
    sloppy mode.
    """

    mode = DecodeMode.SLOPPY

    def __init__(
        self,
        correlation_id: Optional[str] = None,
        record_diagnostics: bool = True,
        max_diagnostics: int = DEFAULT_MAX_DIAGNOSTICS
    ) -> None:
        super().__init__(correlation_id)
        self.record_diagnostics = record_diagnostics
        self.max_diagnostics = max_diagnostics

    def recover(
        self,
        kind: DecodeErrorKind,
        position: int,
        fragment: str,
        action: RecoveryAction
    ) -> str:
        if kind not in _RECOVERABLE_KINDS:
            raise DecodeError(position, kind, fragment)

        self.recovered_count += 1
        self.logger.debug(
            "Recovered from malformed entity reference",
            extra={
                "kind": kind.name,
                "position": position,
                "fragment": fragment,
                "action": action.name,
            }
        )

        if self.record_diagnostics and len(self.diagnostics) < self.max_diagnostics:
            verb = "kept" if action is RecoveryAction.EMIT_VERBATIM else "dropped"
            self.diagnostics.append(DiagnosticEntry(
                severity=DiagnosticSeverity.WARNING,
                message=f"{kind.name.lower()}: {fragment!r} {verb}",
                component=COMPONENT,
                position=position,
                kind=kind,
                fragment=fragment,
                correlation_id=self.correlation_id,
            ))

        if action is RecoveryAction.EMIT_VERBATIM:
            return fragment
        return ""


def policy_for(
    mode: DecodeMode,
    correlation_id: Optional[str] = None,
    record_diagnostics: bool = True,
    max_diagnostics: int = DEFAULT_MAX_DIAGNOSTICS
) -> RecoveryPolicy:
    """Build a fresh policy for ``mode``."""
    if mode is DecodeMode.SLOPPY:
        return SloppyRecovery(correlation_id, record_diagnostics, max_diagnostics)
    return StrictRecovery(correlation_id)
