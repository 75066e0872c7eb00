"""Result objects and diagnostic types for entity decoding.

This module defines the statistics gathered by a decode run, the diagnostics
recorded when sloppy decoding recovers from a malformed reference, and the
result object returned by the configured codec API.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional

from .errors import DecodeErrorKind


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()
    INFO = auto()
    WARNING = auto()    # Malformed input that was recovered from


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry describing a recovered fragment."""

    severity: DiagnosticSeverity
    message: str
    component: str
    position: int
    kind: Optional[DecodeErrorKind] = None
    fragment: Optional[str] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")
        if self.position < 0:
            raise ValueError("Diagnostic position must be >= 0")

    def to_dict(self) -> Dict[str, Any]:
        """Plain representation for JSON logging."""
        return {
            "severity": self.severity.name,
            "message": self.message,
            "component": self.component,
            "position": self.position,
            "kind": self.kind.name if self.kind else None,
            "fragment": self.fragment,
        }


@dataclass
class DecodeStatistics:
    """Counters collected during a single decode run."""

    characters_processed: int = 0
    named_entities_resolved: int = 0
    numeric_references_resolved: int = 0
    fragments_recovered: int = 0
    processing_time_ms: float = 0.0

    @property
    def entities_resolved(self) -> int:
        """Total references replaced by their characters."""
        return self.named_entities_resolved + self.numeric_references_resolved

    @property
    def characters_per_second(self) -> float:
        """Calculate characters processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.characters_processed * 1000.0) / self.processing_time_ms


@dataclass
class DecodeResult:
    """Outcome of a configured decode call.

    ``text`` is None when the output was streamed to a caller-supplied writer.
    """

    text: Optional[str]
    statistics: DecodeStatistics
    mode: str
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    correlation_id: Optional[str] = None

    @property
    def recovered(self) -> bool:
        """Whether any malformed fragment was dropped or emitted verbatim."""
        return self.statistics.fragments_recovered > 0

    @property
    def warning_count(self) -> int:
        return sum(
            1 for entry in self.diagnostics
            if entry.severity == DiagnosticSeverity.WARNING
        )
