"""Tests for decode statistics, diagnostics and results."""

import pytest

from html_entity_codec.shared.errors import DecodeErrorKind
from html_entity_codec.shared.result import (
    DecodeResult,
    DecodeStatistics,
    DiagnosticEntry,
    DiagnosticSeverity,
)


def _entry(**overrides):
    values = {
        "severity": DiagnosticSeverity.WARNING,
        "message": "unknown_entity: '&x;' kept",
        "component": "entity_recovery",
        "position": 3,
        "kind": DecodeErrorKind.UNKNOWN_ENTITY,
        "fragment": "&x;",
    }
    values.update(overrides)
    return DiagnosticEntry(**values)


class TestDiagnosticEntry:
    """Test the DiagnosticEntry class."""

    def test_valid_entry(self):
        """Test creating a valid diagnostic entry."""
        entry = _entry(correlation_id="req-1")

        assert entry.severity is DiagnosticSeverity.WARNING
        assert entry.position == 3
        assert entry.correlation_id == "req-1"
        assert entry.timestamp > 0

    def test_empty_message_rejected(self):
        """Test that an empty message raises ValueError."""
        with pytest.raises(ValueError, match="message cannot be empty"):
            _entry(message="")

    def test_empty_component_rejected(self):
        """Test that an empty component raises ValueError."""
        with pytest.raises(ValueError, match="component cannot be empty"):
            _entry(component="")

    def test_negative_position_rejected(self):
        """Test that a negative position raises ValueError."""
        with pytest.raises(ValueError, match="position must be >= 0"):
            _entry(position=-1)

    def test_to_dict(self):
        """Test plain dictionary representation."""
        data = _entry().to_dict()

        assert data == {
            "severity": "WARNING",
            "message": "unknown_entity: '&x;' kept",
            "component": "entity_recovery",
            "position": 3,
            "kind": "UNKNOWN_ENTITY",
            "fragment": "&x;",
        }

    def test_to_dict_without_kind(self):
        """Test that a missing kind serializes as None."""
        assert _entry(kind=None).to_dict()["kind"] is None


class TestDecodeStatistics:
    """Test the DecodeStatistics class."""

    def test_defaults(self):
        """Test all counters start at zero."""
        stats = DecodeStatistics()

        assert stats.characters_processed == 0
        assert stats.entities_resolved == 0
        assert stats.fragments_recovered == 0
        assert stats.characters_per_second == 0.0

    def test_entities_resolved(self):
        """Test named and numeric references are summed."""
        stats = DecodeStatistics(named_entities_resolved=2, numeric_references_resolved=3)

        assert stats.entities_resolved == 5

    def test_characters_per_second(self):
        """Test throughput calculation."""
        stats = DecodeStatistics(characters_processed=500, processing_time_ms=250.0)

        assert stats.characters_per_second == 2000.0


class TestDecodeResult:
    """Test the DecodeResult class."""

    def test_clean_result(self):
        """Test a result without recovery."""
        result = DecodeResult(text="&", statistics=DecodeStatistics(), mode="STRICT")

        assert result.recovered is False
        assert result.warning_count == 0
        assert result.diagnostics == []
        assert result.correlation_id is None

    def test_recovered_result(self):
        """Test a result with recovered fragments."""
        stats = DecodeStatistics(fragments_recovered=2)
        diagnostics = [_entry(), _entry(severity=DiagnosticSeverity.INFO)]

        result = DecodeResult(
            text=None,
            statistics=stats,
            mode="SLOPPY",
            diagnostics=diagnostics,
        )

        assert result.recovered is True
        assert result.warning_count == 1
        assert result.text is None
