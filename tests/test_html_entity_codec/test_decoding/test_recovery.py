"""Tests for strict and sloppy recovery policies."""

import logging

import pytest

from html_entity_codec.decoding.recovery import (
    RecoveryAction,
    RecoveryPolicy,
    SloppyRecovery,
    StrictRecovery,
    policy_for,
)
from html_entity_codec.shared.config import DecodeMode
from html_entity_codec.shared.errors import DecodeError, DecodeErrorKind
from html_entity_codec.shared.result import DiagnosticSeverity


class TestStrictRecovery:
    """Test the StrictRecovery policy."""

    @pytest.mark.parametrize("kind", list(DecodeErrorKind))
    def test_always_raises(self, kind):
        """Test every kind is fatal."""
        policy = StrictRecovery()

        with pytest.raises(DecodeError) as exc_info:
            policy.recover(kind, 5, "&x;", RecoveryAction.EMIT_VERBATIM)

        assert exc_info.value.kind is kind
        assert exc_info.value.position == 5
        assert exc_info.value.fragment == "&x;"
        assert policy.recovered_count == 0

    def test_mode(self):
        """Test the policy reports strict mode."""
        assert StrictRecovery.mode is DecodeMode.STRICT


class TestSloppyRecovery:
    """Test the SloppyRecovery policy."""

    def test_emit_verbatim(self):
        """Test kept fragments are returned unchanged."""
        policy = SloppyRecovery()

        replacement = policy.recover(
            DecodeErrorKind.UNKNOWN_ENTITY, 3, "&bogus;", RecoveryAction.EMIT_VERBATIM
        )

        assert replacement == "&bogus;"
        assert policy.recovered_count == 1

    def test_drop(self):
        """Test dropped fragments produce no text."""
        policy = SloppyRecovery()

        replacement = policy.recover(
            DecodeErrorKind.MALFORMED_NUM_ESCAPE, 0, "&#x4", RecoveryAction.DROP
        )

        assert replacement == ""

    def test_diagnostic_recorded(self):
        """Test a warning diagnostic describes the recovery."""
        policy = SloppyRecovery(correlation_id="req-7")

        policy.recover(DecodeErrorKind.PREMATURE_END, 9, "&am", RecoveryAction.DROP)

        (entry,) = policy.diagnostics
        assert entry.severity is DiagnosticSeverity.WARNING
        assert entry.message == "premature_end: '&am' dropped"
        assert entry.component == "entity_recovery"
        assert entry.position == 9
        assert entry.kind is DecodeErrorKind.PREMATURE_END
        assert entry.fragment == "&am"
        assert entry.correlation_id == "req-7"

    def test_kept_message(self):
        """Test the diagnostic wording for kept fragments."""
        policy = SloppyRecovery()

        policy.recover(
            DecodeErrorKind.UNKNOWN_ENTITY, 0, "&x;", RecoveryAction.EMIT_VERBATIM
        )

        assert policy.diagnostics[0].message == "unknown_entity: '&x;' kept"

    @pytest.mark.parametrize("kind", [
        DecodeErrorKind.INVALID_CHARACTER,
        DecodeErrorKind.ENCODING_ERROR,
        DecodeErrorKind.IO_ERROR,
    ])
    def test_unrecoverable_kinds_raise(self, kind):
        """Test non-syntax kinds are raised even in sloppy mode."""
        policy = SloppyRecovery()

        with pytest.raises(DecodeError) as exc_info:
            policy.recover(kind, 1, "&#xD800;", RecoveryAction.DROP)

        assert exc_info.value.kind is kind
        assert policy.recovered_count == 0
        assert policy.diagnostics == []

    def test_max_diagnostics(self):
        """Test diagnostics are capped while recovery continues."""
        policy = SloppyRecovery(max_diagnostics=2)

        for position in range(5):
            policy.recover(
                DecodeErrorKind.UNKNOWN_ENTITY, position, "&x;", RecoveryAction.EMIT_VERBATIM
            )

        assert policy.recovered_count == 5
        assert [entry.position for entry in policy.diagnostics] == [0, 1]

    def test_diagnostics_disabled(self):
        """Test recording can be turned off."""
        policy = SloppyRecovery(record_diagnostics=False)

        policy.recover(DecodeErrorKind.UNKNOWN_ENTITY, 0, "&x;", RecoveryAction.EMIT_VERBATIM)

        assert policy.diagnostics == []
        assert policy.recovered_count == 1

    def test_recovery_logged_at_debug(self, caplog):
        """Test each recovery is logged with its details."""
        policy = SloppyRecovery(correlation_id="req-9")

        with caplog.at_level(logging.DEBUG, logger="html_entity_codec.decoding.recovery"):
            policy.recover(DecodeErrorKind.UNKNOWN_ENTITY, 4, "&x;", RecoveryAction.EMIT_VERBATIM)

        record = caplog.records[-1]
        assert record.levelno == logging.DEBUG
        assert record.kind == "UNKNOWN_ENTITY"
        assert record.position == 4
        assert record.action == "EMIT_VERBATIM"
        assert record.correlation_id == "req-9"


class TestPolicyFor:
    """Test the policy factory."""

    def test_strict(self):
        """Test strict mode builds a StrictRecovery."""
        assert isinstance(policy_for(DecodeMode.STRICT), StrictRecovery)

    def test_sloppy(self):
        """Test sloppy mode builds a configured SloppyRecovery."""
        policy = policy_for(DecodeMode.SLOPPY, "req-1", record_diagnostics=False, max_diagnostics=3)

        assert isinstance(policy, SloppyRecovery)
        assert policy.correlation_id == "req-1"
        assert policy.record_diagnostics is False
        assert policy.max_diagnostics == 3

    def test_fresh_instances(self):
        """Test each call returns a new policy."""
        assert policy_for(DecodeMode.SLOPPY) is not policy_for(DecodeMode.SLOPPY)

    def test_policy_is_abstract(self):
        """Test the base policy cannot be instantiated."""
        with pytest.raises(TypeError):
            RecoveryPolicy()
