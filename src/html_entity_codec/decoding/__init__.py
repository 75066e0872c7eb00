"""Entity decoding layer.

This module provides the streaming decode state machine and the recovery
policies that implement strict and sloppy handling of malformed references.
"""

from .decoder import (
    TRANSITIONS,
    CharClass,
    DecodeState,
    EntityDecoder,
    classify,
    is_scalar_value,
)
from .recovery import (
    RecoveryAction,
    RecoveryPolicy,
    SloppyRecovery,
    StrictRecovery,
    policy_for,
)

__all__ = [
    "TRANSITIONS",
    "CharClass",
    "DecodeState",
    "EntityDecoder",
    "classify",
    "is_scalar_value",
    "RecoveryAction",
    "RecoveryPolicy",
    "SloppyRecovery",
    "StrictRecovery",
    "policy_for",
]
