"""Shared utilities for the HTML entity codec.

This module provides the error taxonomy, configuration objects, result types
and logging helpers used across the character, decoding and encoding layers.
"""

from .config import (
    CodecConfig,
    ConfigError,
    ConfigValidationError,
    DecodeConfig,
    DecodeMode,
    EncodeConfig,
    EncodePolicy,
    GlobalConfig,
)
from .errors import DecodeError, DecodeErrorKind
from .logging import CorrelationLogger, configure_logging, get_logger
from .result import (
    DecodeResult,
    DecodeStatistics,
    DiagnosticEntry,
    DiagnosticSeverity,
)

__all__ = [
    "CodecConfig",
    "ConfigError",
    "ConfigValidationError",
    "DecodeConfig",
    "DecodeMode",
    "EncodeConfig",
    "EncodePolicy",
    "GlobalConfig",
    "DecodeError",
    "DecodeErrorKind",
    "CorrelationLogger",
    "configure_logging",
    "get_logger",
    "DecodeResult",
    "DecodeStatistics",
    "DiagnosticEntry",
    "DiagnosticSeverity",
]
