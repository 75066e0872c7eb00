"""Configuration classes for the HTML entity codec.

This module provides configuration objects for the decoding and encoding
components, enabling control over recovery behavior, escaping policy and
stream buffering.
"""

import json
from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Any, Dict, List, Optional

from .logging import VALID_LEVELS

DEFAULT_READ_CHUNK_SIZE = 8192
DEFAULT_MAX_DIAGNOSTICS = 1000

_COMPONENTS = ("decode", "encode", "global_")


class DecodeMode(Enum):
    """Error recovery policy for decoding."""

    STRICT = auto()   # Fail on the first malformed reference
    SLOPPY = auto()   # Drop or pass through malformed references


class EncodePolicy(Enum):
    """Escaping policy for encoding."""

    MINIMAL = auto()    # The five markup-significant characters only
    ATTRIBUTE = auto()  # Additionally hex-escape Latin-1 non-alphanumerics


@dataclass
class DecodeConfig:
    """Configuration for decoding operations."""

    mode: DecodeMode = DecodeMode.STRICT
    read_chunk_size: int = DEFAULT_READ_CHUNK_SIZE
    record_diagnostics: bool = True
    max_diagnostics: int = DEFAULT_MAX_DIAGNOSTICS

    def __post_init__(self) -> None:
        """Validate decode configuration."""
        if not isinstance(self.mode, DecodeMode):
            raise ValueError("mode must be a DecodeMode")
        if self.read_chunk_size <= 0:
            raise ValueError("read_chunk_size must be > 0")
        if self.max_diagnostics < 0:
            raise ValueError("max_diagnostics must be >= 0")

    @property
    def sloppy(self) -> bool:
        return self.mode is DecodeMode.SLOPPY


@dataclass
class EncodeConfig:
    """Configuration for encoding operations."""

    policy: EncodePolicy = EncodePolicy.MINIMAL

    def __post_init__(self) -> None:
        """Validate encode configuration."""
        if not isinstance(self.policy, EncodePolicy):
            raise ValueError("policy must be an EncodePolicy")


@dataclass
class GlobalConfig:
    """Settings that apply across all components."""

    logging_level: str = "WARNING"
    enable_correlation_tracking: bool = True

    def __post_init__(self) -> None:
        """Validate global configuration."""
        if self.logging_level not in VALID_LEVELS:
            raise ValueError(f"logging_level must be one of {list(VALID_LEVELS)}")


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class CodecConfig:
    """Immutable configuration for the entity codec.

    Thread-safe due to frozen dataclass implementation; a single instance can
    back any number of concurrent codec calls.
    """

    decode: DecodeConfig = field(default_factory=DecodeConfig)
    encode: EncodeConfig = field(default_factory=EncodeConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)

    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete codec configuration."""
        try:
            self.decode.__post_init__()
            self.encode.__post_init__()
            self.global_.__post_init__()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

    def override(self, **kwargs: Any) -> "CodecConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Field overrides; nested fields use ``component__field``

        Returns:
            New CodecConfig instance with overrides applied

        Example:
            >>> config = CodecConfig()
            >>> sloppy = config.override(decode__mode=DecodeMode.SLOPPY)
        """
        nested_overrides: Dict[str, Dict[str, Any]] = {}
        top_level: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                # rsplit keeps the trailing underscore of "global_"
                component, field_name = key.rsplit("__", 1)
                if component not in _COMPONENTS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                        suggestions=[f"Use one of {list(_COMPONENTS)}"]
                    )
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                top_level[key] = value

        new_fields: Dict[str, Any] = {}
        try:
            for component, overrides in nested_overrides.items():
                new_fields[component] = replace(getattr(self, component), **overrides)
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e
        new_fields.update(top_level)

        return replace(self, **new_fields)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        def _dataclass_to_dict(obj: Any) -> Any:
            if hasattr(obj, "__dataclass_fields__"):
                return {
                    name: _dataclass_to_dict(getattr(obj, name))
                    for name in obj.__dataclass_fields__
                }
            if isinstance(obj, Enum):
                return obj.name
            return obj

        result = _dataclass_to_dict(self)
        if not isinstance(result, dict):
            raise ConfigValidationError("Configuration serialization failed")
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CodecConfig":
        """Create configuration from dictionary.

        Unknown keys are rejected with ``ConfigValidationError``.
        """
        component_types = {
            "decode": DecodeConfig,
            "encode": EncodeConfig,
            "global_": GlobalConfig,
        }
        enum_fields = {"mode": DecodeMode, "policy": EncodePolicy}

        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            if key in component_types:
                target = component_types[key]
                values = {}
                for field_name, field_value in value.items():
                    if field_name not in target.__dataclass_fields__:
                        raise ConfigValidationError(
                            f"Unknown field {key}.{field_name}",
                            field_name=f"{key}.{field_name}"
                        )
                    if field_name in enum_fields and isinstance(field_value, str):
                        try:
                            field_value = enum_fields[field_name][field_value.upper()]
                        except KeyError as e:
                            raise ConfigValidationError(
                                f"Invalid value for {key}.{field_name}: {field_value}",
                                field_name=f"{key}.{field_name}",
                                suggestions=list(enum_fields[field_name].__members__)
                            ) from e
                    values[field_name] = field_value
                try:
                    kwargs[key] = target(**values)
                except ValueError as e:
                    raise ConfigValidationError(str(e), field_name=key) from e
            elif key in ("name", "description"):
                kwargs[key] = value
            else:
                raise ConfigValidationError(f"Unknown configuration key: {key}",
                                            field_name=key)
        return cls(**kwargs)

    @classmethod
    def from_json(cls, json_str: str) -> "CodecConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid configuration JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration JSON must be an object")
        return cls.from_dict(data)

    # Preset factory methods
    @classmethod
    def strict(cls) -> "CodecConfig":
        """Fail on the first malformed reference."""
        return cls(
            decode=DecodeConfig(mode=DecodeMode.STRICT),
            name="strict",
            description="Reject any malformed or unknown entity reference"
        )

    @classmethod
    def sloppy(cls) -> "CodecConfig":
        """Recover from malformed references and keep decoding."""
        return cls(
            decode=DecodeConfig(mode=DecodeMode.SLOPPY),
            name="sloppy",
            description="Drop malformed references, pass unknown entities through"
        )

    @classmethod
    def attribute_safe(cls) -> "CodecConfig":
        """Encode for untrusted values placed in HTML attributes."""
        return cls(
            encode=EncodeConfig(policy=EncodePolicy.ATTRIBUTE),
            name="attribute_safe",
            description="Hex-escape every Latin-1 non-alphanumeric when encoding"
        )
