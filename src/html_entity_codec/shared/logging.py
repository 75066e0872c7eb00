"""Structured logging utilities for the entity codec.

Every record emitted by the codec carries the component that produced it and
the caller's correlation ID in its ``extra`` data, so decode and encode calls
can be traced through application logs. The library never installs handlers;
applications opt in to a level with ``configure_logging``.
"""

import logging
from typing import Any, Dict, MutableMapping, Optional, Tuple

PACKAGE_LOGGER_NAME = "html_entity_codec"
VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class CorrelationLogger(logging.LoggerAdapter):
    """Logger adapter that adds correlation ID and component to each record.

    Per-call ``extra`` is merged over the bound context instead of replacing
    it, and ``bind`` derives a logger with additional fixed context.
    """

    def __init__(
        self,
        name: str,
        correlation_id: Optional[str] = None,
        component: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        """Initialize correlation logger.

        Args:
            name: Logger name (typically __name__)
            correlation_id: Optional correlation ID for request tracking
            component: Component name, defaults to the last part of ``name``
            context: Extra fields attached to every record
        """
        extra = {
            "component": component or name.rsplit(".", 1)[-1],
            "correlation_id": correlation_id,
        }
        if context:
            extra.update(context)
        super().__init__(logging.getLogger(name), extra)

    @property
    def component(self) -> str:
        return self.extra["component"]

    @property
    def correlation_id(self) -> Optional[str]:
        return self.extra["correlation_id"]

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> Tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs

    def bind(self, **context: Any) -> "CorrelationLogger":
        """Return a logger for the same component with extra fixed fields."""
        merged = {
            key: value for key, value in self.extra.items()
            if key not in ("component", "correlation_id")
        }
        merged.update(context)
        return CorrelationLogger(
            self.logger.name, self.correlation_id, self.component, merged
        )

    def is_enabled_for(self, level: int) -> bool:
        return self.isEnabledFor(level)


def get_logger(
    name: str,
    correlation_id: Optional[str] = None,
    component: Optional[str] = None
) -> CorrelationLogger:
    """Get a correlation-aware logger instance.

    Args:
        name: Logger name (typically __name__)
        correlation_id: Optional correlation ID for request tracking
        component: Component name for structured logging

    Returns:
        CorrelationLogger instance
    """
    return CorrelationLogger(name, correlation_id, component)


def configure_logging(level: str = "WARNING") -> logging.Logger:
    """Set the level of the package logger.

    Args:
        level: One of DEBUG, INFO, WARNING, ERROR, CRITICAL

    Returns:
        The package root logger
    """
    if level not in VALID_LEVELS:
        raise ValueError(f"logging level must be one of {list(VALID_LEVELS)}")
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    package_logger.setLevel(level)
    return package_logger
