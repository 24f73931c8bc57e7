"""
Module: logger.py
Description: Structured logging configuration for the event notifier.

Configures structlog for JSON output on stderr. Diagnostics are the
only channel through which delivery failures are reported, so every
component takes a DiagnosticsSink and falls back to a structlog
logger from get_logger().

Key Components:
- DiagnosticsSink: Protocol for the injectable diagnostics channel
- configure_logging(): Opt-in structlog configuration
- get_logger(): structlog logger helper

Dependencies: structlog, datetime
Author: Event Notifier Team
"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Protocol, runtime_checkable

import structlog


@runtime_checkable
class DiagnosticsSink(Protocol):
    """
    Operator-facing diagnostics channel.

    Any structlog bound logger satisfies this protocol. Components
    report notices through info(), recoverable problems through
    warning() and unexpected failures through error().
    """

    def debug(self, event: str, **kw: Any) -> Any: ...

    def info(self, event: str, **kw: Any) -> Any: ...

    def warning(self, event: str, **kw: Any) -> Any: ...

    def error(self, event: str, **kw: Any) -> Any: ...


def _add_timestamp(logger, method_name, event_dict):
    """
    Add ISO 8601 timestamp to log entries.

    Args:
        logger: Logger instance
        method_name: Log method name (info, error, etc.)
        event_dict: Current log event dictionary

    Returns:
        Updated event dictionary with timestamp
    """
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def _add_log_level(logger, method_name, event_dict):
    """Add the upper-cased log level to the event dictionary."""
    event_dict["level"] = method_name.upper()
    return event_dict


def _processors():
    return [
        _add_timestamp,
        _add_log_level,
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ]


def configure_logging(log_level: str = "INFO") -> None:
    """
    Configure structlog for JSON diagnostics on stderr.

    Not called on import; applications opt in, either directly or
    through EventLogger.from_settings().

    Args:
        log_level: Minimum level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Raises:
        ValueError: If log_level is not a known level name
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level}")

    structlog.configure(
        processors=_processors(),
        logger_factory=structlog.WriteLoggerFactory(file=sys.stderr),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )


class _DiagnosticsLogger:
    """
    Logger resolved on every call.

    Uses the application's structlog configuration once one exists;
    until then writes INFO and above as JSON to the current sys.stderr.
    """

    def __init__(self, name: str):
        self._name = name

    def _resolve(self):
        if structlog.is_configured():
            return structlog.get_logger(self._name)
        return structlog.wrap_logger(
            structlog.PrintLogger(sys.stderr),
            processors=_processors(),
            wrapper_class=structlog.make_filtering_bound_logger(logging.INFO),
        )

    def __getattr__(self, method_name: str) -> Any:
        return getattr(self._resolve(), method_name)


def get_logger(name: str) -> DiagnosticsSink:
    """
    Get a diagnostics logger.

    Diagnostics never go to stdout: without configure_logging() (or
    another structlog.configure() call by the application) they are
    written to stderr.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger satisfying DiagnosticsSink

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.warning("Telegram delivery timeout", destination="telegram:-100123", attempt=2)
    """
    return _DiagnosticsLogger(name)
