"""
Core logging configuration for fanlog's own diagnostics.

These loggers report on the fan-out layer itself (sink failures, setup
decisions). They never route through a MultiSink unless a bridge is installed,
and the bridges skip the ``fanlog`` namespace.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

import structlog
from structlog.typing import EventDict, WrappedLogger

from ..formatters import ConsoleFormatter, Formatter, JsonFormatter
from ..levels import Severity

DIAGNOSTICS_NAMESPACE = "fanlog"


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(_name=name or DIAGNOSTICS_NAMESPACE)


# =============================================================================
# Structlog Processors
# =============================================================================


def add_timestamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add a UTC timestamp to the log event."""
    event_dict["timestamp"] = datetime.now(timezone.utc)
    return event_dict


def add_logger_name(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add logger name to log event."""
    event_dict["logger"] = event_dict.get("_name", DIAGNOSTICS_NAMESPACE)
    event_dict.pop("_name", None)
    return event_dict


def rename_event_key(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Rename 'event' to 'message'."""
    if "event" in event_dict:
        event_dict["message"] = event_dict.pop("event")
    return event_dict


class RecordRenderer:
    """Final processor: renders the event dict with a fanlog formatter."""

    def __init__(self, formatter: Formatter):
        self._formatter = formatter

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> str:
        message = event_dict.pop("message", "")
        level = event_dict.pop("level", method_name)
        timestamp = event_dict.pop("timestamp", None) or datetime.now(timezone.utc)
        try:
            severity = Severity.parse(level)
        except ValueError:
            severity = Severity.INFO
        return self._formatter.format(str(message), severity, timestamp, event_dict)


# =============================================================================
# Configuration Logic
# =============================================================================


def _stderr_logger_factory(*args: Any) -> structlog.PrintLogger:
    # Resolved per logger so a replaced sys.stderr is picked up.
    return structlog.PrintLogger(file=sys.stderr)


def configure_logging(
    *,
    level: str = "INFO",
    fmt: str = "console",
    stream: TextIO | None = None,
) -> None:
    """
    Configure fanlog's diagnostics output.

    Args:
        level: Minimum level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        fmt: "console" (aligned columns) or "json"
        stream: Output stream (default: stderr)
    """
    formatter: Formatter
    if fmt.lower() == "json":
        formatter = JsonFormatter()
    else:
        use_color = bool(getattr(stream or sys.stderr, "isatty", lambda: False)())
        formatter = ConsoleFormatter(name=DIAGNOSTICS_NAMESPACE, use_color=use_color)

    shared_processors: list[Any] = [
        structlog.stdlib.add_log_level,
        add_timestamp,
        add_logger_name,
        rename_event_key,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=shared_processors + [RecordRenderer(formatter)],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level.upper(), logging.INFO)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream) if stream else _stderr_logger_factory,
        cache_logger_on_first_use=False,
    )


def ensure_logging_configured(level: str = "WARNING") -> None:
    """Configure diagnostics unless the application already configured structlog.

    Without this, structlog's default prints every level to stdout. Only
    warnings (sink failures) reach stderr here; call ``configure_logging``
    to change that.
    """
    if not structlog.is_configured():
        configure_logging(level=level)
