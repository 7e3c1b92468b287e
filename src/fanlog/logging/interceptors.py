"""
Bridges that feed existing logging call sites into a MultiSink.

- MultiSinkHandler: a stdlib ``logging.Handler``; attach it to the root logger
  and every ``logging.getLogger()`` user fans out without code changes.
- multi_sink_processor: a structlog processor doing the same for structlog.

Both skip events from the ``fanlog`` diagnostics namespace, otherwise a failing
sink reporting its own failure would loop back into itself.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Callable

from structlog.typing import EventDict, WrappedLogger

from ..levels import Severity
from .core import DIAGNOSTICS_NAMESPACE

if TYPE_CHECKING:
    from ..sinks.base import Logger

_STRUCTLOG_RESERVED = {"event", "level", "timestamp", "_name", "logger", "exc_info"}


def _is_internal(name: str | None) -> bool:
    if not name:
        return False
    return name == DIAGNOSTICS_NAMESPACE or name.startswith(DIAGNOSTICS_NAMESPACE + ".") or "structlog" in name


def severity_from_stdlib(levelno: int) -> Severity:
    """Map any stdlib level number, including custom ones, onto a Severity."""
    if levelno >= logging.CRITICAL:
        return Severity.CRITICAL
    if levelno >= logging.ERROR:
        return Severity.ERROR
    if levelno >= logging.WARNING:
        return Severity.WARNING
    if levelno >= logging.INFO:
        return Severity.INFO
    return Severity.DEBUG


class MultiSinkHandler(logging.Handler):
    """Redirect standard library logging records into a fan-out logger."""

    def __init__(self, target: "Logger", level: int = logging.NOTSET):
        super().__init__(level)
        self.target = target
        self._local = threading.local()

    def emit(self, record: logging.LogRecord) -> None:
        try:
            # A primary stdlib logger inside the target propagates back here.
            if _is_internal(record.name) or getattr(self._local, "active", False):
                return

            context: dict[str, Any] = {"logger": record.name}
            extra_context = getattr(record, "context", None)
            if isinstance(extra_context, dict):
                context.update(extra_context)
            if record.exc_info and record.exc_info[1] is not None:
                context["exception"] = record.exc_info[1]

            self._local.active = True
            try:
                self.target.log(
                    record.getMessage(),
                    severity_from_stdlib(record.levelno),
                    datetime.fromtimestamp(record.created, tz=timezone.utc),
                    context,
                )
            finally:
                self._local.active = False
        except Exception:
            self.handleError(record)


def attach_to_stdlib(target: "Logger", logger: logging.Logger | None = None, level: int = logging.NOTSET) -> MultiSinkHandler:
    """Attach a MultiSinkHandler to *logger* (root by default) and return it."""
    handler = MultiSinkHandler(target, level)
    (logger or logging.getLogger()).addHandler(handler)
    return handler


def multi_sink_processor(target: "Logger") -> Callable[[WrappedLogger, str, EventDict], EventDict]:
    """Build a structlog processor that forwards each event to *target*.

    The event dict is passed through unchanged so rendering continues as
    configured.
    """

    def processor(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        name = event_dict.get("logger") or event_dict.get("_name")
        if _is_internal(name):
            return event_dict

        level = event_dict.get("level", method_name)
        try:
            severity = Severity.parse("error" if level == "exception" else level)
        except ValueError:
            severity = Severity.INFO

        context = {k: v for k, v in event_dict.items() if k not in _STRUCTLOG_RESERVED}
        if name:
            context["logger"] = name

        target.log(str(event_dict.get("event", "")), severity, None, context)
        return event_dict

    return processor
