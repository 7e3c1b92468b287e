"""
Error-tracking sink (Sentry-compatible hub).
"""

from __future__ import annotations

from typing import Any, Optional

from ..clients import ErrorTracker
from ..formatters import Formatter, LineFormatter
from ..levels import Severity
from ..record import LogRecord
from .base import BaseSink

_SENTRY_LEVELS = {
    Severity.DEBUG: "debug",
    Severity.INFO: "info",
    Severity.NOTICE: "info",
    Severity.WARNING: "warning",
    Severity.ERROR: "error",
    Severity.CRITICAL: "fatal",
    Severity.ALERT: "fatal",
    Severity.EMERGENCY: "fatal",
}


class SentrySink(BaseSink):
    """Captures records as events on an error-tracking hub.

    An ``exception`` entry in the context is captured as an exception event;
    anything else becomes a message event. The hub's ``last_event_id()`` is
    exposed so sinks registered later can link to the captured event.
    """

    name = "sentry"

    def __init__(
        self,
        hub: ErrorTracker,
        *,
        level: Severity | int | str = Severity.ERROR,
        environment: Optional[str] = None,
        formatter: Optional[Formatter] = None,
        name: Optional[str] = None,
    ):
        super().__init__(level=level, formatter=formatter, name=name)
        self.hub = hub
        self.environment = environment

    def default_formatter(self) -> Formatter:
        return LineFormatter("%message%")

    def emit(self, record: LogRecord) -> None:
        extras = {k: v for k, v in record.context.items() if k != "exception"}
        tags: dict[str, Any] = {"logger.severity": record.severity.name}
        if self.environment:
            tags["environment"] = self.environment

        error = record.context.get("exception")
        if isinstance(error, BaseException):
            self.hub.capture_exception(error, extras=extras, tags=tags)
            return

        self.hub.capture_message(
            self.formatter.format_record(record),
            level=_SENTRY_LEVELS[record.severity],
            extras=extras,
            tags=tags,
        )

    def last_event_id(self) -> Optional[str]:
        return self.hub.last_event_id()
