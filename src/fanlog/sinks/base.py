"""
Sink abstraction (Strategy Pattern).

Every sink, and the MultiSink dispatcher itself, satisfies the ``Logger``
protocol. ``BaseSink`` is the template: it filters by level, builds the record,
and hands it to the backend-specific ``emit``.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Mapping, Protocol, runtime_checkable

from ..formatters import Formatter, LineFormatter
from ..levels import Severity
from ..logging import get_logger
from ..record import LogRecord

logger = get_logger("fanlog.sinks")


@runtime_checkable
class Logger(Protocol):
    """Anything that accepts a log call."""

    def log(
        self,
        message: str,
        severity: Severity | int | str,
        timestamp: datetime | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None: ...


class LoggerMethods(ABC):
    """Per-level shortcuts on top of ``log()``."""

    @abstractmethod
    def log(
        self,
        message: str,
        severity: Severity | int | str,
        timestamp: datetime | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None: ...

    def debug(self, message: str, context: Mapping[str, Any] | None = None) -> None:
        self.log(message, Severity.DEBUG, context=context)

    def info(self, message: str, context: Mapping[str, Any] | None = None) -> None:
        self.log(message, Severity.INFO, context=context)

    def notice(self, message: str, context: Mapping[str, Any] | None = None) -> None:
        self.log(message, Severity.NOTICE, context=context)

    def warning(self, message: str, context: Mapping[str, Any] | None = None) -> None:
        self.log(message, Severity.WARNING, context=context)

    def error(self, message: str, context: Mapping[str, Any] | None = None) -> None:
        self.log(message, Severity.ERROR, context=context)

    def critical(self, message: str, context: Mapping[str, Any] | None = None) -> None:
        self.log(message, Severity.CRITICAL, context=context)

    def alert(self, message: str, context: Mapping[str, Any] | None = None) -> None:
        self.log(message, Severity.ALERT, context=context)

    def emergency(self, message: str, context: Mapping[str, Any] | None = None) -> None:
        self.log(message, Severity.EMERGENCY, context=context)


class BaseSink(LoggerMethods):
    """Abstract base class for log sinks.

    Args:
        level: Minimum severity emitted (inclusive).
        formatter: Explicit formatter; when omitted ``default_formatter()`` is
            built on first use and cached for the sink's lifetime.
        name: Identifier used in diagnostics and ``MultiSink.find()``.
    """

    name: str = "sink"

    def __init__(
        self,
        *,
        level: Severity | int | str = Severity.DEBUG,
        formatter: Formatter | None = None,
        name: str | None = None,
    ):
        self.level = Severity.parse(level)
        self._formatter = formatter
        self._formatter_lock = threading.Lock()
        self.failures = 0
        if name is not None:
            self.name = name

    @property
    def formatter(self) -> Formatter:
        if self._formatter is None:
            with self._formatter_lock:
                if self._formatter is None:
                    self._formatter = self.default_formatter()
        return self._formatter

    def default_formatter(self) -> Formatter:
        return LineFormatter()

    def is_handling(self, severity: Severity | int | str) -> bool:
        return Severity.parse(severity) >= self.level

    def log(
        self,
        message: str,
        severity: Severity | int | str,
        timestamp: datetime | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        severity = Severity.parse(severity)
        if severity < self.level:
            return

        record = LogRecord.create(message, severity, timestamp, context)
        try:
            self.emit(record)
        except Exception as exc:
            self.failures += 1
            logger.warning(
                "sink_emit_failed",
                sink=self.name,
                severity=severity.name,
                error=f"{type(exc).__name__}: {exc}",
            )

    @abstractmethod
    def emit(self, record: LogRecord) -> None:
        """Deliver a record that passed the level filter."""
        ...

    def close(self) -> None:
        """Release backend resources. Most sinks hold none."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, level={self.level.name})"
