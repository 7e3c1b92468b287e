"""
MultiSink: one logger that fans every call out to an ordered set of sinks.

Dispatch is sequential and in registration order, so a sink may rely on an
earlier sink having already run for the same call (the chat sink reads the
error tracker's last event id this way). A failing sink is counted and
reported, and the loop moves on.
"""

from __future__ import annotations

import logging
import threading
from collections import Counter
from datetime import datetime
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional

from .levels import Severity
from .logging import get_logger
from .record import utcnow
from .sinks.base import Logger, LoggerMethods
from .sinks.stdlib import StdlibLoggerSink

logger = get_logger("fanlog.dispatch")

REQUEST_ID_KEY = "requestId"


def _sink_name(sink: Any) -> str:
    return getattr(sink, "name", None) or type(sink).__name__


class MultiSink(LoggerMethods):
    """Fan-out dispatcher.

    Args:
        primary: A logger that was active before fan-out was enabled. It is
            registered first and therefore always runs first.
        sinks: Initial sinks, in dispatch order.
        request_id: Correlation id injected into every record's context.
    """

    name = "multi"

    def __init__(
        self,
        primary: Logger | logging.Logger | None = None,
        sinks: tuple[Logger, ...] | list[Logger] = (),
        request_id: Optional[str] = None,
    ):
        self._lock = threading.Lock()
        self._sinks: tuple[Logger, ...] = ()
        self._request_id: Optional[str] = None
        self.failures: Counter[str] = Counter()

        if primary is not None:
            self.push(primary)
        for sink in sinks:
            self.push(sink)
        if request_id is not None:
            self.set_request_id(request_id)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def push(self, sink: Logger | logging.Logger) -> "MultiSink":
        """Append a sink to the end of the dispatch order."""
        if isinstance(sink, logging.Logger):
            sink = StdlibLoggerSink(sink)
        if sink is self:
            raise ValueError("A MultiSink cannot be pushed into itself")
        if not isinstance(sink, Logger):
            raise TypeError(f"Expected a logger with a log() method, got {type(sink).__name__}")

        with self._lock:
            self._sinks = (*self._sinks, sink)
        return self

    def set_request_id(self, request_id: Optional[str]) -> None:
        """Set or replace the correlation id. ``None`` stops injecting it."""
        with self._lock:
            self._request_id = request_id

    @property
    def request_id(self) -> Optional[str]:
        return self._request_id

    @property
    def sinks(self) -> tuple[Logger, ...]:
        return self._sinks

    def find(self, name: str) -> Optional[Logger]:
        for sink in self._sinks:
            if _sink_name(sink) == name:
                return sink
        return None

    def __len__(self) -> int:
        return len(self._sinks)

    def __iter__(self) -> Iterator[Logger]:
        return iter(self._sinks)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def log(
        self,
        message: str,
        severity: Severity | int | str,
        timestamp: datetime | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        severity = Severity.parse(severity)
        timestamp = timestamp or utcnow()

        sinks, request_id = self._sinks, self._request_id
        if not sinks:
            return

        merged = dict(context or {})
        if request_id is not None:
            merged[REQUEST_ID_KEY] = request_id
        shared = MappingProxyType(merged)

        for sink in sinks:
            try:
                sink.log(message, severity, timestamp, shared)
            except Exception as exc:
                name = _sink_name(sink)
                self.failures[name] += 1
                logger.warning(
                    "sink_dispatch_failed",
                    sink=name,
                    severity=severity.name,
                    error=f"{type(exc).__name__}: {exc}",
                )

    def close(self) -> None:
        """Close every sink that holds resources."""
        for sink in self._sinks:
            close = getattr(sink, "close", None)
            if callable(close):
                close()

    def __repr__(self) -> str:
        names = ", ".join(_sink_name(s) for s in self._sinks)
        return f"MultiSink([{names}], request_id={self._request_id!r})"
