"""
Log record passed from the dispatcher to every sink.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Mapping

from .levels import Severity


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class LogRecord:
    """One log event. Built once per call, never persisted."""

    message: str
    severity: Severity
    timestamp: datetime = field(default_factory=utcnow)
    context: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def create(
        cls,
        message: str,
        severity: Severity | int | str,
        timestamp: datetime | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> "LogRecord":
        """Normalise loosely typed call arguments into a record."""
        if isinstance(context, MappingProxyType):
            frozen = context
        else:
            frozen = MappingProxyType(dict(context or {}))
        return cls(
            message=str(message),
            severity=Severity.parse(severity),
            timestamp=timestamp or utcnow(),
            context=frozen,
        )
