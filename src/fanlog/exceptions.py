"""
fanlog exception hierarchy.

Only setup-time problems raise. Per-call emission failures are contained inside
the sinks and the dispatcher and never surface here.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class FanlogError(Exception):
    """Root of all fanlog errors."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}


class ConfigurationError(FanlogError):
    """Missing or malformed configuration. Raised before any dispatcher exists."""

    def __init__(
        self,
        message: str = "Invalid configuration parameter",
        *,
        code: str = "INVALID_CONFIGURATION",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code=code, details=details)


class UnknownSinkError(ConfigurationError):
    """A configured sink name has no registered factory."""

    def __init__(self, *, name: str, available: list[str]) -> None:
        super().__init__(
            f"Unknown sink: {name!r}. Available: {available}. "
            f"Register custom sinks with register_sink().",
            code="UNKNOWN_SINK",
            details={"name": name, "available": available},
        )


class MissingClientError(ConfigurationError):
    """An enabled sink needs a backend client that was not supplied."""

    def __init__(self, *, sink: str, client: str) -> None:
        super().__init__(
            f"Sink {sink!r} is enabled but no {client} was provided",
            code="MISSING_CLIENT",
            details={"sink": sink, "client": client},
        )
