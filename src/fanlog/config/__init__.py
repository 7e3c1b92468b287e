"""
fanlog configuration module.

Usage:
    from fanlog.config import load_settings

    settings = load_settings({"environment": "production", "slack": {"level": "ERROR"}})
    settings.slack.level  # Severity.ERROR

    # Or from FANLOG_* environment variables / .env
    settings = load_settings()
"""

from __future__ import annotations

import re
from typing import Any, Mapping, Union

from pydantic import ValidationError
from pydantic_settings import SettingsError

from ..exceptions import ConfigurationError
from .settings import (
    FanlogSettings,
    SentrySettings,
    SinkSettings,
    SlackSettings,
    StdioFormat,
    StdioSettings,
    StdioStream,
)

SettingsSource = Union[FanlogSettings, Mapping[str, Any], None]

_SOURCE_FIELD = re.compile(r'field "([^"]+)"')


def load_settings(source: SettingsSource = None) -> FanlogSettings:
    """Resolve a settings object, failing fast on invalid configuration."""
    if isinstance(source, FanlogSettings):
        return source
    if source is not None and not isinstance(source, Mapping):
        raise ConfigurationError(
            f"Unsupported configuration source: {type(source).__name__}",
            details={"type": type(source).__name__},
        )
    try:
        return FanlogSettings(**dict(source or {}))
    except ValidationError as exc:
        errors = [
            {"field": ".".join(str(p) for p in err["loc"]), "error": err["msg"]}
            for err in exc.errors()
        ]
        raise ConfigurationError(
            "Invalid configuration parameter: " + "; ".join(f"{e['field']}: {e['error']}" for e in errors),
            details={"errors": errors},
        ) from exc
    except SettingsError as exc:
        # Raised by the env/.env sources before field validation runs.
        match = _SOURCE_FIELD.search(str(exc))
        field = match.group(1) if match else None
        raise ConfigurationError(
            f"Invalid configuration parameter: {exc}",
            details={"errors": [{"field": field, "error": str(exc)}]},
        ) from exc


__all__ = [
    "FanlogSettings",
    "SentrySettings",
    "SettingsSource",
    "SinkSettings",
    "SlackSettings",
    "StdioFormat",
    "StdioSettings",
    "StdioStream",
    "load_settings",
]
