"""
Fan-out logging configuration.

One top-level settings object with a section per sink. Values come from init
kwargs (a mapping handed to ``load_settings``), then ``FANLOG_*`` environment
variables, then ``.env``. Nested fields use ``__``::

    FANLOG_ENVIRONMENT=production
    FANLOG_SINKS='["sentry", "slack"]'
    FANLOG_SLACK__LEVEL=ERROR
    FANLOG_SLACK__ALERT_CHANNEL=#alerts
"""

from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..levels import Severity
from ..sinks.slack import DEFAULT_EVENT_LINK_TEMPLATE


def _parse_level(value: Any) -> Severity:
    try:
        return Severity.parse(value)
    except ValueError as exc:
        raise ValueError(f"invalid log level {value!r}") from exc


class SinkSettings(BaseModel):
    """Fields shared by every sink section."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    enabled: bool = Field(default=True, description="Whether the sink is built at startup")
    level: Severity = Field(default=Severity.ERROR, description="Minimum severity emitted (inclusive)")

    @field_validator("level", mode="before")
    @classmethod
    def _validate_level(cls, value: Any) -> Severity:
        return _parse_level(value)


class SlackSettings(SinkSettings):
    channel: Optional[str] = Field(default=None, description="Default channel")
    alert_channel: Optional[str] = Field(default=None, description="Channel for records above WARNING")
    webhook_url: Optional[str] = Field(default=None, description="Incoming webhook URL")
    username: Optional[str] = Field(default=None, description="Display name for posted messages")
    event_link_template: str = Field(
        default=DEFAULT_EVENT_LINK_TEMPLATE,
        description="Appended to the text when the error tracker has a last event id",
    )
    timeout: float = Field(default=5.0, description="Webhook request timeout in seconds")

    @field_validator("event_link_template")
    @classmethod
    def _validate_event_link_template(cls, value: str) -> str:
        try:
            value.format(event_id="")
        except (KeyError, IndexError, ValueError) as exc:
            raise ValueError(
                "event_link_template may only use the {event_id} field; write literal braces as {{ }}"
            ) from exc
        return value


class SentrySettings(SinkSettings):
    enabled: bool = Field(default=False, description="Whether the sink is built at startup")


class StdioFormat(str, Enum):
    CONSOLE = "console"
    JSON = "json"


class StdioStream(str, Enum):
    STDERR = "stderr"
    STDOUT = "stdout"


class StdioSettings(SinkSettings):
    enabled: bool = Field(default=False, description="Whether the sink is built at startup")
    level: Severity = Field(default=Severity.DEBUG, description="Minimum severity emitted (inclusive)")
    format: StdioFormat = Field(default=StdioFormat.CONSOLE, description="Output format")
    stream: StdioStream = Field(default=StdioStream.STDERR, description="Output stream")


class FanlogSettings(BaseSettings):
    """Top-level fan-out configuration. ``environment`` is required."""

    model_config = SettingsConfigDict(
        env_prefix="FANLOG_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    environment: str = Field(min_length=1, description="Deployment environment, e.g. production")
    request_id: Optional[str] = Field(default=None, description="Correlation id attached to every record")
    sinks: List[str] = Field(
        default_factory=lambda: ["sentry", "slack"],
        description="Sink names in dispatch order",
    )

    slack: SlackSettings = Field(default_factory=SlackSettings)
    sentry: SentrySettings = Field(default_factory=SentrySettings)
    stdio: StdioSettings = Field(default_factory=StdioSettings)

    @field_validator("environment")
    @classmethod
    def _validate_environment(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("environment must not be blank")
        return value

    @field_validator("sinks", mode="before")
    @classmethod
    def _split_sinks(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [s.strip() for s in value.split(",") if s.strip()]
        return value

    @field_validator("sinks")
    @classmethod
    def _reject_duplicate_sinks(cls, value: List[str]) -> List[str]:
        seen: set[str] = set()
        repeated: set[str] = set()
        for name in value:
            if name in seen:
                repeated.add(name)
            seen.add(name)
        if repeated:
            raise ValueError(f"sink names must be unique, repeated: {sorted(repeated)}")
        return value

    def section(self, name: str) -> Optional[SinkSettings]:
        """Settings section for a sink name, if the model defines one."""
        value = getattr(self, name, None)
        return value if isinstance(value, SinkSettings) else None
