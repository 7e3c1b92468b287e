"""
Sink registry: sink name -> factory.

Factories receive the resolved settings and the backend clients handed to
``build_logger`` and return a ready sink. Custom backends register here before
``build_logger`` runs.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Callable, Optional

from .clients import ChatClient, ErrorTracker, SlackWebhookClient
from .config import FanlogSettings
from .exceptions import MissingClientError, UnknownSinkError
from .sinks.base import Logger
from .sinks.sentry import SentrySink
from .sinks.slack import SlackSink
from .sinks.stdio import StdioSink


@dataclass(frozen=True)
class SinkServices:
    """Already-constructed backend clients available to factories."""

    chat_client: Optional[ChatClient] = None
    error_tracker: Optional[ErrorTracker] = None


SinkFactory = Callable[[FanlogSettings, SinkServices], Logger]


def create_slack_sink(settings: FanlogSettings, services: SinkServices) -> Logger:
    cfg = settings.slack
    client = services.chat_client
    if client is None:
        if not cfg.webhook_url:
            raise MissingClientError(sink="slack", client="chat client or slack.webhook_url")
        client = SlackWebhookClient(cfg.webhook_url, username=cfg.username, timeout=cfg.timeout)

    return SlackSink(
        client,
        level=cfg.level,
        channel=cfg.channel,
        alert_channel=cfg.alert_channel,
        event_link_template=cfg.event_link_template,
    )


def create_sentry_sink(settings: FanlogSettings, services: SinkServices) -> Logger:
    if services.error_tracker is None:
        raise MissingClientError(sink="sentry", client="error tracker")
    return SentrySink(services.error_tracker, level=settings.sentry.level, environment=settings.environment)


def create_stdio_sink(settings: FanlogSettings, services: SinkServices) -> Logger:
    cfg = settings.stdio
    stream = sys.stdout if cfg.stream.value == "stdout" else sys.stderr
    return StdioSink(fmt=cfg.format.value, stream=stream, level=cfg.level)


# Sink factory table (Strategy Pattern)
_SINK_FACTORIES: dict[str, SinkFactory] = {
    "slack": create_slack_sink,
    "sentry": create_sentry_sink,
    "stdio": create_stdio_sink,
}


def register_sink(name: str, factory: SinkFactory) -> None:
    """Register a custom sink factory. Call before build_logger()."""
    _SINK_FACTORIES[name] = factory


def unregister_sink(name: str) -> None:
    _SINK_FACTORIES.pop(name, None)


def available_sinks() -> list[str]:
    return list(_SINK_FACTORIES)


def get_sink_factory(name: str) -> SinkFactory:
    factory = _SINK_FACTORIES.get(name)
    if factory is None:
        raise UnknownSinkError(name=name, available=available_sinks())
    return factory
