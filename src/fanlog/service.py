"""
Bootstrap: turn configuration and backend clients into a ready MultiSink.

    from fanlog import build_logger

    log = build_logger(
        {"environment": "production", "sentry": {"enabled": True}},
        primary=logging.getLogger("app"),
        chat_client=slack_client,
        error_tracker=sentry_sdk,
    )
    log.error("payment %order% failed", {"order": 42})
"""

from __future__ import annotations

import logging
from typing import Optional

from .clients import ChatClient, ErrorTracker
from .config import SettingsSource, load_settings
from .logging import ensure_logging_configured, get_logger
from .multi import MultiSink
from .registry import SinkServices, get_sink_factory
from .sinks.base import Logger

logger = get_logger("fanlog.service")


def build_logger(
    config: SettingsSource = None,
    *,
    primary: Logger | logging.Logger | None = None,
    chat_client: Optional[ChatClient] = None,
    error_tracker: Optional[ErrorTracker] = None,
) -> MultiSink:
    """
    Build the fan-out logger.

    Args:
        config: Settings object, mapping, or None to read FANLOG_* variables.
        primary: Logger already in use before fan-out; it keeps running first.
        chat_client: Client for the slack sink.
        error_tracker: Hub for the sentry sink, also used for chat correlation links.

    Unless the application already configured structlog, fanlog's own
    diagnostics are set to WARNING on stderr here.

    Raises:
        ConfigurationError: Invalid configuration, unknown sink name, or an
            enabled sink without its backend client.
    """
    ensure_logging_configured()
    settings = load_settings(config)
    services = SinkServices(chat_client=chat_client, error_tracker=error_tracker)

    # Resolve every sink before building the dispatcher so setup fails as a whole.
    sinks: list[Logger] = []
    for name in settings.sinks:
        section = settings.section(name)
        if section is not None and not section.enabled:
            logger.debug("sink_disabled", sink=name)
            continue
        sink = get_sink_factory(name)(settings, services)
        if error_tracker is not None and hasattr(sink, "set_error_tracker"):
            sink.set_error_tracker(error_tracker)
        sinks.append(sink)

    multi = MultiSink(primary=primary, sinks=sinks, request_id=settings.request_id)
    logger.debug(
        "fanout_logger_built",
        environment=settings.environment,
        sinks=[getattr(s, "name", type(s).__name__) for s in multi],
        request_id=settings.request_id,
    )
    return multi
