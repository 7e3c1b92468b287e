"""
fanlog: one logger, many backends.

A MultiSink forwards each log call, in registration order, to every configured
sink (Slack, a Sentry-compatible error tracker, the console, a pre-existing
stdlib logger). Each sink filters by its own level and formats with its own
formatter; a failing sink never stops the others or reaches the caller.

Design Pattern: Strategy Pattern for sinks, Composite for the dispatcher.
Library: structlog for diagnostics, orjson for JSON, pydantic-settings for config.
"""

from .clients import ChatClient, ErrorTracker, SlackWebhookClient
from .config import FanlogSettings, load_settings
from .exceptions import ConfigurationError, FanlogError, MissingClientError, UnknownSinkError
from .formatters import ConsoleFormatter, Formatter, JsonFormatter, LineFormatter
from .levels import Severity
from .multi import REQUEST_ID_KEY, MultiSink
from .record import LogRecord
from .registry import SinkServices, available_sinks, register_sink
from .service import build_logger
from .sinks import BaseSink, Logger, SentrySink, SlackSink, StdioSink, StdlibLoggerSink

__version__ = "0.1.0"

__all__ = [
    "BaseSink",
    "ChatClient",
    "ConfigurationError",
    "ConsoleFormatter",
    "ErrorTracker",
    "FanlogError",
    "FanlogSettings",
    "Formatter",
    "JsonFormatter",
    "LineFormatter",
    "LogRecord",
    "Logger",
    "MissingClientError",
    "MultiSink",
    "REQUEST_ID_KEY",
    "SentrySink",
    "Severity",
    "SinkServices",
    "SlackSink",
    "SlackWebhookClient",
    "StdioSink",
    "StdlibLoggerSink",
    "UnknownSinkError",
    "available_sinks",
    "build_logger",
    "load_settings",
    "register_sink",
]
