from .base import BaseSink, Logger, LoggerMethods
from .sentry import SentrySink
from .slack import SlackSink
from .stdio import StdioSink
from .stdlib import StdlibLoggerSink

__all__ = [
    "BaseSink",
    "Logger",
    "LoggerMethods",
    "SentrySink",
    "SlackSink",
    "StdioSink",
    "StdlibLoggerSink",
]
