"""
Diagnostics logging for fanlog, plus bridges from stdlib logging and structlog
into a MultiSink.

Library: structlog + orjson, rendered through fanlog's own formatters.
"""

from .core import DIAGNOSTICS_NAMESPACE, configure_logging, ensure_logging_configured, get_logger

__all__ = ["DIAGNOSTICS_NAMESPACE", "configure_logging", "ensure_logging_configured", "get_logger"]
