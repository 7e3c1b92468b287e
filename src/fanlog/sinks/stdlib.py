"""
Adapter that lets a pre-existing stdlib ``logging.Logger`` sit in a MultiSink.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..formatters import interpolate
from ..levels import Severity
from ..record import LogRecord
from .base import BaseSink


class StdlibLoggerSink(BaseSink):
    """Forwards records to a ``logging.Logger``.

    The threshold defaults to DEBUG so the wrapped logger's own level and
    handlers decide what is kept. Placeholders in the message are interpolated
    from the context; the context itself travels as ``record.context``.
    """

    name = "stdlib"

    def __init__(
        self,
        logger: logging.Logger,
        *,
        level: Severity | int | str = Severity.DEBUG,
        name: Optional[str] = None,
    ):
        super().__init__(level=level, name=name)
        self.logger = logger

    def emit(self, record: LogRecord) -> None:
        stdlib_level = record.severity.to_stdlib()
        if not self.logger.isEnabledFor(stdlib_level):
            return
        context = dict(record.context)
        exc = context.get("exception")
        self.logger.log(
            stdlib_level,
            interpolate(record.message, context),
            exc_info=exc if isinstance(exc, BaseException) else None,
            extra={"context": context, "severity": record.severity.name},
        )
