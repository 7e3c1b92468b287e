"""
Standard I/O sink.
"""

from __future__ import annotations

import sys
from typing import Any, Literal, Optional

from ..formatters import ConsoleFormatter, Formatter, JsonFormatter
from ..levels import Severity
from ..record import LogRecord
from .base import BaseSink

LogFormat = Literal["console", "json"]


class StdioSink(BaseSink):
    """Standard I/O sink with configurable format.

    Args:
        fmt: Output format - "console" (aligned human-readable) or "json"
        stream: Output stream (default: stderr)
    """

    name = "stdio"

    def __init__(
        self,
        *,
        fmt: LogFormat = "console",
        stream: Any = None,
        level: Severity | int | str = Severity.DEBUG,
        formatter: Optional[Formatter] = None,
        name: Optional[str] = None,
    ):
        super().__init__(level=level, formatter=formatter, name=name)
        self._fmt = fmt
        self._stream = stream or sys.stderr

    def default_formatter(self) -> Formatter:
        if self._fmt == "json":
            return JsonFormatter()
        use_color = bool(getattr(self._stream, "isatty", lambda: False)())
        return ConsoleFormatter(use_color=use_color)

    def emit(self, record: LogRecord) -> None:
        self._stream.write(self.formatter.format_record(record) + "\n")
        self._stream.flush()
