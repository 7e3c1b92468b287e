"""
Record formatters.

- LineFormatter: ``%placeholder%`` templates, the default for chat/error sinks
- JsonFormatter: one orjson line per record
- ConsoleFormatter: aligned, optionally coloured columns for terminals

Formatters are pure: the same inputs always render the same string, and no
input makes them raise. Unresolved placeholders are left as written.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Mapping

import orjson

from .levels import Severity
from .record import LogRecord

PLACEHOLDER = re.compile(r"%([A-Za-z_][A-Za-z0-9_.\-]*)%")

DEFAULT_TEMPLATE = "[%timestamp%][%severity%] %message%"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def orjson_dumps(v: Any, *, default: Any = str) -> str:
    """Fast JSON serialization using orjson."""
    return orjson.dumps(v, default=default, option=orjson.OPT_UTC_Z | orjson.OPT_NAIVE_UTC | orjson.OPT_NON_STR_KEYS).decode()


def stringify(value: Any) -> str:
    """Render a context value for inclusion in a text line."""
    if isinstance(value, str):
        return value
    if isinstance(value, (bool, int, float)) or value is None:
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, BaseException):
        return f"{type(value).__name__}: {value}"
    try:
        return orjson_dumps(value)
    except (TypeError, orjson.JSONEncodeError):
        return repr(value)


def interpolate(message: str, context: Mapping[str, Any]) -> str:
    """Replace ``%key%`` in *message* with ``context[key]``; unknown keys stay literal."""
    if "%" not in message or not context:
        return message

    def _sub(match: re.Match[str]) -> str:
        key = match.group(1)
        if key in context:
            return stringify(context[key])
        return match.group(0)

    return PLACEHOLDER.sub(_sub, message)


class Formatter(ABC):
    """Renders a record into the final display string."""

    @abstractmethod
    def format(
        self,
        message: str,
        severity: Severity,
        timestamp: datetime,
        context: Mapping[str, Any],
    ) -> str: ...

    def format_record(self, record: LogRecord) -> str:
        return self.format(record.message, record.severity, record.timestamp, record.context)


class LineFormatter(Formatter):
    """Template formatter.

    Template placeholders:
        %severity%   level name, e.g. ``ERROR``
        %message%    the message, itself interpolated from context
        %timestamp%  the record time rendered with ``date_format``
        %<key>%      any context key
    """

    def __init__(self, template: str = DEFAULT_TEMPLATE, date_format: str = DEFAULT_DATE_FORMAT):
        self.template = template
        self.date_format = date_format

    def format(
        self,
        message: str,
        severity: Severity,
        timestamp: datetime,
        context: Mapping[str, Any],
    ) -> str:
        context = context or {}
        rendered_message = interpolate(str(message), context)

        def _sub(match: re.Match[str]) -> str:
            key = match.group(1)
            if key == "message":
                return rendered_message
            if key == "severity":
                return _level_name(severity)
            if key == "timestamp":
                return self._format_timestamp(timestamp)
            if key in context:
                return stringify(context[key])
            return match.group(0)

        return PLACEHOLDER.sub(_sub, self.template)

    def _format_timestamp(self, timestamp: datetime) -> str:
        try:
            return timestamp.strftime(self.date_format)
        except (AttributeError, ValueError):
            return str(timestamp)


class JsonFormatter(Formatter):
    """One JSON object per record; context keys are merged at the top level."""

    def format(
        self,
        message: str,
        severity: Severity,
        timestamp: datetime,
        context: Mapping[str, Any],
    ) -> str:
        context = context or {}
        payload: dict[str, Any] = {
            "timestamp": timestamp.isoformat() if isinstance(timestamp, datetime) else str(timestamp),
            "level": _level_name(severity).lower(),
            "message": interpolate(str(message), context),
        }
        for key, value in context.items():
            payload.setdefault(str(key), value)
        try:
            return orjson_dumps(payload)
        except (TypeError, orjson.JSONEncodeError):
            return orjson_dumps({k: stringify(v) for k, v in payload.items()})


def _level_name(severity: Any) -> str:
    try:
        return Severity.parse(severity).name
    except ValueError:
        return str(severity)


# =============================================================================
# Console Formatter (Aligned Columns)
# =============================================================================

COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "timestamp": "\033[90m",
    "logger": "\033[35m",
    "key": "\033[34m",
}


def colorize(text: str, color: str) -> str:
    """Apply ANSI color to text."""
    return f"{COLORS.get(color, '')}{text}{COLORS['reset']}"


class ConsoleFormatter(Formatter):
    """Human-readable console rendering (fixed width, right-aligned)."""

    _RESET = "\x1b[0m"
    _LEVEL_COLORS = {
        "DEBUG": "\x1b[36m",
        "INFO": "\x1b[32m",
        "NOTICE": "\x1b[32m",
        "WARNING": "\x1b[33m",
        "ERROR": "\x1b[31m",
        "CRITICAL": "\x1b[1;31m",
        "ALERT": "\x1b[1;31m",
        "EMERGENCY": "\x1b[1;31m",
    }

    EXCLUDED_KEYS = {"logger"}

    def __init__(
        self,
        *,
        name: str = "root",
        use_color: bool = False,
        timestamp_format: str = DEFAULT_DATE_FORMAT,
        level_width: int = 9,
        logger_width: int = 32,
        separator: str = " | ",
    ):
        self.name = name
        self.use_color = use_color
        self.timestamp_format = timestamp_format
        self.level_width = level_width
        self.logger_width = logger_width
        self.separator = separator

    @staticmethod
    def _fit_right(text: str, width: int) -> str:
        if width <= 0:
            return text
        if len(text) > width:
            if width <= 3:
                text = text[-width:]
            else:
                text = "..." + text[-(width - 3) :]
        return f"{text:>{width}}"

    def _format_timestamp(self, timestamp: datetime) -> str:
        try:
            return timestamp.astimezone().strftime(self.timestamp_format)
        except (AttributeError, ValueError):
            return str(timestamp)

    def _colorize_level(self, text: str, level_upper: str) -> str:
        if not self.use_color:
            return text
        color = self._LEVEL_COLORS.get(level_upper)
        if not color:
            return text
        return f"{color}{text}{self._RESET}"

    def _maybe_color(self, text: str, color: str) -> str:
        if not self.use_color:
            return text
        return colorize(text, color)

    def format(
        self,
        message: str,
        severity: Severity,
        timestamp: datetime,
        context: Mapping[str, Any],
    ) -> str:
        context = context or {}
        message_text = interpolate(str(message), context)
        logger_name = str(context.get("logger", self.name))

        extras = []
        for k, v in context.items():
            if k in self.EXCLUDED_KEYS:
                continue
            extras.append(f"{self._maybe_color(str(k), 'key')}={self._maybe_color(stringify(v), 'dim')}")
        if extras:
            message_text = f"{message_text} " + " ".join(extras)

        level_upper = _level_name(severity)
        return "".join(
            [
                self._maybe_color(self._format_timestamp(timestamp), "timestamp"),
                self.separator,
                self._colorize_level(self._fit_right(level_upper, self.level_width), level_upper),
                self.separator,
                self._maybe_color(self._fit_right(logger_name, self.logger_width), "logger"),
                self.separator,
                message_text,
            ]
        )
