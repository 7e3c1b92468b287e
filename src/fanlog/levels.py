"""
Severity levels.

Ordered like RFC 5424 / Monolog, with values spaced so that stdlib levels can be
mapped in and out without loss for the common five.
"""

from __future__ import annotations

import logging
from enum import IntEnum


class Severity(IntEnum):
    DEBUG = 100
    INFO = 200
    NOTICE = 250
    WARNING = 300
    ERROR = 400
    CRITICAL = 500
    ALERT = 550
    EMERGENCY = 600

    @classmethod
    def parse(cls, value: "Severity | int | str") -> "Severity":
        """Resolve a level name, enum value or stdlib level number."""
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise ValueError(f"Invalid severity: {value!r}")
        if isinstance(value, int):
            if value in cls._value2member_map_:
                return cls(value)
            if value in _FROM_STDLIB:
                return _FROM_STDLIB[value]
            raise ValueError(f"Invalid severity: {value!r}")
        if isinstance(value, str):
            name = value.strip().upper()
            name = _ALIASES.get(name, name)
            if name in cls.__members__:
                return cls[name]
            if name.isdigit():
                return cls.parse(int(name))
        raise ValueError(f"Invalid severity: {value!r}")

    def to_stdlib(self) -> int:
        """Map onto the closest stdlib ``logging`` level."""
        return _TO_STDLIB[self]


_ALIASES = {"WARN": "WARNING", "FATAL": "CRITICAL", "ERR": "ERROR", "EMERG": "EMERGENCY", "CRIT": "CRITICAL"}

_TO_STDLIB = {
    Severity.DEBUG: logging.DEBUG,
    Severity.INFO: logging.INFO,
    Severity.NOTICE: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
    Severity.CRITICAL: logging.CRITICAL,
    Severity.ALERT: logging.CRITICAL,
    Severity.EMERGENCY: logging.CRITICAL,
}

_FROM_STDLIB = {
    logging.DEBUG: Severity.DEBUG,
    logging.INFO: Severity.INFO,
    logging.WARNING: Severity.WARNING,
    logging.ERROR: Severity.ERROR,
    logging.CRITICAL: Severity.CRITICAL,
}
