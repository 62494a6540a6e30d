"""Syslog severity helpers."""

from __future__ import annotations

import logging
from enum import IntEnum

__all__ = ["Severity", "DEFAULT_SEVERITY", "ensure_level", "from_logging_level"]


class Severity(IntEnum):
    """Syslog severities used by the GELF ``level`` field."""

    EMERGENCY = 0
    ALERT = 1
    CRITICAL = 2
    ERROR = 3
    WARNING = 4
    NOTICE = 5
    INFO = 6
    DEBUG = 7


DEFAULT_SEVERITY = Severity.INFO


def from_logging_level(levelno: int) -> Severity:
    """Map a stdlib ``logging`` level number onto the syslog scale.

    Custom levels fall into the nearest bucket below them, so a TRACE level
    (5) becomes DEBUG and anything above CRITICAL becomes ALERT.
    """

    if levelno > logging.CRITICAL:
        return Severity.ALERT
    if levelno >= logging.CRITICAL:
        return Severity.CRITICAL
    if levelno >= logging.ERROR:
        return Severity.ERROR
    if levelno >= logging.WARNING:
        return Severity.WARNING
    if levelno >= logging.INFO:
        return Severity.INFO
    return Severity.DEBUG


def get_level_by_name(name: str) -> int:
    """Resolve a stdlib logging level from a friendly name."""

    stripped = name.strip()
    if stripped.isdigit():
        return int(stripped)
    resolved = logging.getLevelName(stripped.upper())
    if isinstance(resolved, int):
        return resolved
    raise ValueError(f"Unknown logging level: {name!r}")


def ensure_level(value: int | str) -> int:
    """Normalize user supplied level values."""

    if isinstance(value, int):
        return value
    return get_level_by_name(value)
