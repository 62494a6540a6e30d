"""Time utilities for gelfwriter."""

from __future__ import annotations

import time

__all__ = ["unix_timestamp", "to_millis_resolution"]


def to_millis_resolution(seconds: float) -> float:
    """Drop sub-millisecond precision from an epoch timestamp."""

    return int(seconds * 1000) / 1000.0


def unix_timestamp() -> float:
    """Return the current epoch time in seconds with millisecond resolution."""

    return (time.time_ns() // 1_000_000) / 1000.0
