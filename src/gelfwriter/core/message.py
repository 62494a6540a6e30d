"""GELF message entity and its JSON codec."""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping

from .errors import DecodingError, EncodingError
from .levels import DEFAULT_SEVERITY

__all__ = ["GELF_VERSION", "FIXED_FIELDS", "Message", "check_level", "encode", "decode"]

GELF_VERSION = "1.0"

FIXED_FIELDS = (
    "version",
    "host",
    "short_message",
    "full_message",
    "timestamp",
    "level",
    "facility",
    "file",
    "line",
)

_STRING_FIELDS = {"version", "host", "short_message", "full_message", "facility", "file"}
_INTEGER_FIELDS = {"level", "line"}


def check_level(level: Any) -> int:
    """Return ``level`` as a plain int, rejecting values outside the syslog range."""

    if isinstance(level, bool) or not isinstance(level, int) or not 0 <= level <= 7:
        raise EncodingError(f"GELF level must be an integer in 0..7, got {level!r}")
    return int(level)


@dataclass(slots=True)
class Message:
    """A single GELF event.

    ``extra`` holds the additional fields; by convention their keys start with
    an underscore but that is not enforced when encoding.
    """

    host: str = ""
    short_message: str = ""
    full_message: str = ""
    timestamp: float = 0.0
    level: int = int(DEFAULT_SEVERITY)
    facility: str = ""
    file: str = ""
    line: int = 0
    extra: Dict[str, Any] = field(default_factory=dict)
    version: str = GELF_VERSION

    def to_dict(self) -> Dict[str, Any]:
        """Return fixed fields followed by the extension fields in one mapping."""

        payload: Dict[str, Any] = {name: getattr(self, name) for name in FIXED_FIELDS}
        payload["level"] = check_level(self.level)
        for key, value in self.extra.items():
            if not isinstance(key, str):
                raise EncodingError(f"Extra field names must be strings, got {key!r}")
            if key in payload:
                raise EncodingError(f"Extra field {key!r} collides with a fixed GELF field")
            payload[key] = value
        return payload

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Message":
        message = cls()
        for key, value in data.items():
            if key in _STRING_FIELDS:
                if not isinstance(value, str):
                    raise DecodingError(f"Field {key!r} must be a string, got {type(value).__name__}")
                setattr(message, key, value)
            elif key in _INTEGER_FIELDS:
                setattr(message, key, _as_int(key, value))
            elif key == "timestamp":
                if isinstance(value, bool) or not isinstance(value, (int, float)):
                    raise DecodingError(f"Field 'timestamp' must be a number, got {type(value).__name__}")
                message.timestamp = float(value)
            else:
                message.extra[key] = value
        return message


def _as_int(key: str, value: Any) -> int:
    if isinstance(value, bool):
        raise DecodingError(f"Field {key!r} must be an integer, got bool")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return int(value)
    raise DecodingError(f"Field {key!r} must be an integer, got {value!r}")


def encode(message: Message) -> bytes:
    """Serialize ``message`` to one flat UTF-8 JSON object."""

    payload = message.to_dict()
    try:
        text = json.dumps(payload, ensure_ascii=False, allow_nan=False, separators=(",", ":"))
    except (TypeError, ValueError) as exc:
        raise EncodingError(f"Message is not JSON serializable: {exc}") from exc
    return text.encode("utf-8")


def decode(data: bytes | str) -> Message:
    """Parse a GELF JSON object back into a :class:`Message`."""

    try:
        parsed = json.loads(data)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise DecodingError(f"Malformed GELF payload: {exc}") from exc
    if not isinstance(parsed, dict):
        raise DecodingError(f"GELF payload must be a JSON object, got {type(parsed).__name__}")
    return Message.from_dict(parsed)
