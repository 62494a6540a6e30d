"""Configuration schema definition for gelfwriter."""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping

from ..core.chunking import CHUNK_SIZE
from ..core.compression import DEFAULT_COMPRESSION_LEVEL
from ..transports.http import DEFAULT_HTTP_TIMEOUT

DEFAULT_CONFIG: Dict[str, Any] = {
    "writer": {
        "address": "localhost:12201",
        "facility": "",
        "hostname": "",
        "compression_type": "gzip",
        "compression_level": DEFAULT_COMPRESSION_LEVEL,
        "chunk_size": CHUNK_SIZE,
        "http": {
            "timeout": DEFAULT_HTTP_TIMEOUT,
            "check_status": False,
        },
    },
    "handler": {
        "level": "INFO",
        "attach_root": True,
        "include_extra": True,
    },
}


def default_config() -> Dict[str, Any]:
    """Return a deep copy of the default configuration mapping."""

    return deepcopy(DEFAULT_CONFIG)


@dataclass(slots=True)
class HTTPConfig:
    timeout: float = DEFAULT_HTTP_TIMEOUT
    check_status: bool = False


@dataclass(slots=True)
class WriterConfig:
    address: str
    facility: str | None
    hostname: str | None
    compression_type: str | int
    compression_level: int
    chunk_size: int
    http: HTTPConfig = field(default_factory=HTTPConfig)


@dataclass(slots=True)
class HandlerConfig:
    level: str | int = "INFO"
    attach_root: bool = True
    include_extra: bool = True


@dataclass(slots=True)
class GELFWriterConfig:
    writer: WriterConfig
    handler: HandlerConfig
    raw: Dict[str, Any] = field(repr=False)


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _to_http(data: Mapping[str, Any]) -> HTTPConfig:
    return HTTPConfig(
        timeout=float(data.get("timeout", DEFAULT_HTTP_TIMEOUT)),
        check_status=bool(data.get("check_status", False)),
    )


def _to_writer(data: Mapping[str, Any]) -> WriterConfig:
    http_raw = data.get("http", {})
    compression_type = data.get("compression_type", "gzip")
    return WriterConfig(
        address=str(data.get("address", "")).strip(),
        facility=_optional_str(data.get("facility")),
        hostname=_optional_str(data.get("hostname")),
        compression_type=compression_type if isinstance(compression_type, int) else str(compression_type),
        compression_level=int(data.get("compression_level", DEFAULT_COMPRESSION_LEVEL)),
        chunk_size=int(data.get("chunk_size", CHUNK_SIZE)),
        http=_to_http(http_raw if isinstance(http_raw, Mapping) else {}),
    )


def _to_handler(data: Mapping[str, Any]) -> HandlerConfig:
    return HandlerConfig(
        level=data.get("level", "INFO"),
        attach_root=bool(data.get("attach_root", True)),
        include_extra=bool(data.get("include_extra", True)),
    )


def build_config(data: Mapping[str, Any]) -> GELFWriterConfig:
    writer_raw = data.get("writer", {})
    handler_raw = data.get("handler", {})
    writer = _to_writer(writer_raw if isinstance(writer_raw, Mapping) else {})
    handler = _to_handler(handler_raw if isinstance(handler_raw, Mapping) else {})
    raw_copy: Dict[str, Any] = deepcopy({k: v for k, v in data.items()})
    return GELFWriterConfig(writer=writer, handler=handler, raw=raw_copy)
