"""GELF logging handler implementation."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict

from ..core.chunking import CHUNK_SIZE
from ..core.compression import DEFAULT_COMPRESSION_LEVEL
from ..core.levels import from_logging_level
from ..core.message import Message
from ..core.writer import Writer
from ..transports.http import DEFAULT_HTTP_TIMEOUT
from ..utils.time import to_millis_resolution

__all__ = ["GELFHandlerConfig", "GELFHandler", "build_gelf_handler"]

_STANDARD_ATTRS = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
    "asctime",
    "message",
}

# Records emitted by gelfwriter itself would re-enter the transport lock.
_OWN_LOGGER_PREFIX = "gelfwriter"


@dataclass(slots=True)
class GELFHandlerConfig:
    address: str = "localhost:12201"
    facility: str | None = None
    hostname: str | None = None
    compression_type: str | int = "gzip"
    compression_level: int = DEFAULT_COMPRESSION_LEVEL
    chunk_size: int = CHUNK_SIZE
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    check_status: bool = False
    include_extra: bool = True
    level: int = logging.NOTSET


def _json_safe(value: Any) -> Any:
    try:
        json.dumps(value, allow_nan=False)
    except (TypeError, ValueError):
        return repr(value)
    return value


class GELFHandler(logging.Handler):
    """Send log records to Graylog through a :class:`Writer`."""

    def __init__(self, writer: Writer, *, include_extra: bool = True, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.writer = writer
        self.include_extra = include_extra

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        name = record.name
        if name == _OWN_LOGGER_PREFIX or name.startswith(_OWN_LOGGER_PREFIX + "."):
            return False
        return bool(super().filter(record))

    def make_message(self, record: logging.LogRecord) -> Message:
        text = record.getMessage()
        short, _, _ = text.partition("\n")
        full = text if short != text else ""
        if record.exc_info:
            formatter = self.formatter or logging.Formatter()
            full = f"{text}\n{formatter.formatException(record.exc_info)}"
        if record.stack_info:
            full = f"{full or text}\n{record.stack_info}"

        extra: Dict[str, Any] = {"_logger": record.name}
        if self.include_extra:
            for key, value in record.__dict__.items():
                # GELF reserves "_id".
                if key in _STANDARD_ATTRS or key.startswith("_") or key == "id":
                    continue
                extra[f"_{key}"] = _json_safe(value)

        return Message(
            host=self.writer.hostname,
            short_message=short,
            full_message=full,
            timestamp=to_millis_resolution(record.created),
            level=int(from_logging_level(record.levelno)),
            facility=self.writer.facility,
            file=record.pathname,
            line=record.lineno,
            extra=extra,
        )

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.writer.write_message(self.make_message(record))
        except Exception:
            self.handleError(record)

    def close(self) -> None:
        try:
            self.writer.close()
        finally:
            super().close()


def build_gelf_handler(config: GELFHandlerConfig | None = None) -> GELFHandler:
    cfg = config or GELFHandlerConfig()
    writer = Writer(
        cfg.address,
        facility=cfg.facility,
        hostname=cfg.hostname,
        compression_type=cfg.compression_type,
        compression_level=cfg.compression_level,
        chunk_size=cfg.chunk_size,
        http_timeout=cfg.http_timeout,
        check_status=cfg.check_status,
    )
    return GELFHandler(writer, include_extra=cfg.include_extra, level=cfg.level)
