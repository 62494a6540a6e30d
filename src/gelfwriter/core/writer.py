"""The GELF writer: transport selection, options and the stream adapter."""

from __future__ import annotations

import os
import socket
import sys
from typing import Any, Mapping

import httpx

from ..transports.base import Transport
from ..transports.http import DEFAULT_HTTP_TIMEOUT
from ..utils.time import unix_timestamp
from .chunking import CHUNK_SIZE
from .compression import DEFAULT_COMPRESSION_LEVEL, CompressionSettings, CompressionType, select
from .levels import Severity
from .message import GELF_VERSION, Message, check_level
from .registry import TransportOptions, build_transport

__all__ = ["Writer", "default_facility"]


def default_facility() -> str:
    """Base name of the running executable."""

    return os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "python"


class Writer:
    """Send GELF messages to a Graylog input.

    ``address`` may carry a scheme: ``http://`` and ``https://`` post JSON
    documents over HTTP, anything else (``udp://host:port`` or a bare
    ``host:port``) sends compressed datagrams over UDP.

    The writer is also a minimal text stream, so it can back a
    :class:`logging.StreamHandler`; every :meth:`write` call becomes one
    message.
    """

    def __init__(
        self,
        address: str,
        *,
        facility: str | None = None,
        hostname: str | None = None,
        compression_type: CompressionType | str | int = CompressionType.GZIP,
        compression_level: int = DEFAULT_COMPRESSION_LEVEL,
        chunk_size: int = CHUNK_SIZE,
        http_timeout: float = DEFAULT_HTTP_TIMEOUT,
        check_status: bool = False,
        http_client: httpx.Client | None = None,
        transport: Transport | None = None,
    ) -> None:
        self.address = address
        self.facility = facility or default_facility()
        self.hostname = hostname or socket.gethostname()
        self._settings = self._check_settings(CompressionSettings(CompressionType.parse(compression_type), compression_level))
        if transport is None:
            options = TransportOptions(
                settings=self._settings,
                chunk_size=chunk_size,
                http_timeout=http_timeout,
                check_status=check_status,
                http_client=http_client,
            )
            transport = build_transport(address, options)
        else:
            transport.update_compression(self._settings)
        self.transport = transport

    # -- Options ------------------------------------------------------------
    @staticmethod
    def _check_settings(settings: CompressionSettings) -> CompressionSettings:
        select(settings.type, settings.level)
        return settings

    @property
    def compression_type(self) -> CompressionType:
        return self._settings.type

    @compression_type.setter
    def compression_type(self, value: CompressionType | str | int) -> None:
        self._apply(CompressionSettings(CompressionType.parse(value), self._settings.level))

    @property
    def compression_level(self) -> int:
        return self._settings.level

    @compression_level.setter
    def compression_level(self, value: int) -> None:
        self._apply(CompressionSettings(self._settings.type, value))

    def _apply(self, settings: CompressionSettings) -> None:
        settings = self._check_settings(settings)
        self.transport.update_compression(settings)
        self._settings = settings

    # -- Sending ------------------------------------------------------------
    def write_message(self, message: Message) -> None:
        """Send a fully populated message."""

        self.transport.write_message(message)

    def new_message(
        self,
        short: str,
        *,
        full: str = "",
        level: int = Severity.INFO,
        file: str = "",
        line: int = 0,
        extra: Mapping[str, Any] | None = None,
    ) -> Message:
        return Message(
            version=GELF_VERSION,
            host=self.hostname,
            short_message=short,
            full_message=full,
            timestamp=unix_timestamp(),
            level=check_level(level),
            facility=self.facility,
            file=file,
            line=line,
            extra=dict(extra or {}),
        )

    def write(self, data: str | bytes, *, file: str = "", line: int = 0) -> int:
        """Send ``data`` as one INFO message.

        Surrounding whitespace is stripped. When the text spans several lines
        the first becomes the short message and the whole text the full
        message; otherwise the full message stays empty.
        """

        text = data.decode("utf-8", errors="replace") if isinstance(data, (bytes, bytearray)) else data
        stripped = text.strip()
        short, full = stripped, ""
        newline = stripped.find("\n")
        if newline > 0:
            short, full = stripped[:newline], stripped
        self.write_message(self.new_message(short, full=full, file=file, line=line))
        return len(data)

    def log(
        self,
        level: int,
        short: str,
        *,
        full: str = "",
        file: str = "",
        line: int = 0,
        extra: Mapping[str, Any] | None = None,
    ) -> None:
        self.write_message(self.new_message(short, full=full, level=level, file=file, line=line, extra=extra))

    def emergency(self, short: str, **kwargs: Any) -> None:
        self.log(Severity.EMERGENCY, short, **kwargs)

    def alert(self, short: str, **kwargs: Any) -> None:
        self.log(Severity.ALERT, short, **kwargs)

    def critical(self, short: str, **kwargs: Any) -> None:
        self.log(Severity.CRITICAL, short, **kwargs)

    def error(self, short: str, **kwargs: Any) -> None:
        self.log(Severity.ERROR, short, **kwargs)

    def warning(self, short: str, **kwargs: Any) -> None:
        self.log(Severity.WARNING, short, **kwargs)

    def notice(self, short: str, **kwargs: Any) -> None:
        self.log(Severity.NOTICE, short, **kwargs)

    def info(self, short: str, **kwargs: Any) -> None:
        self.log(Severity.INFO, short, **kwargs)

    def debug(self, short: str, **kwargs: Any) -> None:
        self.log(Severity.DEBUG, short, **kwargs)

    # -- Lifecycle ----------------------------------------------------------
    def flush(self) -> None:
        """Nothing is buffered; present for stream compatibility."""

    def close(self) -> None:
        self.transport.close()

    def __enter__(self) -> "Writer":
        return self

    def __exit__(self, exc_type, exc: BaseException | None, tb) -> None:  # type: ignore[override]
        self.close()

    def __repr__(self) -> str:
        return f"<Writer(address={self.address!r}, facility={self.facility!r})>"
