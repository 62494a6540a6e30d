"""GELF over UDP: compressed, chunked when larger than one datagram."""

from __future__ import annotations

import logging
import socket
import threading
from typing import Tuple

from ..core.chunking import CHUNK_SIZE, HEADER_SIZE, split
from ..core.compression import CompressionSettings, CompressionType, compress, select
from ..core.errors import ConfigurationError, TransmissionError
from ..core.message import Message, encode
from .base import Transport

__all__ = ["UDPTransport", "parse_address", "open_socket"]

_logger = logging.getLogger(__name__)


def parse_address(address: str | Tuple[str, int]) -> Tuple[str, int]:
    """Split ``host:port`` (``[v6]:port`` for IPv6 literals) into a tuple."""

    if isinstance(address, tuple):
        host, port = address
        return str(host), int(port)
    host, sep, port_str = address.rpartition(":")
    if not sep or not host or not port_str.isdigit():
        raise ConfigurationError(f"UDP address must look like host:port, got {address!r}")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    port = int(port_str)
    if not 0 < port < 65536:
        raise ConfigurationError(f"UDP port out of range in {address!r}")
    return host, port


def open_socket(host: str, port: int) -> socket.socket:
    """Create a datagram socket connected to the first usable address."""

    try:
        infos = socket.getaddrinfo(host, port, type=socket.SOCK_DGRAM)
    except OSError as exc:
        raise TransmissionError(f"Unable to resolve {host}:{port}: {exc}") from exc

    last_error: OSError | None = None
    for family, socktype, proto, _, sockaddr in infos:
        sock = socket.socket(family, socktype, proto)
        try:
            sock.connect(sockaddr)
        except OSError as exc:
            sock.close()
            last_error = exc
            continue
        return sock
    raise TransmissionError(f"Unable to connect to {host}:{port}: {last_error}")


class UDPTransport(Transport):
    """Send messages as datagrams over one pre-connected UDP socket.

    A single lock covers the whole of :meth:`write_message`, so chunks of two
    messages never interleave on the wire and the compression settings cannot
    change halfway through a send. The socket is not reopened after a failure.
    """

    def __init__(
        self,
        address: str | Tuple[str, int],
        *,
        settings: CompressionSettings | None = None,
        chunk_size: int = CHUNK_SIZE,
        sock: socket.socket | None = None,
    ) -> None:
        if chunk_size <= HEADER_SIZE:
            raise ConfigurationError(f"Chunk size must exceed the {HEADER_SIZE} byte chunk header, got {chunk_size}")
        self.address = parse_address(address)
        self.chunk_size = chunk_size
        self._settings = self._validated(settings or CompressionSettings())
        self._lock = threading.Lock()
        self._sock = sock if sock is not None else open_socket(*self.address)

    @staticmethod
    def _validated(settings: CompressionSettings) -> CompressionSettings:
        kind = CompressionType.parse(settings.type)
        # Building a compressor checks the level for the chosen algorithm.
        select(kind, settings.level)
        return CompressionSettings(type=kind, level=settings.level)

    @property
    def settings(self) -> CompressionSettings:
        with self._lock:
            return self._settings

    def update_compression(self, settings: CompressionSettings) -> None:
        validated = self._validated(settings)
        with self._lock:
            self._settings = validated

    def write_message(self, message: Message) -> None:
        with self._lock:
            settings = self._settings
            payload = compress(encode(message), settings)
            if len(payload) <= self.chunk_size:
                self._send(payload)
                return
            chunks = split(payload, self.chunk_size)
            for index, chunk in enumerate(chunks):
                self._send(chunk, index=index, total=len(chunks))
        # Logged outside the lock: a handler writing back through this
        # transport would otherwise deadlock.
        _logger.debug(
            "sent %d byte %s payload as %d chunks",
            len(payload),
            settings.type.name.lower(),
            len(chunks),
        )

    def _send(self, datagram: bytes, *, index: int = 0, total: int = 1) -> None:
        where = f" (chunk {index}/{total})" if total > 1 else ""
        try:
            written = self._sock.send(datagram)
        except OSError as exc:
            raise TransmissionError(f"UDP write failed{where}: {exc}") from exc
        if written != len(datagram):
            raise TransmissionError(f"Short UDP write{where}: {written}/{len(datagram)} bytes")

    def close(self) -> None:
        with self._lock:
            self._sock.close()

    def __repr__(self) -> str:
        host, port = self.address
        return f"<UDPTransport(address={host}:{port}, chunk_size={self.chunk_size})>"
