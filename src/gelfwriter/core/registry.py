"""Registry of transport builders keyed by address scheme."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict

import httpx

from ..transports.base import Transport
from ..transports.http import DEFAULT_HTTP_TIMEOUT, HTTPTransport
from ..transports.udp import UDPTransport
from .chunking import CHUNK_SIZE
from .compression import CompressionSettings

__all__ = ["TransportOptions", "TRANSPORT_BUILDERS", "build_transport", "split_scheme"]


@dataclass(slots=True)
class TransportOptions:
    settings: CompressionSettings
    chunk_size: int = CHUNK_SIZE
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    check_status: bool = False
    http_client: httpx.Client | None = None


TransportBuilder = Callable[[str, TransportOptions], Transport]


def split_scheme(address: str) -> tuple[str, str]:
    """Return ``(scheme, remainder)``; the scheme is empty when absent."""

    segments = address.split("://")
    if len(segments) == 1:
        return "", address
    return segments[0].lower(), segments[-1]


def _build_http(address: str, options: TransportOptions) -> Transport:
    return HTTPTransport(
        address,
        timeout=options.http_timeout,
        check_status=options.check_status,
        client=options.http_client,
    )


def _build_udp(address: str, options: TransportOptions) -> Transport:
    _, host_port = split_scheme(address)
    return UDPTransport(host_port, settings=options.settings, chunk_size=options.chunk_size)


TRANSPORT_BUILDERS: Dict[str, TransportBuilder] = {
    "http": _build_http,
    "https": _build_http,
    "udp": _build_udp,
}


def build_transport(address: str, options: TransportOptions) -> Transport:
    """Pick a transport from the scheme of ``address``.

    ``http://`` and ``https://`` addresses are posted to as-is; anything else,
    including a bare ``host:port``, is sent over UDP.
    """

    scheme, _ = split_scheme(address)
    builder = TRANSPORT_BUILDERS.get(scheme, _build_udp)
    return builder(address, options)
