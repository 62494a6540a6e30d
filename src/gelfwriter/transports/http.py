"""GELF over HTTP: one uncompressed JSON document per POST."""

from __future__ import annotations

import logging

import httpx

from ..core.errors import TransmissionError
from ..core.message import Message, encode
from .base import Transport

__all__ = ["HTTPTransport", "DEFAULT_HTTP_TIMEOUT"]

DEFAULT_HTTP_TIMEOUT = 5.0

_logger = logging.getLogger(__name__)


class HTTPTransport(Transport):
    """POST each message to a GELF HTTP input.

    Response status codes are not treated as failures unless ``check_status``
    is set; a non-2xx answer is logged at WARNING either way. The response
    body is always drained and closed before returning.
    """

    def __init__(
        self,
        url: str,
        *,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        check_status: bool = False,
        client: httpx.Client | None = None,
    ) -> None:
        self.url = url
        self.check_status = check_status
        self._owns_client = client is None
        self._client = client if client is not None else httpx.Client(timeout=timeout)

    def write_message(self, message: Message) -> None:
        body = encode(message)
        try:
            with self._client.stream(
                "POST",
                self.url,
                content=body,
                headers={"Content-Type": "application/json"},
            ) as response:
                response.read()
        except httpx.HTTPError as exc:
            raise TransmissionError(f"HTTP POST to {self.url} failed: {exc}") from exc

        if response.is_success:
            return
        _logger.warning("GELF endpoint %s answered HTTP %s", self.url, response.status_code)
        if self.check_status:
            raise TransmissionError(f"GELF endpoint {self.url} answered HTTP {response.status_code}")

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __repr__(self) -> str:
        return f"<HTTPTransport(url={self.url!r})>"
