"""Transport contract shared by the UDP and HTTP senders."""

from __future__ import annotations

from ..core.compression import CompressionSettings
from ..core.message import Message

__all__ = ["Transport"]


class Transport:
    """Send :class:`Message` objects to a GELF endpoint."""

    def write_message(self, message: Message) -> None:
        raise NotImplementedError

    def update_compression(self, settings: CompressionSettings) -> None:
        """Apply new compression settings; transports without compression ignore them."""

    def close(self) -> None:
        pass
