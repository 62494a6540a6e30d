"""Exception hierarchy for gelfwriter."""

from __future__ import annotations

__all__ = [
    "GELFError",
    "ConfigurationError",
    "EncodingError",
    "DecodingError",
    "OversizeError",
    "RandomSourceError",
    "TransmissionError",
]


class GELFError(Exception):
    """Base class for every error raised by gelfwriter."""


class ConfigurationError(GELFError, ValueError):
    """Raised when writer or configuration options are invalid."""


class EncodingError(GELFError, ValueError):
    """Raised when a message cannot be turned into wire bytes."""


class DecodingError(GELFError, ValueError):
    """Raised when wire bytes cannot be turned back into a message."""


class OversizeError(GELFError):
    """Raised when a payload would need more chunks than GELF allows."""


class RandomSourceError(GELFError):
    """Raised when no chunk message id can be drawn from the OS entropy pool."""


class TransmissionError(GELFError):
    """Raised when a datagram or request could not be handed to the network."""
