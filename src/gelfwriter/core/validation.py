"""Configuration validation helpers."""

from __future__ import annotations

from ..config.schema import GELFWriterConfig
from .chunking import HEADER_SIZE
from .compression import select
from .errors import ConfigurationError
from .levels import ensure_level

__all__ = ["ConfigurationError", "validate_configuration"]


def validate_configuration(config: GELFWriterConfig) -> None:
    """Reject settings that would only fail later, at send time."""

    writer = config.writer
    if not writer.address:
        raise ConfigurationError("writer.address must not be empty")

    # Raises ConfigurationError for unknown types and out of range levels.
    select(writer.compression_type, writer.compression_level)

    if writer.chunk_size <= HEADER_SIZE:
        raise ConfigurationError(
            f"writer.chunk_size must be larger than {HEADER_SIZE}, got {writer.chunk_size}"
        )

    if writer.http.timeout <= 0:
        raise ConfigurationError(f"writer.http.timeout must be positive, got {writer.http.timeout}")

    try:
        ensure_level(config.handler.level)
    except ValueError as exc:
        raise ConfigurationError(f"handler.level is invalid: {exc}") from exc
