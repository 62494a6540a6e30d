"""Payload compression used on the UDP path."""

from __future__ import annotations

import zlib
from dataclasses import dataclass
from enum import Enum
from typing import List

from .errors import ConfigurationError, EncodingError

__all__ = [
    "CompressionType",
    "CompressionSettings",
    "Compressor",
    "GzipCompressor",
    "ZlibCompressor",
    "PassthroughCompressor",
    "DEFAULT_COMPRESSION_LEVEL",
    "select",
    "compress",
]

DEFAULT_COMPRESSION_LEVEL = 1

_MIN_LEVEL = -1
_MAX_LEVEL = 9


class CompressionType(Enum):
    GZIP = 0
    ZLIB = 1
    NONE = 2

    @classmethod
    def parse(cls, value: "CompressionType | str | int") -> "CompressionType":
        """Resolve an enum member from a member, a name or its integer value."""

        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                pass
        elif isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                pass
        raise ConfigurationError(f"Unknown compression type: {value!r}")


@dataclass(frozen=True, slots=True)
class CompressionSettings:
    """Snapshot of the compression options used for one send."""

    type: CompressionType = CompressionType.GZIP
    level: int = DEFAULT_COMPRESSION_LEVEL


class Compressor:
    """Accumulates compressed output until :meth:`close` finalizes it."""

    def __init__(self) -> None:
        self._parts: List[bytes] = []
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def write(self, data: bytes) -> int:
        if self._closed:
            raise EncodingError("Cannot write to a finalized compressor")
        self._parts.append(self._feed(data))
        return len(data)

    def close(self) -> None:
        if self._closed:
            return
        self._parts.append(self._finish())
        self._closed = True

    def getvalue(self) -> bytes:
        if not self._closed:
            raise EncodingError("Compressor output read before it was finalized")
        return b"".join(self._parts)

    def _feed(self, data: bytes) -> bytes:
        raise NotImplementedError

    def _finish(self) -> bytes:
        raise NotImplementedError


class _DeflateCompressor(Compressor):
    _wbits = zlib.MAX_WBITS

    def __init__(self, level: int = DEFAULT_COMPRESSION_LEVEL) -> None:
        super().__init__()
        self._compressobj = zlib.compressobj(_check_level(level), zlib.DEFLATED, self._wbits)

    def _feed(self, data: bytes) -> bytes:
        return self._compressobj.compress(data)

    def _finish(self) -> bytes:
        return self._compressobj.flush(zlib.Z_FINISH)


class GzipCompressor(_DeflateCompressor):
    """Deflate with a gzip header and trailer (magic ``1f 8b``)."""

    _wbits = 16 + zlib.MAX_WBITS


class ZlibCompressor(_DeflateCompressor):
    """Deflate with a zlib header (first byte ``78``)."""


class PassthroughCompressor(Compressor):
    """Leaves bytes untouched."""

    def _feed(self, data: bytes) -> bytes:
        return bytes(data)

    def _finish(self) -> bytes:
        return b""


def _check_level(level: int) -> int:
    if isinstance(level, bool) or not isinstance(level, int) or not _MIN_LEVEL <= level <= _MAX_LEVEL:
        raise ConfigurationError(
            f"Compression level must be an integer between {_MIN_LEVEL} and {_MAX_LEVEL}, got {level!r}"
        )
    return level


def select(kind: CompressionType | str | int, level: int = DEFAULT_COMPRESSION_LEVEL) -> Compressor:
    """Return a fresh compressor for ``kind``; ``level`` is ignored for NONE."""

    resolved = CompressionType.parse(kind)
    if resolved is CompressionType.GZIP:
        return GzipCompressor(level)
    if resolved is CompressionType.ZLIB:
        return ZlibCompressor(level)
    return PassthroughCompressor()


def compress(data: bytes, settings: CompressionSettings) -> bytes:
    """Compress ``data`` in one go according to ``settings``."""

    compressor = select(settings.type, settings.level)
    compressor.write(data)
    compressor.close()
    return compressor.getvalue()
