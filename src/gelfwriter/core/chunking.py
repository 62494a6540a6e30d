"""GELF UDP chunking.

Payloads larger than one datagram are cut into chunks, each prefixed with a
12 byte header::

    2-byte magic (0x1e 0x0f), 8-byte message id, 1-byte sequence number,
    1-byte total chunk count, chunk data

A receiver reassembles the payload by concatenating chunk data in sequence
order. GELF receivers reject messages with more than 255 chunks.
"""

from __future__ import annotations

import math
import secrets
import struct
from dataclasses import dataclass
from typing import List

from .compression import CompressionType
from .errors import ConfigurationError, DecodingError, OversizeError, RandomSourceError

__all__ = [
    "CHUNK_SIZE",
    "HEADER_SIZE",
    "MAX_CHUNKS",
    "MESSAGE_ID_SIZE",
    "MAGIC_CHUNKED",
    "MAGIC_GZIP",
    "MAGIC_ZLIB",
    "ChunkHeader",
    "chunk_count",
    "detect_compression",
    "split",
]

# Should stay below the path MTU minus the IP and UDP headers.
CHUNK_SIZE = 1420
HEADER_SIZE = 12
MAX_CHUNKS = 255
MESSAGE_ID_SIZE = 8

MAGIC_CHUNKED = b"\x1e\x0f"
MAGIC_GZIP = b"\x1f\x8b"
MAGIC_ZLIB = b"\x78"

_HEADER = struct.Struct("!2s8sBB")


@dataclass(frozen=True, slots=True)
class ChunkHeader:
    message_id: bytes
    sequence: int
    total: int

    def pack(self) -> bytes:
        return _HEADER.pack(MAGIC_CHUNKED, self.message_id, self.sequence, self.total)

    @classmethod
    def unpack(cls, datagram: bytes) -> "ChunkHeader":
        if len(datagram) < HEADER_SIZE:
            raise DecodingError(f"Datagram of {len(datagram)} bytes is too short for a chunk header")
        magic, message_id, sequence, total = _HEADER.unpack_from(datagram)
        if magic != MAGIC_CHUNKED:
            raise DecodingError(f"Bad chunk magic {magic.hex()}")
        return cls(message_id=message_id, sequence=sequence, total=total)


def _check_chunk_size(chunk_size: int) -> None:
    if chunk_size <= HEADER_SIZE:
        raise ConfigurationError(
            f"Chunk size must be larger than the {HEADER_SIZE} byte chunk header, got {chunk_size}"
        )


def chunk_count(length: int, chunk_size: int = CHUNK_SIZE) -> int:
    """Number of datagrams needed to carry ``length`` payload bytes."""

    _check_chunk_size(chunk_size)
    if length <= chunk_size:
        return 1
    return math.ceil(length / (chunk_size - HEADER_SIZE))


def _new_message_id() -> bytes:
    try:
        message_id = secrets.token_bytes(MESSAGE_ID_SIZE)
    except (OSError, NotImplementedError) as exc:
        raise RandomSourceError(f"Unable to read a chunk message id: {exc}") from exc
    if len(message_id) != MESSAGE_ID_SIZE:
        raise RandomSourceError(f"Short read from entropy source ({len(message_id)}/{MESSAGE_ID_SIZE})")
    return message_id


def split(payload: bytes, chunk_size: int = CHUNK_SIZE) -> List[bytes]:
    """Frame ``payload`` into datagrams of at most ``chunk_size`` bytes.

    A payload that already fits is returned as the only element, without a
    chunk header.
    """

    total = chunk_count(len(payload), chunk_size)
    if total == 1:
        return [payload]
    if total > MAX_CHUNKS:
        raise OversizeError(f"Message too large, would need {total} chunks (limit {MAX_CHUNKS})")

    message_id = _new_message_id()
    data_size = chunk_size - HEADER_SIZE
    view = memoryview(payload)
    chunks: List[bytes] = []
    for sequence in range(total):
        start = sequence * data_size
        header = ChunkHeader(message_id=message_id, sequence=sequence, total=total)
        chunks.append(header.pack() + view[start : start + data_size].tobytes())
    return chunks


def detect_compression(datagram: bytes) -> CompressionType | None:
    """Guess how a single (unchunked) datagram was compressed.

    Returns ``None`` for chunked datagrams, whose compression can only be
    told after reassembly.
    """

    if datagram.startswith(MAGIC_CHUNKED):
        return None
    if datagram.startswith(MAGIC_GZIP):
        return CompressionType.GZIP
    if datagram.startswith(MAGIC_ZLIB):
        return CompressionType.ZLIB
    return CompressionType.NONE
