from __future__ import annotations

import os

import pytest

from gelfwriter.core import chunking
from gelfwriter.core.chunking import (
    CHUNK_SIZE,
    HEADER_SIZE,
    ChunkHeader,
    chunk_count,
    detect_compression,
    split,
)
from gelfwriter.core.compression import CompressionType
from gelfwriter.core.errors import ConfigurationError, DecodingError, OversizeError, RandomSourceError


def _reassemble(chunks: list[bytes]) -> bytes:
    ordered = sorted(chunks, key=lambda chunk: ChunkHeader.unpack(chunk).sequence)
    return b"".join(chunk[HEADER_SIZE:] for chunk in ordered)


def test_payload_that_fits_is_returned_unchanged() -> None:
    payload = os.urandom(CHUNK_SIZE)
    assert split(payload) == [payload]


def test_three_thousand_bytes_make_three_chunks() -> None:
    payload = os.urandom(3000)
    chunks = split(payload, 1420)

    assert len(chunks) == 3
    assert [len(chunk) - HEADER_SIZE for chunk in chunks] == [1408, 1408, 184]
    for index, chunk in enumerate(chunks):
        assert chunk[:2] == b"\x1e\x0f"
        assert chunk[10] == index
        assert chunk[11] == 3
    assert b"".join(chunk[HEADER_SIZE:] for chunk in chunks) == payload


@pytest.mark.parametrize(
    ("length", "chunk_size"),
    [(101, 100), (176, 100), (177, 100), (5000, 512), (1421, 1420), (255 * 88, 100)],
)
def test_split_invariants(length: int, chunk_size: int) -> None:
    payload = os.urandom(length)
    chunks = split(payload, chunk_size)
    headers = [ChunkHeader.unpack(chunk) for chunk in chunks]

    expected = -(-length // (chunk_size - HEADER_SIZE))
    assert len(chunks) == expected == chunk_count(length, chunk_size)
    assert sorted(header.sequence for header in headers) == list(range(expected))
    assert {header.message_id for header in headers} == {headers[0].message_id}
    assert {header.total for header in headers} == {expected}
    assert all(len(chunk) <= chunk_size for chunk in chunks)
    assert _reassemble(list(reversed(chunks))) == payload


def test_oversize_boundary() -> None:
    chunk_size = 100
    limit = 255 * (chunk_size - HEADER_SIZE)

    assert len(split(bytes(limit), chunk_size)) == 255
    with pytest.raises(OversizeError):
        split(bytes(limit + 1), chunk_size)


def test_each_call_draws_a_fresh_message_id() -> None:
    payload = bytes(3000)
    first = ChunkHeader.unpack(split(payload)[0]).message_id
    second = ChunkHeader.unpack(split(payload)[0]).message_id
    assert len(first) == 8
    assert first != second


def test_entropy_failure_aborts_chunking(monkeypatch: pytest.MonkeyPatch) -> None:
    def broken(size: int) -> bytes:
        raise OSError("no entropy")

    monkeypatch.setattr(chunking.secrets, "token_bytes", broken)
    with pytest.raises(RandomSourceError):
        split(bytes(3000))
    # Payloads that fit in one datagram never need an id.
    assert split(b"small") == [b"small"]


def test_chunk_size_must_exceed_header() -> None:
    with pytest.raises(ConfigurationError):
        split(b"x" * 100, HEADER_SIZE)


def test_header_pack_and_unpack() -> None:
    header = ChunkHeader(message_id=b"\x01" * 8, sequence=2, total=5)
    packed = header.pack()
    assert packed == b"\x1e\x0f" + b"\x01" * 8 + b"\x02\x05"
    assert ChunkHeader.unpack(packed + b"data") == header


@pytest.mark.parametrize("datagram", [b"\x1e\x0f\x00", b"\x00" * 12])
def test_unpack_rejects_bad_datagrams(datagram: bytes) -> None:
    with pytest.raises(DecodingError):
        ChunkHeader.unpack(datagram)


@pytest.mark.parametrize(
    ("datagram", "expected"),
    [
        (b"\x1f\x8b\x08\x00", CompressionType.GZIP),
        (b"\x78\x01abc", CompressionType.ZLIB),
        (b'{"version":"1.0"}', CompressionType.NONE),
        (b"\x1e\x0f" + bytes(10), None),
    ],
)
def test_detect_compression(datagram: bytes, expected: CompressionType | None) -> None:
    assert detect_compression(datagram) == expected
