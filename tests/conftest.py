from __future__ import annotations

import logging
import socket
from typing import Iterator, List

import pytest

import gelfwriter.api as gelf_api
from gelfwriter.core.manager import GLOBAL_MANAGER


@pytest.fixture(autouse=True)
def reset_gelfwriter() -> Iterator[None]:
    yield
    GLOBAL_MANAGER.shutdown()
    gelf_api._CONFIGURED = False
    root = logging.getLogger()
    root.handlers = []
    root.setLevel(logging.WARNING)


class UDPReceiver:
    def __init__(self) -> None:
        self.sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self.sock.bind(("127.0.0.1", 0))
        self.sock.settimeout(2.0)

    @property
    def address(self) -> str:
        host, port = self.sock.getsockname()
        return f"{host}:{port}"

    def recv(self) -> bytes:
        return self.sock.recv(65535)

    def recv_many(self, count: int) -> List[bytes]:
        return [self.recv() for _ in range(count)]

    def close(self) -> None:
        self.sock.close()


@pytest.fixture
def udp_receiver() -> Iterator[UDPReceiver]:
    receiver = UDPReceiver()
    yield receiver
    receiver.close()


class RecordingSocket:
    """Stand-in for a connected datagram socket that keeps what was sent."""

    def __init__(self, short_by: int = 0) -> None:
        self.sent: List[bytes] = []
        self.short_by = short_by
        self.closed = False

    def send(self, data: bytes) -> int:
        self.sent.append(bytes(data))
        return len(data) - self.short_by

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def recording_socket() -> RecordingSocket:
    return RecordingSocket()
