from __future__ import annotations

import json
from typing import Callable, Iterator, List

import httpx
import pytest

from gelfwriter.core.errors import EncodingError, TransmissionError
from gelfwriter.core.message import Message
from gelfwriter.transports.http import HTTPTransport

URL = "http://graylog.example.com:12201/gelf"


class CountingStream(httpx.SyncByteStream):
    def __init__(self, body: bytes = b"", fail: bool = False) -> None:
        self.body = body
        self.fail = fail
        self.close_calls = 0

    def __iter__(self) -> Iterator[bytes]:
        if self.fail:
            raise httpx.ReadError("connection reset")
        yield self.body

    def close(self) -> None:
        self.close_calls += 1


def _client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def _message() -> Message:
    return Message(host="web-1", short_message="hello", timestamp=1.5, extra={"_k": "v"})


def test_posts_uncompressed_json() -> None:
    requests: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(202)

    transport = HTTPTransport(URL, client=_client(handler))
    transport.write_message(_message())

    (request,) = requests
    assert request.method == "POST"
    assert str(request.url) == URL
    assert request.headers["content-type"] == "application/json"
    body = json.loads(request.content)
    assert body["short_message"] == "hello"
    assert body["_k"] == "v"


@pytest.mark.parametrize("status", [200, 202, 400, 500])
def test_response_is_closed_once_per_call(status: int) -> None:
    streams: List[CountingStream] = []

    def handler(request: httpx.Request) -> httpx.Response:
        stream = CountingStream(b"ok")
        streams.append(stream)
        return httpx.Response(status, stream=stream)

    transport = HTTPTransport(URL, client=_client(handler))
    for _ in range(10):
        transport.write_message(_message())

    assert len(streams) == 10
    assert [stream.close_calls for stream in streams] == [1] * 10


def test_read_failure_still_closes_response() -> None:
    streams: List[CountingStream] = []

    def handler(request: httpx.Request) -> httpx.Response:
        stream = CountingStream(fail=True)
        streams.append(stream)
        return httpx.Response(200, stream=stream)

    transport = HTTPTransport(URL, client=_client(handler))
    for _ in range(3):
        with pytest.raises(TransmissionError):
            transport.write_message(_message())

    assert [stream.close_calls for stream in streams] == [1, 1, 1]


def test_connection_error_is_a_transmission_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    transport = HTTPTransport(URL, client=_client(handler))
    with pytest.raises(TransmissionError) as excinfo:
        transport.write_message(_message())
    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


def test_error_status_is_only_logged_by_default(caplog: pytest.LogCaptureFixture) -> None:
    transport = HTTPTransport(URL, client=_client(lambda request: httpx.Response(503)))

    with caplog.at_level("WARNING", logger="gelfwriter.transports.http"):
        transport.write_message(_message())

    assert "HTTP 503" in caplog.text


def test_check_status_turns_error_status_into_failure() -> None:
    streams: List[CountingStream] = []

    def handler(request: httpx.Request) -> httpx.Response:
        stream = CountingStream(b"bad request")
        streams.append(stream)
        return httpx.Response(400, stream=stream)

    transport = HTTPTransport(URL, check_status=True, client=_client(handler))
    with pytest.raises(TransmissionError, match="400"):
        transport.write_message(_message())
    assert streams[0].close_calls == 1


def test_encoding_error_sends_nothing() -> None:
    calls: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200)

    transport = HTTPTransport(URL, client=_client(handler))
    message = _message()
    message.extra["_bad"] = {1, 2}
    with pytest.raises(EncodingError):
        transport.write_message(message)
    assert calls == []


def test_injected_client_is_left_open() -> None:
    client = _client(lambda request: httpx.Response(200))
    transport = HTTPTransport(URL, client=client)
    transport.close()
    assert not client.is_closed

    owned = HTTPTransport(URL)
    owned.close()
    assert owned._client.is_closed
