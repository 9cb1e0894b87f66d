"""Tests for the newline-delimited JSON-RPC connection."""

from __future__ import annotations

import asyncio
import json
from typing import Any

import anyio
import pytest

from acp_connect.connection import Connection
from acp_connect.exceptions import ConnectionClosedError, RequestError

from conftest import wait_until


class FeedStream:
    """Receive side fed by the test."""

    def __init__(self) -> None:
        self._send, self._receive = anyio.create_memory_object_stream[bytes](100)

    async def receive(self, max_bytes: int = 65536) -> bytes:
        return await self._receive.receive()

    async def aclose(self) -> None:
        await self._receive.aclose()

    async def feed(self, message: dict[str, Any] | str) -> None:
        line = message if isinstance(message, str) else json.dumps(message)
        await self._send.send((line + "\n").encode())

    async def feed_raw(self, data: bytes) -> None:
        await self._send.send(data)

    def end(self) -> None:
        self._send.close()


class RecordingStream:
    """Send side that keeps every written message."""

    def __init__(self) -> None:
        self.messages: list[dict[str, Any]] = []
        self.closed = False

    async def send(self, data: bytes) -> None:
        if self.closed:
            raise anyio.ClosedResourceError
        for line in data.decode().splitlines():
            self.messages.append(json.loads(line))

    async def aclose(self) -> None:
        self.closed = True


class Handler:
    def __init__(self) -> None:
        self.calls: list[tuple[str, Any, bool]] = []
        self.result: Any = None
        self.error: Exception | None = None

    async def __call__(self, method: str, params: Any, is_notification: bool) -> Any:
        self.calls.append((method, params, is_notification))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
async def peer():
    handler = Handler()
    writer = RecordingStream()
    reader = FeedStream()
    connection = Connection(handler, writer, reader)  # type: ignore[arg-type]
    yield connection, handler, writer, reader
    await connection.close()


async def test_request_response_correlation(peer):
    connection, _, writer, reader = peer
    first = asyncio.create_task(connection.send_request("session/new", {"cwd": "/tmp"}))
    second = asyncio.create_task(connection.send_request("session/prompt", {"text": "hi"}))
    await wait_until(lambda: len(writer.messages) == 2)  # noqa: PLR2004

    ids = [m["id"] for m in writer.messages]
    assert ids == [0, 1]
    assert writer.messages[0] == {
        "jsonrpc": "2.0",
        "id": 0,
        "method": "session/new",
        "params": {"cwd": "/tmp"},
    }
    # Answer out of order
    await reader.feed({"jsonrpc": "2.0", "id": 1, "result": {"stopReason": "end_turn"}})
    await reader.feed({"jsonrpc": "2.0", "id": 0, "result": {"sessionId": "s1"}})

    assert await first == {"sessionId": "s1"}
    assert await second == {"stopReason": "end_turn"}


async def test_error_response_raises_request_error(peer):
    connection, _, writer, reader = peer
    task = asyncio.create_task(connection.send_request("session/set_mode", {}))
    await wait_until(lambda: len(writer.messages) == 1)
    error = {"code": -32602, "message": "Invalid params", "data": {"field": "modeId"}}
    await reader.feed({"jsonrpc": "2.0", "id": 0, "error": error})

    with pytest.raises(RequestError) as exc_info:
        await task
    assert exc_info.value.code == -32602  # noqa: PLR2004
    assert exc_info.value.data == {"field": "modeId"}


async def test_notifications_in_order_and_garbage_skipped(peer):
    _, handler, _, reader = peer
    await reader.feed({"jsonrpc": "2.0", "method": "session/update", "params": {"n": 1}})
    await reader.feed("{not json")
    await reader.feed("[1, 2, 3]")
    await reader.feed("")
    # One message split across two reads
    await reader.feed_raw(b'{"jsonrpc": "2.0", "method": "session/up')
    await reader.feed_raw(b'date", "params": {"n": 2}}\n')
    await wait_until(lambda: len(handler.calls) == 2)  # noqa: PLR2004

    assert handler.calls == [
        ("session/update", {"n": 1}, True),
        ("session/update", {"n": 2}, True),
    ]


async def test_notification_handler_failure_keeps_reading(peer):
    _, handler, _, reader = peer
    handler.error = RuntimeError("handler bug")
    await reader.feed({"jsonrpc": "2.0", "method": "session/update", "params": {}})
    await wait_until(lambda: len(handler.calls) == 1)
    handler.error = None
    await reader.feed({"jsonrpc": "2.0", "method": "session/update", "params": {"ok": True}})
    await wait_until(lambda: len(handler.calls) == 2)  # noqa: PLR2004


async def test_incoming_request_is_answered(peer):
    _, handler, writer, reader = peer
    handler.result = {"outcome": {"outcome": "cancelled"}}
    await reader.feed({"jsonrpc": "2.0", "id": "perm-1", "method": "session/request_permission"})
    await wait_until(lambda: len(writer.messages) == 1)

    assert handler.calls == [("session/request_permission", None, False)]
    assert writer.messages[0] == {
        "jsonrpc": "2.0",
        "id": "perm-1",
        "result": {"outcome": {"outcome": "cancelled"}},
    }


async def test_incoming_request_errors(peer):
    _, handler, writer, reader = peer
    handler.error = RequestError.method_not_found("fs/read_text_file")
    await reader.feed({"jsonrpc": "2.0", "id": 7, "method": "fs/read_text_file", "params": {}})
    await wait_until(lambda: len(writer.messages) == 1)
    handler.error = ValueError("unexpected")
    await reader.feed({"jsonrpc": "2.0", "id": 8, "method": "session/request_permission"})
    await wait_until(lambda: len(writer.messages) == 2)  # noqa: PLR2004

    not_found, internal = writer.messages
    assert not_found["id"] == 7  # noqa: PLR2004
    assert not_found["error"] == {
        "code": -32601,
        "message": "Method not found",
        "data": {"method": "fs/read_text_file"},
    }
    assert internal["id"] == 8  # noqa: PLR2004
    assert internal["error"]["code"] == -32603  # noqa: PLR2004


async def test_end_of_stream_fails_pending_requests(peer):
    connection, _, writer, reader = peer
    task = asyncio.create_task(connection.send_request("initialize", {}))
    await wait_until(lambda: len(writer.messages) == 1)
    reader.end()

    with pytest.raises(ConnectionClosedError):
        await task
    await wait_until(lambda: connection.closed)
    with pytest.raises(ConnectionClosedError):
        await connection.send_request("initialize", {})
    with pytest.raises(ConnectionClosedError):
        await connection.send_notification("session/cancel", {})


async def test_abort_fails_pending_requests(peer):
    connection, _, writer, _ = peer
    task = asyncio.create_task(connection.send_request("session/prompt", {}))
    await wait_until(lambda: len(writer.messages) == 1)
    connection.abort()
    connection.abort()

    with pytest.raises(ConnectionClosedError):
        await task
    assert connection.closed


async def test_notification_has_no_id(peer):
    connection, _, writer, _ = peer
    await connection.send_notification("session/cancel", {"sessionId": "s1"})
    assert writer.messages == [
        {"jsonrpc": "2.0", "method": "session/cancel", "params": {"sessionId": "s1"}}
    ]


async def test_oversized_line_reports_error():
    errors: list[BaseException] = []
    reader = FeedStream()
    connection = Connection(
        Handler(),
        RecordingStream(),  # type: ignore[arg-type]
        reader,  # type: ignore[arg-type]
        on_error=errors.append,
        max_line_bytes=64,
    )
    await reader.feed_raw(b"x" * 200)
    await wait_until(lambda: connection.closed)
    assert len(errors) == 1
    await connection.close()
