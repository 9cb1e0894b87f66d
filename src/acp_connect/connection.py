"""Newline-delimited JSON-RPC 2.0 connection over a pair of byte streams."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
import contextlib
import json
from typing import TYPE_CHECKING, Any

import anyio
from anyio.streams.buffered import BufferedByteReceiveStream

from acp_connect.exceptions import ConnectionClosedError, RequestError
from acp_connect.log import get_logger


if TYPE_CHECKING:
    from anyio.abc import ByteReceiveStream, ByteSendStream
    import structlog


MessageHandler = Callable[[str, Any, bool], Awaitable[Any]]
"""Called as `handler(method, params, is_notification)` for inbound messages."""

ErrorCallback = Callable[[BaseException], None]

# Agents put whole file contents into single lines, so be generous.
MAX_LINE_BYTES = 50 * 1024 * 1024

_READ_ERRORS = (
    anyio.EndOfStream,
    anyio.IncompleteRead,
    anyio.ClosedResourceError,
    anyio.BrokenResourceError,
)


class Connection:
    """Bidirectional JSON-RPC peer.

    Outgoing requests are correlated with responses by an integer id.
    A single reader task consumes the incoming stream: responses resolve the
    matching pending request, notifications are handed to the handler in
    receive order, and requests from the peer are answered from their own
    task so a slow handler never stalls the stream.
    """

    def __init__(
        self,
        handler: MessageHandler,
        writer: ByteSendStream,
        reader: ByteReceiveStream,
        *,
        on_error: ErrorCallback | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
        max_line_bytes: int = MAX_LINE_BYTES,
    ) -> None:
        self._handler = handler
        self._writer = writer
        self._reader = BufferedByteReceiveStream(reader)
        self._on_error = on_error
        self._logger = logger or get_logger(__name__)
        self._max_line_bytes = max_line_bytes
        self._next_id = 0
        self._pending_requests: dict[int, asyncio.Future[Any]] = {}
        self._writer_lock = asyncio.Lock()
        self._tasks: set[asyncio.Task[Any]] = set()
        self._closed = False
        self._eof = False
        self._reader_task = asyncio.create_task(self._read_loop())

    @property
    def closed(self) -> bool:
        return self._closed or self._eof

    async def send_request(self, method: str, params: Any | None = None) -> Any:
        """Send a request and wait for its result.

        Raises:
            RequestError: If the peer answered with an error object
            ConnectionClosedError: If the stream ends before a response arrives
        """
        if self.closed:
            raise ConnectionClosedError
        request_id = self._next_id
        self._next_id += 1
        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self._pending_requests[request_id] = future
        message = {"jsonrpc": "2.0", "id": request_id, "method": method, "params": params}
        try:
            await self._send(message)
            return await future
        finally:
            self._pending_requests.pop(request_id, None)

    async def send_notification(self, method: str, params: Any | None = None) -> None:
        """Send a notification. Only waits for the write."""
        if self.closed:
            raise ConnectionClosedError
        await self._send({"jsonrpc": "2.0", "method": method, "params": params})

    def abort(self) -> None:
        """Stop reading immediately and fail everything that is still pending.

        Safe to call from synchronous code. Use `close()` to also wait for the
        reader to wind down.
        """
        if self._closed:
            return
        self._closed = True
        self._reader_task.cancel()
        for task in self._tasks:
            task.cancel()
        self._fail_pending(ConnectionClosedError())

    async def close(self) -> None:
        """Abort the connection and wait for its tasks."""
        self.abort()
        tasks = [self._reader_task, *self._tasks]
        await asyncio.gather(*tasks, return_exceptions=True)
        with contextlib.suppress(*_READ_ERRORS, OSError):
            await self._writer.aclose()

    async def _send(self, message: dict[str, Any]) -> None:
        data = (json.dumps(message, ensure_ascii=False) + "\n").encode()
        async with self._writer_lock:
            try:
                await self._writer.send(data)
            except (anyio.BrokenResourceError, anyio.ClosedResourceError, OSError) as exc:
                raise ConnectionClosedError(f"Failed to send message: {exc}") from exc

    async def _read_loop(self) -> None:
        try:
            while True:
                try:
                    line = await self._reader.receive_until(b"\n", self._max_line_bytes)
                except _READ_ERRORS:
                    break
                await self._process_line(line)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            self._logger.exception("Reader loop failed")
            if self._on_error is not None and not self._closed:
                self._on_error(exc)
        finally:
            self._eof = True
            self._fail_pending(ConnectionClosedError())

    async def _process_line(self, line: bytes) -> None:
        text = line.decode("utf-8", errors="replace").strip()
        if not text:
            return
        try:
            message = json.loads(text)
        except json.JSONDecodeError:
            self._logger.warning("Failed to parse JSON", line=text[:500])
            return
        if not isinstance(message, dict):
            self._logger.warning("Ignoring non-object message", line=text[:500])
            return
        await self._process_message(message)

    async def _process_message(self, message: dict[str, Any]) -> None:
        method = message.get("method")
        request_id = message.get("id")
        # Request from the peer
        if method is not None and request_id is not None:
            params = message.get("params")
            task = asyncio.create_task(self._handle_request(request_id, method, params))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
            return
        # Notification
        if method is not None:
            await self._handle_notification(method, message.get("params"))
            return
        # Response
        if request_id is not None:
            future = self._pending_requests.pop(request_id, None)
            if future is None or future.done():
                self._logger.debug("Response for unknown request", request_id=request_id)
                return
            if error := message.get("error"):
                future.set_exception(
                    RequestError(
                        error.get("code", -32603),
                        error.get("message", "Unknown error"),
                        error.get("data"),
                    )
                )
            else:
                future.set_result(message.get("result"))
            return
        self._logger.warning("Ignoring message without method or id", message=message)

    async def _handle_notification(self, method: str, params: Any) -> None:
        try:
            await self._handler(method, params, True)
        except RequestError as exc:
            self._logger.warning("Notification rejected", method=method, error=str(exc))
        except Exception:
            self._logger.exception("Error handling notification", method=method)

    async def _handle_request(self, request_id: int | str, method: str, params: Any) -> None:
        response: dict[str, Any] = {"jsonrpc": "2.0", "id": request_id}
        try:
            response["result"] = await self._handler(method, params, False)
        except RequestError as exc:
            response["error"] = exc.to_error_object()
        except Exception as exc:
            self._logger.exception("Error handling request", method=method)
            response["error"] = RequestError.internal_error(str(exc)).to_error_object()
        try:
            await self._send(response)
        except ConnectionClosedError:
            self._logger.debug("Could not answer request, connection closed", method=method)

    def _fail_pending(self, exc: BaseException) -> None:
        for future in self._pending_requests.values():
            if not future.done():
                future.set_exception(exc)
        self._pending_requests.clear()
