"""Client-side ACP connection."""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING, Any, Self

from pydantic import BaseModel, ValidationError

from acp_connect.connection import Connection
from acp_connect.exceptions import ProtocolError, RequestError
from acp_connect.meta import AGENT_METHODS
from acp_connect.schema import (
    CancelNotification,
    InitializeResponse,
    NewSessionResponse,
    PromptResponse,
    RequestPermissionRequest,
    SessionNotification,
    SetSessionModelResponse,
    SetSessionModeResponse,
)


if TYPE_CHECKING:
    from anyio.abc import ByteReceiveStream, ByteSendStream
    import structlog

    from acp_connect.connection import ErrorCallback
    from acp_connect.protocol import Client
    from acp_connect.schema import (
        InitializeRequest,
        NewSessionRequest,
        PromptRequest,
        SetSessionModelRequest,
        SetSessionModeRequest,
    )


class ClientSideConnection:
    """Client-side connection.

    Use when you implement the Client and need to talk to an Agent.

    Args:
        to_client: the Client receiving agent requests and notifications
        input_stream: byte stream to the agent (local -> peer)
        output_stream: byte stream from the agent (peer -> local)
    """

    def __init__(
        self,
        to_client: Client,
        input_stream: ByteSendStream,
        output_stream: ByteReceiveStream,
        *,
        on_error: ErrorCallback | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        handler = partial(_client_handler, to_client)
        self._conn = Connection(
            handler,
            input_stream,
            output_stream,
            on_error=on_error,
            logger=logger,
        )

    @property
    def closed(self) -> bool:
        return self._conn.closed

    # agent-bound methods (client -> agent)
    async def initialize(self, params: InitializeRequest) -> InitializeResponse:
        resp = await self._conn.send_request(AGENT_METHODS["initialize"], params.to_wire())
        return _validate(InitializeResponse, resp, AGENT_METHODS["initialize"])

    async def new_session(self, params: NewSessionRequest) -> NewSessionResponse:
        method = AGENT_METHODS["session_new"]
        resp = await self._conn.send_request(method, params.to_wire())
        return _validate(NewSessionResponse, resp, method)

    async def set_session_mode(self, params: SetSessionModeRequest) -> SetSessionModeResponse:
        method = AGENT_METHODS["session_set_mode"]
        resp = await self._conn.send_request(method, params.to_wire())
        return _validate(SetSessionModeResponse, resp or {}, method)

    async def set_session_model(
        self, params: SetSessionModelRequest
    ) -> SetSessionModelResponse:
        method = AGENT_METHODS["session_set_model"]
        resp = await self._conn.send_request(method, params.to_wire())
        return _validate(SetSessionModelResponse, resp or {}, method)

    async def prompt(self, params: PromptRequest) -> PromptResponse:
        method = AGENT_METHODS["session_prompt"]
        resp = await self._conn.send_request(method, params.to_wire())
        return _validate(PromptResponse, resp, method)

    async def cancel(self, params: CancelNotification) -> None:
        await self._conn.send_notification(AGENT_METHODS["session_cancel"], params.to_wire())

    def abort(self) -> None:
        self._conn.abort()

    async def close(self) -> None:
        await self._conn.close()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *_args: object) -> None:
        await self.close()


def _validate[T: BaseModel](model: type[T], data: Any, method: str) -> T:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        msg = f"Malformed response to {method}: {exc}"
        raise ProtocolError(msg) from exc


async def _client_handler(
    client: Client,
    method: str,
    params: dict[str, Any] | None,
    is_notification: bool,
) -> dict[str, Any] | None:
    match method:
        case "session/update":
            try:
                notification = SessionNotification.model_validate(params)
            except ValidationError as exc:
                raise RequestError.invalid_params(str(exc)) from exc
            await client.handle_notification(notification)
            return None
        case "session/request_permission":
            try:
                request = RequestPermissionRequest.model_validate(params)
            except ValidationError as exc:
                raise RequestError.invalid_params(str(exc)) from exc
            response = await client.handle_request(request)
            return response.to_wire()
        case _:
            raise RequestError.method_not_found(method)
