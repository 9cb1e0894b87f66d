"""Client protocol implementation backing ACPClient."""

from __future__ import annotations

from typing import TYPE_CHECKING

from acp_connect.exceptions import RequestError
from acp_connect.schema import RequestPermissionRequest


if TYPE_CHECKING:
    from acp_connect.dispatcher import SessionUpdateDispatcher
    from acp_connect.permissions import PermissionResolver
    from acp_connect.schema import AgentRequest, ClientResponse, SessionNotification


class ACPClientHandler:
    """Answers agent requests and forwards session updates.

    Permission requests go to the resolver, notifications to the dispatcher.
    """

    def __init__(
        self,
        dispatcher: SessionUpdateDispatcher,
        permissions: PermissionResolver,
    ) -> None:
        self.dispatcher = dispatcher
        self.permissions = permissions

    async def handle_request(self, request: AgentRequest) -> ClientResponse:
        match request:
            case RequestPermissionRequest():
                return self.permissions.resolve(request)
            case _:
                raise RequestError.method_not_found(type(request).__name__)

    async def handle_notification(self, notification: SessionNotification) -> None:
        self.dispatcher.on_notification(notification)
