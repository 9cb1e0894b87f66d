from __future__ import annotations

from typing import TYPE_CHECKING, Protocol


if TYPE_CHECKING:
    from acp_connect.schema import (
        AgentRequest,
        ClientResponse,
        SessionNotification,
    )


class Client(Protocol):
    """Receiving side of the agent -> client direction.

    All agent requests arrive through a single entry point.
    """

    async def handle_request(self, request: AgentRequest) -> ClientResponse:
        """Handle any agent request and return the matching response."""
        ...

    async def handle_notification(self, notification: SessionNotification) -> None:
        """Handle a session update notification."""
        ...
