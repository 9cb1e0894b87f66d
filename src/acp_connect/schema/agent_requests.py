"""Requests sent from the agent to the client."""

from __future__ import annotations

from collections.abc import Sequence

from acp_connect.base import Request
from acp_connect.schema.tool_call import PermissionOption, ToolCall


class RequestPermissionRequest(Request):
    """Request for user permission to execute a tool call.

    See protocol docs: [Requesting Permission](https://agentclientprotocol.com/protocol/tool-calls#requesting-permission)
    """

    options: Sequence[PermissionOption]
    """Available permission options for the user to choose from."""

    session_id: str

    tool_call: ToolCall
    """Details about the tool call requiring permission."""


AgentRequest = RequestPermissionRequest
