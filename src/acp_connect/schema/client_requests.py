"""Requests sent from the client to the agent."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from pydantic import Field

from acp_connect.base import Request
from acp_connect.schema.capabilities import ClientCapabilities
from acp_connect.schema.common import Implementation
from acp_connect.schema.content_blocks import ContentBlock


class InitializeRequest(Request):
    """Request parameters for the initialize method.

    See protocol docs: [Initialization](https://agentclientprotocol.com/protocol/initialization)
    """

    client_capabilities: ClientCapabilities = Field(default_factory=ClientCapabilities)
    """Capabilities supported by the client."""

    client_info: Implementation | None = None
    """Information about the Client name and version."""

    protocol_version: int = Field(ge=0, le=65535)
    """The latest protocol version supported by the client."""


class NewSessionRequest(Request):
    """Request parameters for creating a new session."""

    cwd: str
    """The working directory for this session. Must be an absolute path."""

    mcp_servers: Sequence[dict[str, Any]] = Field(default_factory=list)
    """MCP servers the agent should connect to. This client configures none."""


class SetSessionModeRequest(Request):
    """Request parameters for setting a session mode."""

    mode_id: str

    session_id: str


class SetSessionModelRequest(Request):
    """**UNSTABLE**.

    Request parameters for setting a session model.
    """

    model_id: str

    session_id: str


class PromptRequest(Request):
    """Request parameters for sending a user prompt to the agent.

    See protocol docs: [User Message](https://agentclientprotocol.com/protocol/prompt-turn#1-user-message)
    """

    prompt: Sequence[ContentBlock]
    """The blocks of content that compose the user's message."""

    session_id: str
