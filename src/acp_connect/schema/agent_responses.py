"""Responses sent from the agent to the client."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Literal

from pydantic import Field

from acp_connect.base import Response
from acp_connect.schema.capabilities import AgentCapabilities
from acp_connect.schema.common import Implementation
from acp_connect.schema.session_state import SessionModelState, SessionModeState


StopReason = Literal[
    "end_turn",
    "max_tokens",
    "max_turn_requests",
    "refusal",
    "cancelled",
]


class InitializeResponse(Response):
    """Response from the initialize method.

    Contains the negotiated protocol version and agent capabilities.
    """

    agent_capabilities: AgentCapabilities | None = Field(default_factory=AgentCapabilities)

    agent_info: Implementation | None = None

    auth_methods: Sequence[dict] | None = Field(default_factory=list)

    protocol_version: int = Field(ge=0, le=65535)
    """The protocol version the agent agreed to."""


class NewSessionResponse(Response):
    """Response from creating a new session."""

    models: SessionModelState | None = None
    """**UNSTABLE** Initial model state if supported by the Agent."""

    modes: SessionModeState | None = None
    """Initial mode state if supported by the Agent."""

    session_id: str
    """Unique identifier for the created session."""


class SetSessionModeResponse(Response):
    """Response to `session/set_mode` method."""


class SetSessionModelResponse(Response):
    """**UNSTABLE** Response to `session/set_model` method."""


class PromptResponse(Response):
    """Response from processing a user prompt.

    See protocol docs: [Check for Completion](https://agentclientprotocol.com/protocol/prompt-turn#4-check-for-completion)
    """

    stop_reason: StopReason
    """Indicates why the agent stopped processing the turn."""


AgentResponse = (
    InitializeResponse
    | NewSessionResponse
    | SetSessionModeResponse
    | SetSessionModelResponse
    | PromptResponse
)
