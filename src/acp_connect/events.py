"""Typed events published by the client."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal


if TYPE_CHECKING:
    from acp_connect.diagnostics import ErrorSignal
    from acp_connect.schema import (
        AvailableCommand,
        SessionUpdate,
        StopReason,
        ToolCallKind,
        ToolCallProgress,
        ToolCallStart,
        ToolCallStatus,
    )


@dataclass(kw_only=True)
class TextDelta:
    """A chunk of agent response text."""

    session_id: str
    text: str
    """The streamed text, in arrival order."""
    event_kind: Literal["text_delta"] = "text_delta"
    """Event type identifier."""


@dataclass(kw_only=True)
class ToolCallStarted:
    """The agent started a tool call."""

    session_id: str
    tool_call_id: str
    title: str
    kind: ToolCallKind | None = None
    raw_input: Any | None = None
    update: ToolCallStart
    """The notification payload this event was built from."""
    event_kind: Literal["tool_call_started"] = "tool_call_started"
    """Event type identifier."""


@dataclass(kw_only=True)
class ToolCallFinished:
    """A tool call reached `completed` or `failed`."""

    session_id: str
    tool_call_id: str
    status: ToolCallStatus
    title: str | None = None
    raw_output: Any | None = None
    update: ToolCallProgress
    """The notification payload this event was built from."""
    event_kind: Literal["tool_call_finished"] = "tool_call_finished"
    """Event type identifier."""

    @property
    def failed(self) -> bool:
        return self.status == "failed"


@dataclass(kw_only=True)
class ModeChanged:
    """The agent reports a new current mode."""

    session_id: str
    mode_id: str
    event_kind: Literal["mode_changed"] = "mode_changed"
    """Event type identifier."""


@dataclass(kw_only=True)
class CommandsChanged:
    """The set of available slash commands changed."""

    session_id: str
    commands: list[AvailableCommand]
    event_kind: Literal["commands_changed"] = "commands_changed"
    """Event type identifier."""


@dataclass(kw_only=True)
class PromptFinished:
    """A prompt turn completed."""

    session_id: str
    stop_reason: StopReason
    text: str
    """All text streamed during the turn."""
    event_kind: Literal["prompt_finished"] = "prompt_finished"
    """Event type identifier."""


@dataclass(kw_only=True)
class AgentErrorReported:
    """An error recognized in the agent's diagnostic output."""

    signal: ErrorSignal
    event_kind: Literal["agent_error"] = "agent_error"
    """Event type identifier."""

    @property
    def message(self) -> str:
        return self.signal.message


@dataclass(kw_only=True)
class UnrecognizedUpdate:
    """A session update that no other event covers.

    Carries thoughts, plans, echoed user chunks and update kinds this
    client does not know.
    """

    session_id: str
    update: SessionUpdate
    event_kind: Literal["unrecognized_update"] = "unrecognized_update"
    """Event type identifier."""


ClientEvent = (
    TextDelta
    | ToolCallStarted
    | ToolCallFinished
    | ModeChanged
    | CommandsChanged
    | PromptFinished
    | AgentErrorReported
    | UnrecognizedUpdate
)
