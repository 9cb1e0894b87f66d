"""Session update schema definitions.

Notifications are decoded here, once, into a closed set of variants. Kinds this
client does not know decode into `UnknownSessionUpdate` instead of failing.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Annotated, Any, Literal, Union

from pydantic import ConfigDict, Discriminator, Tag

from acp_connect.base import AnnotatedObject
from acp_connect.schema.content_blocks import ContentBlock, TextContentBlock
from acp_connect.schema.slash_commands import AvailableCommand
from acp_connect.schema.tool_call import (
    ToolCallContent,
    ToolCallKind,
    ToolCallLocation,
    ToolCallStatus,
)


PlanEntryPriority = Literal["high", "medium", "low"]
PlanEntryStatus = Literal["pending", "in_progress", "completed"]


class UserMessageChunk(AnnotatedObject):
    """A chunk of the user's message being streamed."""

    session_update: Literal["user_message_chunk"] = "user_message_chunk"

    content: ContentBlock


class AgentMessageChunk(AnnotatedObject):
    """A chunk of the agent's response being streamed."""

    session_update: Literal["agent_message_chunk"] = "agent_message_chunk"

    content: ContentBlock

    @property
    def text(self) -> str | None:
        """Text of the chunk, None for non-text content."""
        return self.content.text if isinstance(self.content, TextContentBlock) else None


class AgentThoughtChunk(AnnotatedObject):
    """A chunk of the agent's internal reasoning being streamed."""

    session_update: Literal["agent_thought_chunk"] = "agent_thought_chunk"

    content: ContentBlock


class ToolCallStart(AnnotatedObject):
    """Notification that a new tool call has been initiated."""

    session_update: Literal["tool_call"] = "tool_call"

    content: Sequence[ToolCallContent] | None = None

    kind: ToolCallKind | None = None

    locations: Sequence[ToolCallLocation] | None = None

    raw_input: Any | None = None

    raw_output: Any | None = None

    status: ToolCallStatus | None = None

    title: str
    """Human-readable title describing what the tool is doing."""

    tool_call_id: str
    """Unique identifier for this tool call within the session."""


class ToolCallProgress(AnnotatedObject):
    """Update on the status or results of a tool call."""

    session_update: Literal["tool_call_update"] = "tool_call_update"

    content: Sequence[ToolCallContent] | None = None

    kind: ToolCallKind | None = None

    locations: Sequence[ToolCallLocation] | None = None

    raw_input: Any | None = None

    raw_output: Any | None = None

    status: ToolCallStatus | None = None

    title: str | None = None

    tool_call_id: str
    """The ID of the tool call being updated."""


class PlanEntry(AnnotatedObject):
    """A single entry in the agent's execution plan."""

    content: str

    priority: PlanEntryPriority

    status: PlanEntryStatus


class AgentPlanUpdate(AnnotatedObject):
    """The agent's execution plan for complex tasks.

    The agent always sends the complete list of entries.
    """

    session_update: Literal["plan"] = "plan"

    entries: Sequence[PlanEntry]


class AvailableCommandsUpdate(AnnotatedObject):
    """Available commands are ready or have changed."""

    session_update: Literal["available_commands_update"] = "available_commands_update"

    available_commands: Sequence[AvailableCommand]
    """Commands the agent can execute."""


class CurrentModeUpdate(AnnotatedObject):
    """The current mode of the session has changed."""

    session_update: Literal["current_mode_update"] = "current_mode_update"

    current_mode_id: str
    """The ID of the current mode."""


class UnknownSessionUpdate(AnnotatedObject):
    """An update kind this client does not recognize.

    All fields beyond `session_update` are kept as extra attributes.
    """

    model_config = ConfigDict(extra="allow")

    session_update: str


KNOWN_UPDATE_KINDS = frozenset({
    "user_message_chunk",
    "agent_message_chunk",
    "agent_thought_chunk",
    "tool_call",
    "tool_call_update",
    "plan",
    "available_commands_update",
    "current_mode_update",
})


def _update_kind(value: Any) -> str:
    if isinstance(value, dict):
        kind = value.get("sessionUpdate", value.get("session_update"))
    elif isinstance(value, UnknownSessionUpdate):
        return "unknown"
    else:
        kind = getattr(value, "session_update", None)
    return kind if kind in KNOWN_UPDATE_KINDS else "unknown"


SessionUpdate = Annotated[
    Union[  # noqa: UP007
        Annotated[UserMessageChunk, Tag("user_message_chunk")],
        Annotated[AgentMessageChunk, Tag("agent_message_chunk")],
        Annotated[AgentThoughtChunk, Tag("agent_thought_chunk")],
        Annotated[ToolCallStart, Tag("tool_call")],
        Annotated[ToolCallProgress, Tag("tool_call_update")],
        Annotated[AgentPlanUpdate, Tag("plan")],
        Annotated[AvailableCommandsUpdate, Tag("available_commands_update")],
        Annotated[CurrentModeUpdate, Tag("current_mode_update")],
        Annotated[UnknownSessionUpdate, Tag("unknown")],
    ],
    Discriminator(_update_kind),
]
