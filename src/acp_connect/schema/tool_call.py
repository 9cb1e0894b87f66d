"""Tool call schema definitions."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Annotated, Any, Literal

from pydantic import Field

from acp_connect.base import AnnotatedObject, Schema
from acp_connect.schema.content_blocks import ContentBlock


ToolCallKind = Literal[
    "read",
    "edit",
    "delete",
    "move",
    "search",
    "execute",
    "think",
    "fetch",
    "switch_mode",
    "other",
]
ToolCallStatus = Literal["pending", "in_progress", "completed", "failed"]
PermissionKind = Literal["allow_once", "allow_always", "reject_once", "reject_always"]


class ContentToolCallContent(Schema):
    """Standard content block (text, images, resources)."""

    type: Literal["content"] = "content"

    content: ContentBlock
    """The actual content block."""


class FileEditToolCallContent(AnnotatedObject):
    """File modification shown as a diff."""

    type: Literal["diff"] = "diff"

    new_text: str
    """The new content after modification."""

    old_text: str | None = None
    """The original content (None for new files)."""

    path: str
    """The file path being modified."""


class TerminalToolCallContent(Schema):
    """Embed a terminal created with `terminal/create` by its id."""

    type: Literal["terminal"] = "terminal"

    terminal_id: str
    """The ID of the terminal being embedded."""


ToolCallContent = Annotated[
    ContentToolCallContent | FileEditToolCallContent | TerminalToolCallContent,
    Field(discriminator="type"),
]


class ToolCallLocation(AnnotatedObject):
    """A file location being accessed or modified by a tool."""

    line: int | None = Field(default=None, ge=0)
    """Optional line number within the file."""

    path: str
    """The file path being accessed or modified."""


class ToolCall(AnnotatedObject):
    """Details about the tool call requiring permission."""

    content: Sequence[ToolCallContent] | None = None

    kind: ToolCallKind | None = None

    locations: Sequence[ToolCallLocation] | None = None

    raw_input: Any | None = None

    raw_output: Any | None = None

    status: ToolCallStatus | None = None

    title: str | None = None

    tool_call_id: str
    """The ID of the tool call."""


class PermissionOption(AnnotatedObject):
    """An option presented to the user when requesting permission."""

    kind: PermissionKind
    """Hint about the nature of this permission option."""

    name: str
    """Human-readable label to display to the user."""

    option_id: str
    """Unique identifier for this permission option."""


class DeniedOutcome(Schema):
    """The prompt turn was cancelled before the user responded.

    See protocol docs: [Cancellation](https://agentclientprotocol.com/protocol/prompt-turn#cancellation)
    """

    outcome: Literal["cancelled"] = "cancelled"


class AllowedOutcome(Schema):
    """The user selected one of the provided options."""

    option_id: str
    """The ID of the option the user selected."""

    outcome: Literal["selected"] = "selected"


PermissionOutcome = Annotated[AllowedOutcome | DeniedOutcome, Field(discriminator="outcome")]
