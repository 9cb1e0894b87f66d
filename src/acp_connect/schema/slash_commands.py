"""Slash command schema definitions."""

from __future__ import annotations

from acp_connect.base import AnnotatedObject, Schema


class CommandInputHint(Schema):
    """All text that was typed after the command name is provided as input."""

    hint: str
    """A hint to display when the input hasn't been provided yet."""


class AvailableCommand(AnnotatedObject):
    """Information about a command."""

    description: str
    """Human-readable description of what the command does."""

    input: CommandInputHint | None = None
    """Input for the command if required."""

    name: str
    """Command name (e.g., `create_plan`, `research_codebase`)."""
