"""Notification schema definitions."""

from __future__ import annotations

from acp_connect.base import AnnotatedObject
from acp_connect.schema.session_updates import SessionUpdate


class SessionNotification(AnnotatedObject):
    """Notification containing a session update from the agent.

    See protocol docs: [Agent Reports Output](https://agentclientprotocol.com/protocol/prompt-turn#3-agent-reports-output)
    """

    session_id: str
    """The ID of the session this update pertains to."""

    update: SessionUpdate


class CancelNotification(AnnotatedObject):
    """Notification to cancel ongoing operations for a session."""

    session_id: str
    """The ID of the session to cancel operations for."""
