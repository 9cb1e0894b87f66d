"""Session mode and model state."""

from __future__ import annotations

from collections.abc import Sequence

from acp_connect.base import AnnotatedObject


class SessionMode(AnnotatedObject):
    """A mode the agent can operate in."""

    description: str | None = None

    id: str
    """Unique identifier for a Session Mode."""

    name: str


class SessionModeState(AnnotatedObject):
    """The set of modes and the one currently active.

    See protocol docs: [Session Modes](https://agentclientprotocol.com/protocol/session-modes)
    """

    available_modes: Sequence[SessionMode]
    """The set of modes that the Agent can operate in."""

    current_mode_id: str
    """The current mode the Agent is in."""


class ModelInfo(AnnotatedObject):
    """Information about a selectable model."""

    description: str | None = None

    model_id: str
    """Unique identifier for the model."""

    name: str


class SessionModelState(AnnotatedObject):
    """**UNSTABLE**.

    The set of models and the one currently active.
    """

    available_models: Sequence[ModelInfo]
    """The set of models that the Agent can use."""

    current_model_id: str
    """The current model the Agent is in."""
