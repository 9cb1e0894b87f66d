"""Session and session metadata held by the client."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from acp_connect.schema import (
        AvailableCommand,
        NewSessionResponse,
        SessionModelState,
        SessionModeState,
    )


@dataclass(frozen=True)
class Session:
    """A negotiated session."""

    session_id: str
    """Opaque id assigned by the agent."""

    cwd: str
    """Working directory the session was created with."""


@dataclass
class SessionMetadata:
    """Mode, model and command state of the current session.

    Seeded from the `session/new` response and kept up to date by
    notifications and explicit set_mode / set_model calls.
    """

    modes: SessionModeState | None = None
    models: SessionModelState | None = None
    commands: list[AvailableCommand] | None = None

    @classmethod
    def from_response(
        cls,
        response: NewSessionResponse,
        commands: Sequence[AvailableCommand] | None = None,
    ) -> SessionMetadata:
        return cls(
            modes=response.modes,
            models=response.models,
            commands=list(commands) if commands is not None else None,
        )

    def set_current_mode(self, mode_id: str) -> None:
        if self.modes is not None:
            self.modes.current_mode_id = mode_id

    def set_current_model(self, model_id: str) -> None:
        if self.models is not None:
            self.models.current_model_id = model_id

    def set_commands(self, commands: Sequence[AvailableCommand]) -> None:
        self.commands = list(commands)
