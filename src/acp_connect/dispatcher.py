"""Routing of session update notifications."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from acp_connect.events import (
    CommandsChanged,
    ModeChanged,
    PromptFinished,
    TextDelta,
    ToolCallFinished,
    ToolCallStarted,
    UnrecognizedUpdate,
)
from acp_connect.log import get_logger
from acp_connect.schema import (
    AgentMessageChunk,
    AvailableCommandsUpdate,
    CurrentModeUpdate,
    ToolCallProgress,
    ToolCallStart,
)
from acp_connect.session import SessionMetadata
from acp_connect.subscribers import SubscriberRegistry


if TYPE_CHECKING:
    import structlog

    from acp_connect.events import ClientEvent
    from acp_connect.schema import (
        AvailableCommand,
        NewSessionResponse,
        PromptResponse,
        SessionNotification,
    )


FINAL_TOOL_STATUSES = frozenset({"completed", "failed"})


@dataclass
class StreamingAccumulator:
    """Text streamed during the current prompt turn."""

    chunks: list[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "".join(self.chunks)

    def append(self, text: str) -> None:
        self.chunks.append(text)

    def reset(self) -> None:
        self.chunks.clear()


class SessionUpdateDispatcher:
    """Receives every `session/update` and fans it out.

    Keeps the session metadata in sync with command updates, accumulates
    streamed text and publishes typed events. Command updates for any
    session other than the current one are parked in a pending slot, so
    commands sent right after `session/new` answers land in the new
    session. Every notification is also passed on verbatim to the raw
    update subscribers once the metadata reflects it.
    """

    def __init__(
        self,
        *,
        updates: SubscriberRegistry[SessionNotification] | None = None,
        events: SubscriberRegistry[ClientEvent] | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._logger = logger or get_logger(__name__)
        self.updates = updates if updates is not None else SubscriberRegistry("updates", logger)
        self.events = events if events is not None else SubscriberRegistry("events", logger)
        self.accumulator = StreamingAccumulator()
        self.session_id: str | None = None
        self.metadata: SessionMetadata | None = None
        self.pending_commands: list[AvailableCommand] | None = None

    def start_session(self, response: NewSessionResponse) -> SessionMetadata:
        """Replace the metadata for a new session, merging pending commands."""
        self.session_id = response.session_id
        self.metadata = SessionMetadata.from_response(response, self.pending_commands)
        self.pending_commands = None
        return self.metadata

    def clear(self) -> None:
        """Forget metadata, pending commands and streamed text."""
        self.session_id = None
        self.metadata = None
        self.pending_commands = None
        self.accumulator.reset()

    def publish(self, event: ClientEvent) -> None:
        self.events.emit(event)

    def on_notification(self, notification: SessionNotification) -> None:
        update = notification.update
        session_id = notification.session_id
        self._logger.debug(
            "Session update",
            session_id=session_id,
            kind=update.session_update,
        )
        if isinstance(update, AvailableCommandsUpdate):
            commands = list(update.available_commands)
            if self.metadata is not None and session_id == self.session_id:
                self.metadata.set_commands(commands)
            else:
                self.pending_commands = commands
        self.updates.emit(notification)
        match update:
            case AgentMessageChunk():
                if (text := update.text) is not None:
                    self.accumulator.append(text)
                    self.publish(TextDelta(session_id=session_id, text=text))
            case ToolCallStart():
                event = ToolCallStarted(
                    session_id=session_id,
                    tool_call_id=update.tool_call_id,
                    title=update.title,
                    kind=update.kind,
                    raw_input=update.raw_input,
                    update=update,
                )
                self.publish(event)
            case ToolCallProgress(status=status) if status in FINAL_TOOL_STATUSES:
                finished = ToolCallFinished(
                    session_id=session_id,
                    tool_call_id=update.tool_call_id,
                    status=status,
                    title=update.title,
                    raw_output=update.raw_output,
                    update=update,
                )
                self.publish(finished)
            case ToolCallProgress():
                pass  # intermediate progress
            case CurrentModeUpdate():
                # The cached mode id only follows explicit set_mode calls.
                self.publish(ModeChanged(session_id=session_id, mode_id=update.current_mode_id))
            case AvailableCommandsUpdate():
                commands = list(update.available_commands)
                self.publish(CommandsChanged(session_id=session_id, commands=commands))
            case _:
                self.publish(UnrecognizedUpdate(session_id=session_id, update=update))

    def start_prompt(self) -> None:
        self.accumulator.reset()

    def finish_prompt(self, session_id: str, response: PromptResponse) -> PromptFinished:
        """Publish the completed turn with its text and reset the accumulator."""
        text = self.accumulator.text
        if not text:
            self._logger.warning(
                "Prompt finished without streamed text",
                session_id=session_id,
                stop_reason=response.stop_reason,
            )
        else:
            self._logger.debug(
                "Prompt finished",
                session_id=session_id,
                stop_reason=response.stop_reason,
                chars=len(text),
            )
        event = PromptFinished(session_id=session_id, stop_reason=response.stop_reason, text=text)
        self.publish(event)
        self.accumulator.reset()
        return event

    def fail_prompt(self) -> None:
        self.accumulator.reset()
