"""Connection state machine."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

from acp_connect.exceptions import AlreadyActiveError
from acp_connect.log import get_logger
from acp_connect.subscribers import SubscriberRegistry


if TYPE_CHECKING:
    import structlog


class ConnectionState(StrEnum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    ERROR = "error"


ACTIVE_STATES = frozenset({ConnectionState.CONNECTING, ConnectionState.CONNECTED})


class ConnectionStateMachine:
    """Holds the connection state and notifies subscribers on change.

    Transitions to the current state are no-ops and notify nobody, so
    subscribers never see the same state twice in a row.
    """

    def __init__(
        self,
        subscribers: SubscriberRegistry[ConnectionState] | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        if subscribers is None:
            subscribers = SubscriberRegistry("state", logger)
        self.subscribers = subscribers
        self._logger = logger or get_logger(__name__)
        self._state = ConnectionState.DISCONNECTED

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state in ACTIVE_STATES

    def transition(self, new_state: ConnectionState) -> bool:
        """Move to `new_state`. Returns False if nothing changed."""
        if new_state == self._state:
            return False
        old_state, self._state = self._state, new_state
        self._logger.debug("Connection state changed", old=old_state.value, new=new_state.value)
        self.subscribers.emit(new_state)
        return True

    def begin_connect(self) -> None:
        """Enter `connecting`, refusing if a connection is already underway or up."""
        if self.is_active:
            raise AlreadyActiveError(self._state.value)
        self.transition(ConnectionState.CONNECTING)
