"""Tests for the connection state machine and subscriber registries."""

from __future__ import annotations

import pytest

from acp_connect.exceptions import AlreadyActiveError
from acp_connect.state import ConnectionState, ConnectionStateMachine
from acp_connect.subscribers import SubscriberRegistry


def test_initial_state_is_disconnected():
    machine = ConnectionStateMachine()
    assert machine.state is ConnectionState.DISCONNECTED
    assert not machine.is_active


def test_transitions_notify_once_each():
    machine = ConnectionStateMachine()
    seen: list[ConnectionState] = []
    machine.subscribers.add(seen.append)

    assert machine.transition(ConnectionState.CONNECTING)
    assert machine.transition(ConnectionState.CONNECTED)
    assert not machine.transition(ConnectionState.CONNECTED)
    assert machine.transition(ConnectionState.DISCONNECTED)

    assert seen == ["connecting", "connected", "disconnected"]


@pytest.mark.parametrize("state", [ConnectionState.CONNECTING, ConnectionState.CONNECTED])
def test_begin_connect_rejects_active_states(state: ConnectionState):
    machine = ConnectionStateMachine()
    machine.transition(state)
    seen: list[ConnectionState] = []
    machine.subscribers.add(seen.append)

    with pytest.raises(AlreadyActiveError) as exc_info:
        machine.begin_connect()

    assert exc_info.value.state == state.value
    assert machine.state is state
    assert seen == []


@pytest.mark.parametrize("state", [ConnectionState.DISCONNECTED, ConnectionState.ERROR])
def test_begin_connect_from_idle_states(state: ConnectionState):
    machine = ConnectionStateMachine()
    machine.transition(state)
    machine.begin_connect()
    assert machine.state is ConnectionState.CONNECTING


def test_registry_tokens_are_unique_and_removal_idempotent():
    registry = SubscriberRegistry[int]("test")
    calls: list[tuple[str, int]] = []
    first = registry.add(lambda v: calls.append(("first", v)))
    second = registry.add(lambda v: calls.append(("second", v)))
    assert first.token != second.token

    registry.emit(1)
    first.unsubscribe()
    first.unsubscribe()
    assert registry.remove(first.token) is False
    registry.emit(2)

    assert calls == [("first", 1), ("second", 1), ("second", 2)]
    assert len(registry) == 1


def test_registry_isolates_failing_subscriber():
    registry = SubscriberRegistry[str]("test")
    received: list[str] = []

    def broken(_value: str) -> None:
        raise RuntimeError("subscriber bug")

    registry.add(broken)
    registry.add(received.append)
    registry.emit("hello")

    assert received == ["hello"]


def test_unsubscribe_during_emit():
    registry = SubscriberRegistry[str]("test")
    received: list[str] = []
    subscription = None

    def once(value: str) -> None:
        received.append(value)
        assert subscription is not None
        subscription.unsubscribe()

    subscription = registry.add(once)
    registry.emit("a")
    registry.emit("b")
    assert received == ["a"]
