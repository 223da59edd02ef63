"""Tests for the connection registry."""

import json
from unittest.mock import MagicMock

import pytest

from shocker_hub.application.services import ConnectionRegistry, build_envelope
from shocker_hub.domain.models import MessageType


def test_when_registered_twice_then_counted_once(make_connection) -> None:
    """Given a connection, when registered twice, then the registry holds it once."""
    registry = ConnectionRegistry()
    connection = make_connection()

    registry.register(connection)
    registry.register(connection)

    assert registry.count == 1
    assert registry.contains(connection)


def test_when_unregistered_twice_then_second_returns_false(make_connection) -> None:
    """Given a registered connection, when unregistered twice, then only the first removes it."""
    registry = ConnectionRegistry()
    connection = make_connection()
    registry.register(connection)

    assert registry.unregister(connection) is True
    assert registry.unregister(connection) is False
    assert registry.count == 0


def test_when_dropped_then_removal_listeners_fire(make_connection) -> None:
    """Given a removal listener, when a connection is dropped, then the listener is called."""
    registry = ConnectionRegistry()
    listener = MagicMock()
    registry.add_removal_listener(listener)
    connection = make_connection()
    registry.register(connection)

    registry.drop(connection, reason="closed")

    listener.assert_called_once_with(connection)
    assert registry.count == 0


def test_when_listener_raises_then_other_listeners_still_run(make_connection) -> None:
    """Given a failing listener, when dropping, then later listeners still run."""
    registry = ConnectionRegistry()
    second = MagicMock()
    registry.add_removal_listener(MagicMock(side_effect=RuntimeError("boom")))
    registry.add_removal_listener(second)
    connection = make_connection()
    registry.register(connection)

    registry.drop(connection)

    second.assert_called_once_with(connection)


@pytest.mark.asyncio
async def test_when_broadcasting_then_every_open_connection_receives(make_connection) -> None:
    """Given open and closed connections, when broadcasting, then only open ones receive it."""
    registry = ConnectionRegistry()
    open_a, open_b, closed = make_connection(), make_connection(), make_connection()
    closed.close()
    for connection in (open_a, open_b, closed):
        registry.register(connection)

    sent = await registry.broadcast_all(build_envelope(MessageType.STATUS, {"isOn": False}))

    assert sent == 2
    assert json.loads(open_a.sent[0])["type"] == "status"
    assert open_a.sent == open_b.sent
    assert closed.sent == []


@pytest.mark.asyncio
async def test_when_send_fails_then_connection_dropped_and_others_served(
    make_connection,
) -> None:
    """Given one failing connection, when broadcasting, then it is dropped and others receive."""
    registry = ConnectionRegistry()
    listener = MagicMock()
    registry.add_removal_listener(listener)
    broken = make_connection(fail_sends=True)
    healthy = make_connection()
    registry.register(broken)
    registry.register(healthy)

    sent = await registry.broadcast_all(build_envelope(MessageType.SHOCK_STOPPED))

    assert sent == 1
    assert not registry.contains(broken)
    assert registry.contains(healthy)
    listener.assert_called_once_with(broken)
