"""Tests for the WebSocket endpoint."""

from collections.abc import Iterator
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from starlette.testclient import TestClient
from starlette.websockets import WebSocketState

from shocker_hub.adapters.config import AppConfig
from shocker_hub.adapters.credentials import FileCredentialStore
from shocker_hub.adapters.web import WebSocketHandler
from shocker_hub.application.services import DeviceStateMachine, StreamSession, SubscriptionTable
from shocker_hub.main import HubServices, build_app, build_services

API_KEY = "b" * 64


@pytest.fixture
def services() -> HubServices:
    return build_services(AppConfig.for_testing(rate_limit_per_minute=0))


@pytest.fixture
def client(tmp_path: Path, services: HubServices) -> Iterator[TestClient]:
    path = tmp_path / "api-keys.txt"
    path.write_text(f"{API_KEY}\n", encoding="utf-8")
    credentials = FileCredentialStore(path)
    credentials.load_or_generate()
    config = AppConfig.for_testing(rate_limit_per_minute=0)
    with TestClient(build_app(config, services, credentials)) as test_client:
        yield test_client
        test_client.portal.call(services.shutdown)


def test_when_ping_sent_then_pong_received(client: TestClient) -> None:
    """Given an open socket, when sending ping, then pong is returned."""
    with client.websocket_connect("/ws") as ws:
        ws.send_json({"type": "ping"})
        reply = ws.receive_json()

    assert reply["type"] == "pong"
    assert "timestamp" in reply


def test_when_status_requested_then_snapshot_returned(client: TestClient) -> None:
    """Given an open socket, when sending status, then the snapshot is the data."""
    with client.websocket_connect("/ws") as ws:
        ws.send_json({"type": "status"})
        reply = ws.receive_json()

    assert reply["type"] == "status"
    assert reply["data"]["isOn"] is False


def test_when_message_malformed_then_error_and_socket_stays_open(client: TestClient) -> None:
    """Given a non-JSON frame, when sent, then an error is returned and the socket still works."""
    with client.websocket_connect("/ws") as ws:
        ws.send_text("definitely not json")
        error = ws.receive_json()
        ws.send_json({"type": "ping"})
        pong = ws.receive_json()

    assert error == {
        "type": "error",
        "message": "Invalid message format",
        "timestamp": error["timestamp"],
    }
    assert pong["type"] == "pong"


def test_when_type_unknown_then_unsupported_error(client: TestClient) -> None:
    """Given an unknown type, when sent, then the error names the type."""
    with client.websocket_connect("/ws") as ws:
        ws.send_json({"type": "dance"})
        reply = ws.receive_json()

    assert reply["type"] == "error"
    assert reply["message"] == "Unsupported message type: dance"


def test_when_subscribe_without_token_then_error(client: TestClient) -> None:
    """Given no token and no default, when subscribing, then an error is returned."""
    with client.websocket_connect("/ws") as ws:
        ws.send_json({"type": "subscribe_broadcast", "shockers": ["dev-1"]})
        reply = ws.receive_json()

    assert reply["type"] == "error"
    assert reply["message"] == "An OpenShock API token is required to subscribe"


def test_when_subscribed_then_http_broadcast_reaches_socket(
    client: TestClient, services: HubServices
) -> None:
    """Given a subscribed socket, when broadcasting over HTTP, then the socket receives it."""
    with client.websocket_connect("/ws") as ws:
        ws.send_json(
            {
                "type": "subscribe_broadcast",
                "shockers": "dev-1, dev-2,dev-1",
                "openshockToken": "token-1",
            }
        )
        ack = ws.receive_json()
        assert ack["type"] == "subscribed"
        assert ack["shockers"] == ["dev-1", "dev-2"]
        assert len(services.subscriptions) == 1

        response = client.post(
            "/broadcast",
            json={"intensity": 40, "duration": 500, "type": "shock", "apiKey": API_KEY},
        )
        event = ws.receive_json()

    assert event["type"] == "broadcast"
    assert event["data"]["intensity"] == 40
    assert event["data"]["duration"] == 500
    assert event["data"]["type"] == "shock"
    body = response.json()["broadcast"]
    assert body["subscribers"] == 1
    assert body["sent"] == 1
    assert body["forwarding"] == [
        {
            "enabled": False,
            "success": False,
            "shockers": 0,
            "message": "OpenShock API not configured",
        }
    ]


def test_when_unsubscribed_then_broadcast_not_received(
    client: TestClient, services: HubServices
) -> None:
    """Given a socket that unsubscribed, when broadcasting, then nothing reaches it."""
    with client.websocket_connect("/ws") as ws:
        ws.send_json(
            {"type": "subscribe_broadcast", "shockers": ["dev-1"], "openshockToken": "t"}
        )
        ws.receive_json()
        ws.send_json({"type": "unsubscribe_broadcast"})
        reply = ws.receive_json()
        ws.send_json({"type": "unsubscribe_broadcast"})
        again = ws.receive_json()

        response = client.post(
            "/broadcast",
            json={"intensity": 40, "duration": 500, "type": "shock", "apiKey": API_KEY},
        )

    assert reply["message"] == "Successfully unsubscribed from broadcasts"
    assert again["message"] == "Not subscribed to broadcasts"
    assert response.json()["broadcast"]["sent"] == 0
    assert len(services.subscriptions) == 0


def test_when_activated_over_http_then_every_socket_notified(client: TestClient) -> None:
    """Given an unsubscribed socket, when activating over HTTP, then it gets shock_activated."""
    with client.websocket_connect("/ws") as ws:
        ws.send_json({"type": "ping"})
        ws.receive_json()

        client.post("/shocker/activate", json={"intensity": 30, "time": 5000})
        event = ws.receive_json()

    assert event["type"] == "shock_activated"
    assert event["data"]["intensity"] == 30
    assert event["data"]["isOn"] is True


def _fake_websocket(frames: list[dict]) -> MagicMock:
    websocket = MagicMock()
    websocket.client = None
    websocket.client_state = WebSocketState.CONNECTED
    websocket.application_state = WebSocketState.CONNECTED
    websocket.accept = AsyncMock()
    websocket.receive = AsyncMock(side_effect=frames)
    websocket.send_text = AsyncMock()
    return websocket


@pytest.mark.asyncio
async def test_when_peer_disconnects_then_connection_dropped() -> None:
    """Given a peer that sends one frame and leaves, when handled, then it is dropped once."""
    tracker = MagicMock()
    handler = WebSocketHandler(tracker, StreamSession(DeviceStateMachine(), SubscriptionTable()))
    websocket = _fake_websocket(
        [
            {"type": "websocket.receive", "text": '{"type": "ping"}'},
            {"type": "websocket.disconnect", "code": 1000},
        ]
    )

    await handler(websocket)

    websocket.accept.assert_awaited_once()
    tracker.register.assert_called_once()
    tracker.drop.assert_called_once()
    assert tracker.drop.call_args.kwargs["reason"] == "closed"
    assert '"type":"pong"' in websocket.send_text.await_args.args[0]


@pytest.mark.asyncio
async def test_when_binary_frame_received_then_decoded_as_text() -> None:
    """Given a binary frame carrying JSON, when handled, then it is answered like text."""
    tracker = MagicMock()
    handler = WebSocketHandler(tracker, StreamSession(DeviceStateMachine(), SubscriptionTable()))
    websocket = _fake_websocket(
        [
            {"type": "websocket.receive", "bytes": b'{"type": "ping"}'},
            {"type": "websocket.disconnect", "code": 1000},
        ]
    )

    await handler(websocket)

    assert '"type":"pong"' in websocket.send_text.await_args.args[0]


@pytest.mark.asyncio
async def test_when_send_fails_then_dropped_with_send_failed() -> None:
    """Given a socket whose send raises, when replying, then the connection is dropped."""
    tracker = MagicMock()
    handler = WebSocketHandler(tracker, StreamSession(DeviceStateMachine(), SubscriptionTable()))
    websocket = _fake_websocket([{"type": "websocket.receive", "text": '{"type": "ping"}'}])
    websocket.send_text = AsyncMock(side_effect=RuntimeError("socket gone"))

    await handler(websocket)

    assert tracker.drop.call_args.kwargs["reason"] == "send failed"
