"""Starlette WebSocket wrapped as a hub connection."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from starlette.websockets import WebSocketDisconnect, WebSocketState

from shocker_hub.domain.errors import ConnectionClosedError
from shocker_hub.domain.models import ConnectionState

if TYPE_CHECKING:
    from starlette.websockets import WebSocket


class WebSocketConnection:
    """A live WebSocket with a stable identity and a liveness state."""

    def __init__(self, websocket: WebSocket) -> None:
        self._websocket = websocket
        self._connection_id = uuid.uuid4().hex
        self._closing = False
        self._closed = False

    @property
    def connection_id(self) -> str:
        return self._connection_id

    @property
    def remote_address(self) -> str:
        client = self._websocket.client
        if client is None:
            return "unknown"
        return f"{client.host}:{client.port}"

    @property
    def state(self) -> ConnectionState:
        if self._closed:
            return ConnectionState.CLOSED
        if WebSocketState.DISCONNECTED in (
            self._websocket.client_state,
            self._websocket.application_state,
        ):
            return ConnectionState.CLOSED
        if self._closing:
            return ConnectionState.CLOSING
        if self._websocket.application_state == WebSocketState.CONNECTED:
            return ConnectionState.OPEN
        return ConnectionState.CLOSED

    def mark_closing(self) -> None:
        self._closing = True

    def mark_closed(self) -> None:
        self._closed = True

    async def send_text(self, text: str) -> None:
        """Send one text frame.

        Raises:
            ConnectionClosedError: If the socket is not open or the send fails.
        """
        if self.state != ConnectionState.OPEN:
            raise ConnectionClosedError(f"Connection {self._connection_id} is not open")
        try:
            await self._websocket.send_text(text)
        except (WebSocketDisconnect, RuntimeError, OSError) as e:
            self._closed = True
            raise ConnectionClosedError(
                f"Send to {self._connection_id} failed: {type(e).__name__}: {e}"
            ) from e
