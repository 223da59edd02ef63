"""WebSocket endpoint: connection lifecycle and the receive loop."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from shocker_hub.adapters.web.websocket_connection import WebSocketConnection
from shocker_hub.domain.errors import ConnectionClosedError

if TYPE_CHECKING:
    from starlette.websockets import WebSocket

    from shocker_hub.domain.contracts import ConnectionTrackerProtocol, StreamHandlerProtocol

logger = logging.getLogger(__name__)


def _frame_text(message: dict) -> str:
    text = message.get("text")
    if text is not None:
        return text
    data = message.get("bytes") or b""
    return data.decode("utf-8", errors="replace")


class WebSocketHandler:
    """Accepts streaming connections and answers each inbound frame."""

    def __init__(
        self, tracker: ConnectionTrackerProtocol, stream_handler: StreamHandlerProtocol
    ) -> None:
        self._tracker = tracker
        self._stream_handler = stream_handler

    async def __call__(self, websocket: WebSocket) -> None:
        await websocket.accept()
        connection = WebSocketConnection(websocket)
        self._tracker.register(connection)
        logger.info(f"New WebSocket connection from {connection.remote_address}")

        reason = "closed"
        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    break
                reply = self._stream_handler.handle_text(connection, _frame_text(message))
                await connection.send_text(reply.to_json())
        except ConnectionClosedError as e:
            reason = "send failed"
            logger.info(f"WebSocket {connection.remote_address} went away: {e}")
        except Exception as e:
            reason = "error"
            logger.error(f"WebSocket error from {connection.remote_address}: {e}", exc_info=True)
        finally:
            connection.mark_closed()
            self._tracker.drop(connection, reason=reason)
            logger.info(f"WebSocket connection closed from {connection.remote_address}")
