"""HTTP and WebSocket handlers."""

from shocker_hub.adapters.web.handlers.http_handlers import (
    HttpHandlers,
    InvalidBodyError,
    error_response,
    read_json_body,
)
from shocker_hub.adapters.web.handlers.websocket_handler import WebSocketHandler

__all__ = [
    "HttpHandlers",
    "InvalidBodyError",
    "WebSocketHandler",
    "error_response",
    "read_json_body",
]
