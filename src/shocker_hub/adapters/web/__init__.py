"""Web adapter: Starlette routes, WebSocket endpoint and uvicorn servers."""

from shocker_hub.adapters.web.handlers import HttpHandlers, WebSocketHandler
from shocker_hub.adapters.web.rate_limit_middleware import RateLimitMiddleware, extract_client_ip
from shocker_hub.adapters.web.starlette_app import WebServer, create_app
from shocker_hub.adapters.web.websocket_connection import WebSocketConnection

__all__ = [
    "HttpHandlers",
    "RateLimitMiddleware",
    "WebServer",
    "WebSocketConnection",
    "WebSocketHandler",
    "create_app",
    "extract_client_ip",
]
