"""Starlette application and uvicorn servers for the hub."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

import uvicorn
from starlette.applications import Starlette
from starlette.exceptions import HTTPException
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.routing import Route, WebSocketRoute

from shocker_hub.adapters.web.handlers import (
    HttpHandlers,
    InvalidBodyError,
    WebSocketHandler,
    error_response,
)
from shocker_hub.adapters.web.rate_limit_middleware import RateLimitMiddleware

if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import Response

    from shocker_hub.adapters.config import AppConfig
    from shocker_hub.domain.contracts import CertificateProviderProtocol

logger = logging.getLogger(__name__)


async def not_found(_request: Request, _exc: Exception) -> Response:
    return error_response(404, "Not found", "The requested endpoint does not exist")


async def http_error(_request: Request, exc: Exception) -> Response:
    status_code = getattr(exc, "status_code", 500)
    detail = getattr(exc, "detail", "") or "Request failed"
    return error_response(status_code, "Request failed", str(detail))


async def invalid_body(_request: Request, exc: Exception) -> Response:
    logger.warning(f"Rejected request with invalid JSON body: {exc}")
    return error_response(400, "Invalid JSON", "Request body must be valid JSON")


async def server_error(request: Request, exc: Exception) -> Response:
    logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=exc)
    return error_response(500, "Internal server error", "Something went wrong!")


def create_app(
    http_handlers: HttpHandlers, websocket_handler: WebSocketHandler, config: AppConfig
) -> Starlette:
    """Build the Starlette application with routes and middleware."""
    routes = [
        Route("/health", http_handlers.health, methods=["GET"]),
        Route("/shocker/status", http_handlers.status, methods=["GET"]),
        Route("/shocker/activate", http_handlers.activate, methods=["POST"]),
        Route("/shocker/stop", http_handlers.stop, methods=["POST"]),
        Route("/broadcast", http_handlers.broadcast, methods=["POST"]),
        Route("/admin/keys", http_handlers.admin_keys, methods=["GET"]),
        WebSocketRoute("/ws", websocket_handler),
    ]

    middleware = [
        Middleware(
            CORSMiddleware,
            allow_origins=config.cors_allow_origins,
            allow_methods=["*"],
            allow_headers=["*"],
        ),
        Middleware(RateLimitMiddleware, requests_per_minute=config.rate_limit_per_minute),
    ]

    exception_handlers: dict[Any, Any] = {
        404: not_found,
        HTTPException: http_error,
        InvalidBodyError: invalid_body,
        Exception: server_error,
    }

    return Starlette(routes=routes, middleware=middleware, exception_handlers=exception_handlers)


class WebServer:
    """Runs the app on a plain HTTP listener and, optionally, an HTTPS one."""

    def __init__(
        self,
        app: Starlette,
        config: AppConfig,
        certificate_provider: CertificateProviderProtocol | None = None,
    ) -> None:
        self.app = app
        self.config = config
        self.certificate_provider = certificate_provider
        self._servers: list[uvicorn.Server] = []

    def build_server_configs(self) -> list[uvicorn.Config]:
        """Create one uvicorn config per listener.

        Raises:
            ConfigurationError: If HTTPS is enabled but no key material exists.
        """
        configs = [
            uvicorn.Config(
                self.app,
                host=self.config.host,
                port=self.config.http_port,
                log_level="info",
            )
        ]
        if self.config.https_enabled and self.certificate_provider is not None:
            key_pair = self.certificate_provider.get_key_pair(self.config.domain)
            configs.append(
                uvicorn.Config(
                    self.app,
                    host=self.config.host,
                    port=self.config.https_port,
                    ssl_keyfile=str(key_pair.key_path),
                    ssl_certfile=str(key_pair.cert_path),
                    log_level="info",
                )
            )
        return configs

    async def start(self) -> None:
        """Serve until any listener exits, then stop the others."""
        configs = self.build_server_configs()
        self._servers = [uvicorn.Server(config) for config in configs]
        for config in configs:
            scheme = "https" if config.ssl_certfile else "http"
            logger.info(f"Listening on {scheme}://{config.host}:{config.port} (WebSocket at /ws)")

        tasks = [asyncio.create_task(server.serve()) for server in self._servers]
        done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        await self.stop()
        if pending:
            await asyncio.gather(*pending)
        for task in done:
            task.result()

    async def stop(self) -> None:
        """Ask every running listener to exit."""
        for server in self._servers:
            server.should_exit = True
