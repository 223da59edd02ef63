"""Rate limiting middleware for Starlette using throttled-py."""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from throttled import RateLimiterType, Throttled, rate_limiter, store

logger = logging.getLogger(__name__)


def extract_client_ip(request: Request) -> str:
    """Extract client IP address from request, supporting X-Forwarded-For header.

    Returns the first (original client) IP when the header lists a proxy chain.
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        client_ip = forwarded_for.split(",")[0].strip()
        if client_ip:
            return client_ip

    if request.client and request.client.host:
        return request.client.host

    logger.warning("Could not determine client IP, using 'unknown'")
    return "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Per-IP request limit for the HTTP routes.

    WebSocket scopes bypass BaseHTTPMiddleware, so streaming connections are
    never limited. A limit of 0 disables the middleware.
    """

    def __init__(
        self,
        app: Callable,
        requests_per_minute: int = 100,
    ) -> None:
        """Initialize rate limiting middleware.

        Args:
            app: The ASGI application to wrap.
            requests_per_minute: Maximum number of requests allowed per IP per minute.
        """
        super().__init__(app)
        self.requests_per_minute = requests_per_minute
        self.rate_limiter_store = store.MemoryStore()
        self.quota = None
        if requests_per_minute > 0:
            self.quota = rate_limiter.per_min(requests_per_minute, burst=requests_per_minute)
            logger.info(f"Rate limiting enabled: {requests_per_minute} requests per minute per IP")
        else:
            logger.info("Rate limiting disabled")

    def _extract_retry_after(self, result: Any) -> float:
        """Extract retry_after value from rate limit result."""
        retry_after: float = 60.0
        state = getattr(result, "state", None)
        if state is not None and hasattr(state, "retry_after"):
            retry_after = float(getattr(state, "retry_after", 60.0))
        elif hasattr(result, "retry_after"):
            retry_after = float(getattr(result, "retry_after", 60.0))
        return retry_after

    def _create_rate_limit_response(self, client_ip: str, retry_after: float) -> Response:
        logger.warning(f"Rate limit exceeded for IP {client_ip}, retry after {retry_after} seconds")
        return JSONResponse(
            {
                "error": "Too many requests",
                "message": "Rate limit exceeded. Please try again later.",
            },
            status_code=429,
            headers={"Retry-After": str(max(1, int(retry_after)))},
        )

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Process request and enforce rate limiting."""
        if self.quota is None:
            return await call_next(request)

        client_ip = extract_client_ip(request)
        throttle = Throttled(
            key=client_ip,
            using=RateLimiterType.TOKEN_BUCKET.value,
            quota=self.quota,
            store=self.rate_limiter_store,
        )

        result = throttle.limit()
        if result.limited:
            return self._create_rate_limit_response(client_ip, self._extract_retry_after(result))

        response: Response = await call_next(request)
        return response
