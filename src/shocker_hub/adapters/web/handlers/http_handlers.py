"""HTTP route handlers for the hub's JSON API."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from starlette.responses import JSONResponse

from shocker_hub.domain.errors import ValidationError
from shocker_hub.domain.models import MessageType, utc_timestamp
from shocker_hub.domain.validation import is_missing

if TYPE_CHECKING:
    from starlette.requests import Request

    from shocker_hub.domain.contracts import (
        BroadcastDispatcherProtocol,
        CredentialStoreProtocol,
        DeviceControllerProtocol,
        NotifierProtocol,
    )

logger = logging.getLogger(__name__)


class InvalidBodyError(Exception):
    """Request body is not valid JSON."""


def error_response(status_code: int, error: str, message: str, **extra: Any) -> JSONResponse:
    """Build the `{error, message}` body used by every failing route."""
    return JSONResponse({**extra, "error": error, "message": message}, status_code=status_code)


def unauthorized_response() -> JSONResponse:
    return error_response(401, "Unauthorized", "Valid API key is required")


async def read_json_body(request: Request) -> dict[str, Any]:
    """Parse the request body as a JSON object.

    An empty body reads as an empty object; a JSON value that is not an
    object is treated the same way.

    Raises:
        InvalidBodyError: If the body is not valid JSON.
    """
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        body = await request.json()
    except ValueError as e:
        raise InvalidBodyError(str(e)) from e
    return body if isinstance(body, dict) else {}


class HttpHandlers:
    """Route handlers bound to the hub's services."""

    def __init__(
        self,
        device: DeviceControllerProtocol,
        notifier: NotifierProtocol,
        dispatcher: BroadcastDispatcherProtocol,
        credentials: CredentialStoreProtocol,
    ) -> None:
        self._device = device
        self._notifier = notifier
        self._dispatcher = dispatcher
        self._credentials = credentials

    async def health(self, _request: Request) -> JSONResponse:
        """Health check endpoint for load balancers and monitoring."""
        return JSONResponse(
            {
                "status": "OK",
                "timestamp": utc_timestamp(),
                "shocker": self._device.snapshot().to_json(),
            }
        )

    async def status(self, _request: Request) -> JSONResponse:
        return JSONResponse(self._device.snapshot().to_json())

    async def activate(self, request: Request) -> JSONResponse:
        """Switch the device on and tell every connection about it."""
        body = await read_json_body(request)
        intensity = body.get("intensity")
        duration = body.get("time")
        if is_missing(intensity) or is_missing(duration):
            return error_response(
                400, "Missing required parameters", "Both intensity and time are required"
            )

        try:
            snapshot = self._device.activate(intensity, duration)
        except ValidationError as e:
            return error_response(400, e.error, e.message)

        logger.info(
            f"Shocker activated: {snapshot.intensity}% intensity for {snapshot.duration_ms}ms"
        )
        await self._notifier.notify_all(MessageType.SHOCK_ACTIVATED, snapshot.to_json())
        return JSONResponse(
            {"success": True, "message": "Shocker activated", "shocker": snapshot.to_json()}
        )

    async def stop(self, _request: Request) -> JSONResponse:
        snapshot = self._device.stop()
        logger.info("Shocker stopped")
        await self._notifier.notify_all(MessageType.SHOCK_STOPPED, snapshot.to_json())
        return JSONResponse(
            {"success": True, "message": "Shocker stopped", "shocker": snapshot.to_json()}
        )

    async def broadcast(self, request: Request) -> JSONResponse:
        """Broadcast to subscribers and forward to the control API.

        Returns 401 for an unknown key, 400 for invalid parameters and 500
        if dispatch fails unexpectedly.
        """
        body = await read_json_body(request)
        if not self._credentials.is_authorized(body.get("apiKey")):
            logger.warning("Rejected broadcast request with missing or invalid API key")
            return unauthorized_response()

        try:
            outcome = await self._dispatcher.dispatch_broadcast(
                body.get("intensity"), body.get("duration"), body.get("type")
            )
        except ValidationError as e:
            return error_response(400, e.error, e.message, success=False)
        except Exception as e:
            logger.error(f"Broadcast failed: {e}", exc_info=True)
            return error_response(
                500, "Broadcast failed", "Failed to send broadcast message", success=False
            )

        return JSONResponse(
            {
                "success": True,
                "message": "Broadcast sent to all broadcast subscribers",
                "broadcast": outcome.to_json(),
            }
        )

    async def admin_keys(self, request: Request) -> JSONResponse:
        """List authorized API keys; the caller must present one of them."""
        if not self._credentials.is_authorized(request.query_params.get("apiKey")):
            logger.warning("Rejected admin key listing with missing or invalid API key")
            return unauthorized_response()

        keys = self._credentials.describe_keys()
        return JSONResponse(
            {
                "success": True,
                "count": len(keys),
                "keys": [key.model_dump() for key in keys],
            }
        )
