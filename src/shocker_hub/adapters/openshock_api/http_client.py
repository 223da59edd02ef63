"""HTTP client for the OpenShock control API.

API Documentation: https://api.openshock.app/
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import TYPE_CHECKING, Any

import aiohttp

from shocker_hub.adapters.api_request_logger import log_api_request, log_api_response
from shocker_hub.domain.errors import ForwardingError
from shocker_hub.domain.models import BroadcastKind, ForwardingResult

if TYPE_CHECKING:
    from aiohttp import ClientSession

logger = logging.getLogger(__name__)

# Longest raw body excerpt surfaced when a response cannot be parsed
BODY_PREVIEW_LENGTH = 200


def _preview(body: str) -> str:
    if len(body) <= BODY_PREVIEW_LENGTH:
        return body
    return f"{body[:BODY_PREVIEW_LENGTH]}..."


def _looks_like_json(content_type: str, body: str) -> bool:
    return "json" in content_type.lower() or body[:1] in ("{", "[")


def classify_response(
    status: int, content_type: str, body: str, device_ids: list[str]
) -> ForwardingResult:
    """Classify a control API response.

    - Empty body: 2xx is success, anything else a generic failure.
    - JSON (by content type or leading brace/bracket): surfaced verbatim as
      data on success and as the error on failure.
    - Non-JSON or unparseable: a truncated preview of the raw body is
      surfaced instead of being discarded.
    """
    success = 200 <= status < 300
    text = body.strip()

    if not text:
        if success:
            return ForwardingResult(
                enabled=True, success=True, status_code=status, device_ids=device_ids, data={}
            )
        return ForwardingResult(
            enabled=True,
            success=False,
            status_code=status,
            device_ids=device_ids,
            error={"message": "Unknown error"},
        )

    parsed: Any = None
    parse_failed = True
    if _looks_like_json(content_type, text):
        try:
            parsed = json.loads(text)
            parse_failed = False
        except ValueError:
            logger.warning(f"OpenShock API returned unparseable JSON (HTTP {status})")

    if parse_failed:
        preview = _preview(text)
        if success:
            return ForwardingResult(
                enabled=True,
                success=True,
                status_code=status,
                device_ids=device_ids,
                data={"raw": preview},
            )
        return ForwardingResult(
            enabled=True,
            success=False,
            status_code=status,
            device_ids=device_ids,
            error={"message": f"Non-JSON response (HTTP {status}): {preview}"},
        )

    if success:
        return ForwardingResult(
            enabled=True, success=True, status_code=status, device_ids=device_ids, data=parsed
        )
    return ForwardingResult(
        enabled=True, success=False, status_code=status, device_ids=device_ids, error=parsed
    )


class OpenShockHttpClient:
    """Sends control requests to OpenShock, one request per token."""

    def __init__(
        self,
        session: ClientSession | None,
        api_url: str | None,
        custom_name: str = "shocker-hub broadcast",
        timeout_seconds: float = 10.0,
    ) -> None:
        """Initialize the client.

        Args:
            session: Shared aiohttp session; None disables forwarding.
            api_url: Control endpoint URL; empty disables forwarding.
            custom_name: Name shown in the OpenShock activity log.
            timeout_seconds: Total timeout for each request.
        """
        self._session = session
        self._api_url = api_url
        self._custom_name = custom_name
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    def build_payload(
        self, device_ids: list[str], intensity: int, duration: int, kind: BroadcastKind
    ) -> dict[str, Any]:
        """Build the control request body."""
        return {
            "shocks": [
                {
                    "id": device_id,
                    "type": kind.value,
                    "intensity": intensity,
                    "duration": duration,
                    "exclusive": True,
                }
                for device_id in device_ids
            ],
            "customName": self._custom_name,
        }

    async def send_control(
        self,
        credential: str,
        device_ids: list[str],
        intensity: int,
        duration: int,
        kind: BroadcastKind,
    ) -> ForwardingResult:
        """Send one control request for device_ids using credential.

        Raises:
            ForwardingError: If the request could not be completed.
        """
        if self._session is None or not self._api_url:
            return ForwardingResult.disabled("OpenShock API not configured")
        if not device_ids:
            return ForwardingResult.disabled("No shockers specified")

        payload = self.build_payload(device_ids, intensity, duration, kind)
        headers = {
            "Open-Shock-Token": credential,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        log_api_request("POST", self._api_url, headers=headers, payload=payload)

        try:
            async with self._session.post(
                self._api_url, json=payload, headers=headers, timeout=self._timeout
            ) as response:
                body = await response.text()
                content_type = response.headers.get("Content-Type", "")
                log_api_response(self._api_url, response.status, _preview(body))
                return classify_response(response.status, content_type, body, device_ids)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ForwardingError(
                f"OpenShock API request failed: {type(e).__name__}: {e}"
            ) from e
