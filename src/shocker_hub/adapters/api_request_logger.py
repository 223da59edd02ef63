"""Utility for logging outbound API requests when SHOCKER_HUB_LOG_REQUESTS is enabled."""

import json
import logging
import os
from typing import Any

logger = logging.getLogger(__name__)

_SENSITIVE_HEADERS = {"authorization", "cookie", "x-api-key", "open-shock-token"}
_SENSITIVE_PARAMS = {"key", "apikey", "api_key"}


def should_log_requests() -> bool:
    """Check if request logging is enabled via SHOCKER_HUB_LOG_REQUESTS."""
    return os.getenv("SHOCKER_HUB_LOG_REQUESTS", "").lower() == "true"


def _redact(mapping: dict[str, Any], sensitive: set[str]) -> dict[str, Any]:
    return {k: "***REDACTED***" if k.lower() in sensitive else v for k, v in mapping.items()}


def _build_url_with_params(url: str, params: dict[str, Any] | None) -> str:
    """Build full URL with (redacted) query parameters."""
    if not params:
        return url
    safe_params = _redact(params, _SENSITIVE_PARAMS)
    param_str = "&".join(f"{k}={v}" for k, v in sorted(safe_params.items()))
    return f"{url}?{param_str}" if "?" not in url else f"{url}&{param_str}"


def _format_payload(payload: Any) -> str:
    try:
        return json.dumps(payload, indent=2) if isinstance(payload, dict) else str(payload)
    except (TypeError, ValueError):
        return str(payload)


def log_api_request(
    method: str,
    url: str,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
    payload: Any = None,
) -> None:
    """Log API request details if SHOCKER_HUB_LOG_REQUESTS is enabled.

    Credential headers and key query parameters are always redacted.

    Args:
        method: HTTP method (GET, POST, etc.).
        url: Request URL.
        params: Query parameters (optional).
        headers: Request headers (optional).
        payload: Request payload/body (optional).
    """
    if not should_log_requests():
        return

    log_parts = [f"{method} {_build_url_with_params(url, params)}"]

    if headers:
        log_parts.append(f"Headers: {json.dumps(_redact(headers, _SENSITIVE_HEADERS), indent=2)}")

    if payload is not None:
        log_parts.append(f"Payload: {_format_payload(payload)}")

    logger.info("API Request:\n" + "\n".join(log_parts))


def log_api_response(url: str, status: int, body_preview: str) -> None:
    """Log a response status and body preview if request logging is enabled."""
    if not should_log_requests():
        return
    logger.info(f"API Response: {status} from {url}: {body_preview or '(empty response body)'}")
