"""Forwarding result domain models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ForwardingResult(BaseModel):
    """Outcome of one outbound control API call.

    `enabled=False` means forwarding is not configured and nothing was sent.
    `enabled=True, success=False` means the request did not succeed: either
    the API answered with an error, or `transport_failed` is set because the
    call never got an answer.
    """

    model_config = ConfigDict(frozen=True)

    enabled: bool
    success: bool = False
    status_code: int | None = None
    device_ids: list[str] = Field(default_factory=list)
    data: Any = None
    error: Any = None
    message: str | None = None
    transport_failed: bool = False

    @classmethod
    def disabled(cls, message: str) -> "ForwardingResult":
        """Result for a call that was never attempted."""
        return cls(enabled=False, message=message)

    def error_message(self) -> str:
        """Best-effort human-readable error text."""
        if isinstance(self.error, dict) and self.error.get("message"):
            return str(self.error["message"])
        if self.error:
            return str(self.error)
        return self.message or "Unknown error"

    def to_json(self) -> dict[str, Any]:
        """Public representation; never carries the credential."""
        result: dict[str, Any] = {
            "enabled": self.enabled,
            "success": self.success,
            "shockers": len(self.device_ids),
        }
        if self.status_code is not None:
            result["statusCode"] = self.status_code
        if self.enabled and not self.success:
            result["error"] = self.error_message()
        if self.transport_failed:
            result["transportError"] = True
        if not self.enabled and self.message:
            result["message"] = self.message
        return result
