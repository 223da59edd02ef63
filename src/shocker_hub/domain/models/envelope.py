"""Streaming message envelope domain models."""

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class MessageType(StrEnum):
    """Message kinds exchanged over streaming connections."""

    PING = "ping"
    PONG = "pong"
    STATUS = "status"
    SHOCK_ACTIVATED = "shock_activated"
    SHOCK_STOPPED = "shock_stopped"
    BROADCAST = "broadcast"
    ERROR = "error"
    SUBSCRIBE_BROADCAST = "subscribe_broadcast"
    UNSUBSCRIBE_BROADCAST = "unsubscribe_broadcast"
    SUBSCRIBED = "subscribed"
    UNSUBSCRIBED = "unsubscribed"


class BroadcastKind(StrEnum):
    """Effect requested by a broadcast."""

    SHOCK = "shock"
    VIBRATE = "vibrate"


def utc_timestamp() -> str:
    """Current time as an ISO-8601 string with millisecond precision."""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class Envelope(BaseModel):
    """Outbound message sent to streaming connections."""

    model_config = ConfigDict(frozen=True)

    type: MessageType
    data: dict[str, Any] | None = None
    message: str | None = None
    shockers: list[str] | None = None
    timestamp: str = Field(default_factory=utc_timestamp)

    def to_json(self) -> str:
        """Serialize once for fan-out."""
        return self.model_dump_json(exclude_none=True)


class InboundMessage(BaseModel):
    """Message received from a streaming connection.

    `type` is kept as a raw string so that unknown kinds can be reported
    back to the sender instead of failing validation.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    type: str | None = None
    shockers: Any = None
    openshock_token: str | None = Field(default=None, alias="openshockToken")
    api_key: str | None = Field(default=None, alias="apiKey")

    def message_type(self) -> MessageType | None:
        """Return the parsed message type, or None if unknown."""
        try:
            return MessageType(self.type) if self.type is not None else None
        except ValueError:
            return None
