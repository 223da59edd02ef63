"""Broadcast subscription domain model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Subscription:
    """Forwarding metadata attached to one streaming connection."""

    connection_id: str
    device_ids: tuple[str, ...]
    credential: str
    api_key: str | None = None
