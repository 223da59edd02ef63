"""Broadcast outcome domain model."""

from dataclasses import dataclass, field
from typing import Any

from shocker_hub.domain.models.envelope import BroadcastKind
from shocker_hub.domain.models.forwarding_result import ForwardingResult


@dataclass(frozen=True)
class BroadcastOutcome:
    """Result of a validated broadcast dispatch."""

    intensity: int
    duration: int
    kind: BroadcastKind
    subscribers: int
    sent: int
    forwarding: list[ForwardingResult] = field(default_factory=list)

    def to_json(self) -> dict[str, Any]:
        """Serialize for the HTTP response body."""
        return {
            "intensity": self.intensity,
            "duration": self.duration,
            "type": self.kind.value,
            "subscribers": self.subscribers,
            "sent": self.sent,
            "forwarding": [result.to_json() for result in self.forwarding],
        }
