"""Protocol for dispatching broadcast commands."""

from typing import Any, Protocol

from shocker_hub.domain.models.broadcast_outcome import BroadcastOutcome


class BroadcastDispatcherProtocol(Protocol):
    """Notifies subscribers and forwards a broadcast to the control API."""

    async def dispatch_broadcast(
        self, intensity: Any, duration: Any, kind: Any
    ) -> BroadcastOutcome:
        """Validate and dispatch one broadcast.

        Raises:
            ValidationError: If any parameter is missing or invalid.
        """
        ...
