"""Protocol for device event notifications."""

from typing import Any, Protocol

from shocker_hub.domain.models.envelope import MessageType


class NotifierProtocol(Protocol):
    """Sends device events to every streaming connection."""

    async def notify_all(self, kind: MessageType, data: dict[str, Any] | None = None) -> int:
        """Send an event envelope to all connections.

        Returns:
            Number of connections the envelope was sent to.
        """
        ...
