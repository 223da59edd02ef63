"""Fan-out of notification envelopes to streaming connections."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from shocker_hub.domain.errors import TransportError
from shocker_hub.domain.models import Envelope, MessageType

if TYPE_CHECKING:
    from shocker_hub.application.services.connection_registry import ConnectionRegistry
    from shocker_hub.application.services.subscription_table import SubscriptionTable

logger = logging.getLogger(__name__)


def build_envelope(kind: MessageType, data: dict[str, Any] | None = None, **extra: Any) -> Envelope:
    """Create a timestamped envelope of the given kind."""
    return Envelope(type=kind, data=data, **extra)


class BroadcastEngine:
    """Delivers envelopes to all connections or only to subscribers."""

    def __init__(self, registry: ConnectionRegistry, subscriptions: SubscriptionTable) -> None:
        """Initialize the engine.

        Args:
            registry: Every live streaming connection.
            subscriptions: Connections subscribed to broadcasts.
        """
        self._registry = registry
        self._subscriptions = subscriptions

    async def notify_all(self, kind: MessageType, data: dict[str, Any] | None = None) -> int:
        """Send a device event to every connection, subscribed or not."""
        sent = await self._registry.broadcast_all(build_envelope(kind, data))
        logger.debug(f"Sent {kind.value} to {sent} connection(s)")
        return sent

    async def notify_subscribers(
        self, kind: MessageType, data: dict[str, Any] | None = None
    ) -> int:
        """Send an envelope to open subscribed connections only.

        A failed send is treated as a disconnect: the connection is dropped
        from the registry, which also removes its subscription.

        Returns:
            Number of subscribers the envelope was sent to.
        """
        payload = build_envelope(kind, data).to_json()
        sent = 0
        for connection, _subscription in self._subscriptions.active_entries():
            try:
                await connection.send_text(payload)
                sent += 1
            except TransportError as e:
                logger.error(
                    f"Error sending to broadcast subscriber {connection.connection_id}: {e}"
                )
                self._registry.drop(connection, reason="send failed")
        return sent
