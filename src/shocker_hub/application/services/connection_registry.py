"""Registry of all live streaming connections."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from shocker_hub.domain.errors import TransportError
from shocker_hub.domain.models import ConnectionState, Envelope

if TYPE_CHECKING:
    from shocker_hub.domain.contracts import ConnectionProtocol

logger = logging.getLogger(__name__)

RemovalListener = Callable[["ConnectionProtocol"], None]


class ConnectionRegistry:
    """Tracks every streaming connection, independent of subscription."""

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._connections: dict[str, ConnectionProtocol] = {}
        self._removal_listeners: list[RemovalListener] = []

    def add_removal_listener(self, listener: RemovalListener) -> None:
        """Register a callback fired whenever a connection is dropped."""
        self._removal_listeners.append(listener)

    @property
    def count(self) -> int:
        """Number of registered connections."""
        return len(self._connections)

    def connections(self) -> list[ConnectionProtocol]:
        """Snapshot of registered connections."""
        return list(self._connections.values())

    def contains(self, connection: ConnectionProtocol) -> bool:
        """Return True if the connection is registered."""
        return connection.connection_id in self._connections

    def register(self, connection: ConnectionProtocol) -> None:
        """Add a connection; registering twice is a no-op."""
        if connection.connection_id in self._connections:
            return
        self._connections[connection.connection_id] = connection
        logger.info(
            f"Connection {connection.connection_id} from {connection.remote_address} registered "
            f"({len(self._connections)} total)"
        )

    def unregister(self, connection: ConnectionProtocol) -> bool:
        """Remove a connection without notifying listeners.

        Returns:
            True if the connection was registered.
        """
        return self._connections.pop(connection.connection_id, None) is not None

    def drop(self, connection: ConnectionProtocol, reason: str = "closed") -> None:
        """Remove a connection and run the standard removal path.

        Used for close, transport error and failed sends alike, so that the
        subscription table never outlives the registry entry.
        """
        removed = self.unregister(connection)
        if removed:
            logger.info(
                f"Connection {connection.connection_id} from {connection.remote_address} "
                f"removed ({reason}, {len(self._connections)} remaining)"
            )
        for listener in list(self._removal_listeners):
            try:
                listener(connection)
            except Exception as e:
                logger.error(f"Connection removal listener failed: {e}", exc_info=True)

    async def broadcast_all(self, envelope: Envelope) -> int:
        """Send an envelope to every open connection.

        A failed send drops that connection; the remaining connections still
        receive the message.

        Returns:
            Number of connections the message was sent to.
        """
        payload = envelope.to_json()
        sent = 0
        for connection in self.connections():
            if connection.state is not ConnectionState.OPEN:
                continue
            try:
                await connection.send_text(payload)
                sent += 1
            except TransportError as e:
                logger.warning(f"Send to {connection.connection_id} failed: {e}")
                self.drop(connection, reason="send failed")
        return sent
