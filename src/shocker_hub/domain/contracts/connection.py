"""Protocol for streaming connections."""

from typing import Protocol

from shocker_hub.domain.models.connection_state import ConnectionState


class ConnectionProtocol(Protocol):
    """A live streaming session as seen by the hub."""

    @property
    def connection_id(self) -> str:
        """Opaque identity, stable for the lifetime of the connection."""
        ...

    @property
    def state(self) -> ConnectionState:
        """Current liveness of the underlying transport."""
        ...

    @property
    def remote_address(self) -> str:
        """Client address for logging."""
        ...

    async def send_text(self, text: str) -> None:
        """Send one text frame.

        Raises:
            ConnectionClosedError: If the transport is no longer usable.
        """
        ...
