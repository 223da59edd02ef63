"""Protocols for streaming connection lifecycle and inbound frames."""

from typing import Protocol

from shocker_hub.domain.contracts.connection import ConnectionProtocol
from shocker_hub.domain.models.envelope import Envelope


class StreamHandlerProtocol(Protocol):
    """Turns one inbound text frame into a reply envelope."""

    def handle_text(self, connection: ConnectionProtocol, text: str) -> Envelope:
        """Handle a frame; malformed input yields an error envelope."""
        ...


class ConnectionTrackerProtocol(Protocol):
    """Tracks live streaming connections."""

    def register(self, connection: ConnectionProtocol) -> None:
        """Start tracking a newly accepted connection."""
        ...

    def drop(self, connection: ConnectionProtocol, reason: str = "closed") -> None:
        """Stop tracking a connection and release everything tied to it."""
        ...
