"""Connection liveness domain model."""

from enum import Enum


class ConnectionState(Enum):
    """Liveness of a streaming connection, mirroring the transport state."""

    OPEN = "open"
    CLOSING = "closing"
    CLOSED = "closed"
