"""Subscription table: the broadcast coordinator.

Maps each subscribed streaming connection to its forwarding metadata
(target device IDs and forwarding credential). Every mutation, including
opportunistic pruning of connections found closed, triggers an edge check
so that listeners (the poll supervisor) can react when the set of active
subscribers becomes empty or non-empty.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any

from shocker_hub.domain.errors import MissingCredentialError, MissingDeviceIdsError
from shocker_hub.domain.models import ConnectionState, Subscription

if TYPE_CHECKING:
    from shocker_hub.domain.contracts import ConnectionProtocol

logger = logging.getLogger(__name__)

EdgeListener = Callable[[], None]


def normalize_device_ids(raw: Any) -> list[str]:
    """Normalize a device ID list or comma-delimited string.

    Entries are trimmed, blanks dropped and duplicates removed while keeping
    the first occurrence's position.
    """
    if isinstance(raw, str):
        candidates: Iterable[Any] = raw.split(",")
    elif isinstance(raw, list | tuple | set):
        candidates = raw
    else:
        return []

    result: list[str] = []
    for item in candidates:
        if item is None:
            continue
        device_id = str(item).strip()
        if device_id and device_id not in result:
            result.append(device_id)
    return result


class SubscriptionTable:
    """Tracks which connections receive broadcasts and where to forward them."""

    def __init__(
        self,
        default_device_ids: list[str] | None = None,
        default_credential: str | None = None,
    ) -> None:
        """Initialize the table.

        Args:
            default_device_ids: Device IDs used when a subscriber provides none.
            default_credential: Forwarding credential used when a subscriber
                provides none.
        """
        self._entries: dict[str, tuple[ConnectionProtocol, Subscription]] = {}
        self._listeners: list[EdgeListener] = []
        self._default_device_ids = normalize_device_ids(default_device_ids or [])
        self._default_credential = default_credential

    def add_listener(self, listener: EdgeListener) -> None:
        """Register a callback invoked on every subscriber-set change."""
        self._listeners.append(listener)

    def __len__(self) -> int:
        return len(self._entries)

    def is_subscribed(self, connection: ConnectionProtocol) -> bool:
        """Return True if the connection has a subscription entry."""
        return connection.connection_id in self._entries

    def get(self, connection: ConnectionProtocol) -> Subscription | None:
        """Return the subscription for a connection, if any."""
        entry = self._entries.get(connection.connection_id)
        return entry[1] if entry else None

    def subscribe(
        self,
        connection: ConnectionProtocol,
        device_ids: Any,
        credential: str | None,
        api_key: str | None = None,
    ) -> list[str]:
        """Insert or overwrite the subscription for a connection.

        Returns:
            The normalized device ID list, for acknowledgment.

        Raises:
            MissingDeviceIdsError: If no device IDs resolve.
            MissingCredentialError: If no forwarding credential resolves.
        """
        resolved_ids = normalize_device_ids(device_ids) or list(self._default_device_ids)
        if not resolved_ids:
            raise MissingDeviceIdsError()

        resolved_credential = (credential or "").strip() or (self._default_credential or "").strip()
        if not resolved_credential:
            raise MissingCredentialError()

        subscription = Subscription(
            connection_id=connection.connection_id,
            device_ids=tuple(resolved_ids),
            credential=resolved_credential,
            api_key=api_key,
        )
        self._entries[connection.connection_id] = (connection, subscription)
        logger.info(
            f"Client {connection.remote_address} subscribed to broadcasts with "
            f"{len(resolved_ids)} shocker(s) ({len(self._entries)} total)"
        )
        self._notify_listeners()
        return resolved_ids

    def unsubscribe(self, connection: ConnectionProtocol) -> bool:
        """Remove the subscription for a connection.

        Returns:
            True if the connection was subscribed.
        """
        removed = self._remove(connection.connection_id)
        if removed:
            logger.info(
                f"Client {connection.remote_address} unsubscribed from broadcasts "
                f"({len(self._entries)} remaining)"
            )
        self._notify_listeners()
        return removed

    def remove_on_disconnect(self, connection: ConnectionProtocol) -> None:
        """Silently remove a closed connection's subscription."""
        if self._remove(connection.connection_id):
            logger.info(f"Removed from broadcast subscribers ({len(self._entries)} remaining)")
        self._notify_listeners()

    def has_active_subscribers(self) -> bool:
        """Return True if at least one subscribed connection is open.

        Stale entries are pruned on the way; listeners are not notified here
        because this predicate is what the edge check itself evaluates.
        """
        self._prune_closed()
        return bool(self._entries)

    def active_entries(self) -> list[tuple[ConnectionProtocol, Subscription]]:
        """Snapshot of open subscribed connections with their metadata."""
        if self._prune_closed():
            self._notify_listeners()
        return list(self._entries.values())

    def group_by_credential(self) -> dict[str, set[str]]:
        """Union device IDs per forwarding credential.

        Recomputed on every call from the open subscribers; the returned
        mapping is an independent copy.
        """
        groups: dict[str, set[str]] = {}
        for _connection, subscription in self.active_entries():
            groups.setdefault(subscription.credential, set()).update(subscription.device_ids)
        return groups

    def _remove(self, connection_id: str) -> bool:
        return self._entries.pop(connection_id, None) is not None

    def _prune_closed(self) -> int:
        stale = [
            connection_id
            for connection_id, (connection, _subscription) in self._entries.items()
            if connection.state is not ConnectionState.OPEN
        ]
        for connection_id in stale:
            del self._entries[connection_id]
        if stale:
            logger.info(
                f"Pruned {len(stale)} stale broadcast subscriber(s) "
                f"({len(self._entries)} remaining)"
            )
        return len(stale)

    def _notify_listeners(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception as e:
                logger.error(f"Subscriber edge listener failed: {e}", exc_info=True)
