"""Protocol for the authorized API key set."""

from typing import Protocol

from shocker_hub.domain.models.key_material import KeyDescription


class CredentialStoreProtocol(Protocol):
    """Membership check against the authorized key set."""

    def is_authorized(self, token: object) -> bool:
        """Return True if token is an authorized key."""
        ...

    def describe_keys(self) -> list[KeyDescription]:
        """List authorized keys for the admin endpoint."""
        ...
