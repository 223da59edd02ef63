"""Protocol for TLS key material lookup."""

from typing import Protocol

from shocker_hub.domain.models.key_material import KeyPair


class CertificateProviderProtocol(Protocol):
    """Supplies a valid key and certificate pair for a domain."""

    def get_key_pair(self, domain: str) -> KeyPair:
        """Return key material for domain.

        Raises:
            ConfigurationError: If no usable material exists.
        """
        ...
