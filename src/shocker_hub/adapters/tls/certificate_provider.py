"""Lookup of TLS key material on disk."""

import logging
from pathlib import Path

from shocker_hub.domain.errors import ConfigurationError
from shocker_hub.domain.models import KeyPair

logger = logging.getLogger(__name__)

FALLBACK_KEY_NAME = "private-key.pem"
FALLBACK_CERT_NAME = "certificate.pem"


class FileCertificateProvider:
    """Finds a key and certificate pair for a domain in a certificate directory.

    Domain-specific files (`{domain}-key.pem`, `{domain}-cert.pem`) win over
    the generic self-signed pair (`private-key.pem`, `certificate.pem`).
    """

    def __init__(self, cert_dir: str | Path) -> None:
        self._cert_dir = Path(cert_dir)

    def _candidates(self, domain: str) -> list[KeyPair]:
        return [
            KeyPair(
                key_path=self._cert_dir / f"{domain}-key.pem",
                cert_path=self._cert_dir / f"{domain}-cert.pem",
            ),
            KeyPair(
                key_path=self._cert_dir / FALLBACK_KEY_NAME,
                cert_path=self._cert_dir / FALLBACK_CERT_NAME,
            ),
        ]

    def get_key_pair(self, domain: str) -> KeyPair:
        """Return the first complete key pair for domain.

        Raises:
            ConfigurationError: If no complete pair exists.
        """
        for pair in self._candidates(domain):
            if pair.key_path.is_file() and pair.cert_path.is_file():
                logger.info(f"Using TLS certificate {pair.cert_path} for {domain}")
                return pair
        raise ConfigurationError(
            f"No TLS certificate available for {domain} in {self._cert_dir}"
        )
