"""TLS key material adapters."""

from shocker_hub.adapters.tls.certificate_provider import FileCertificateProvider

__all__ = ["FileCertificateProvider"]
