"""Domain layer - models, validation, errors and contracts."""

from shocker_hub.domain.errors import (
    AuthorizationError,
    ConfigurationError,
    ConnectionClosedError,
    ForwardingError,
    MissingCredentialError,
    MissingDeviceIdsError,
    ShockerHubError,
    TransportError,
    ValidationError,
)

__all__ = [
    "AuthorizationError",
    "ConfigurationError",
    "ConnectionClosedError",
    "ForwardingError",
    "MissingCredentialError",
    "MissingDeviceIdsError",
    "ShockerHubError",
    "TransportError",
    "ValidationError",
]
