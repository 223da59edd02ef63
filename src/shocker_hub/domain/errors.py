"""Domain error taxonomy."""


class ShockerHubError(Exception):
    """Base class for all hub errors."""


class ValidationError(ShockerHubError):
    """Invalid or missing user input.

    Always recoverable and reported to the caller as a 400-equivalent.
    """

    error = "Invalid request"

    def __init__(self, message: str, field: str | None = None, error: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field
        if error is not None:
            self.error = error


class MissingDeviceIdsError(ValidationError):
    """Subscription request resolved to an empty device list."""

    def __init__(self) -> None:
        super().__init__(
            "At least one shocker ID is required to subscribe",
            field="shockers",
            error="Missing shockers",
        )


class MissingCredentialError(ValidationError):
    """Subscription request without a forwarding credential."""

    def __init__(self) -> None:
        super().__init__(
            "An OpenShock API token is required to subscribe",
            field="openshockToken",
            error="Missing token",
        )


class AuthorizationError(ShockerHubError):
    """Presented credential is not in the authorized key set."""

    def __init__(self, message: str = "Valid API key is required") -> None:
        super().__init__(message)
        self.message = message


class ForwardingError(ShockerHubError):
    """The external control API could not be reached or answered garbage."""


class TransportError(ShockerHubError):
    """Sending to a streaming connection failed."""


class ConnectionClosedError(TransportError):
    """The streaming connection is no longer open."""


class ConfigurationError(ShockerHubError):
    """Required configuration or on-disk material is missing."""
