"""12-factor configuration adapter using environment variables and TOML config."""

import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from shocker_hub.domain.validation import is_valid_duration, is_valid_intensity

OPENSHOCK_CONTROL_URL = "https://api.openshock.app/2/shockers/control"

# TOML tables and the settings each may override
_TOML_SECTIONS: dict[str, tuple[str, ...]] = {
    "server": (
        "host",
        "http_port",
        "https_port",
        "https_enabled",
        "domain",
        "cert_dir",
        "api_keys_file",
        "api_key_generate_count",
        "cors_allow_origins",
        "rate_limit_per_minute",
    ),
    "forwarding": (
        "openshock_api_url",
        "openshock_shocker_ids",
        "openshock_custom_name",
        "openshock_timeout_seconds",
    ),
    "poll": (
        "youtube_channel_id",
        "youtube_timeout_seconds",
        "poll_interval_seconds",
        "broadcast_on_change",
        "broadcast_intensity",
        "broadcast_duration",
        "broadcast_type",
    ),
}


class AppConfig(BaseSettings):
    """Application configuration following 12-factor principles."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server configuration
    host: str = Field(default="0.0.0.0", description="Host to bind the servers to")
    http_port: int = Field(default=80, description="Port for the plain HTTP/WS listener")
    https_port: int = Field(default=443, description="Port for the HTTPS/WSS listener")
    https_enabled: bool = Field(
        default=False, description="Also serve HTTPS using key material from cert_dir"
    )
    domain: str = Field(default="localhost", description="Domain the certificate is issued for")
    cert_dir: str = Field(default="certs", description="Directory holding TLS key material")

    # API keys
    api_keys_file: str = Field(
        default="api-keys.txt", description="Newline-delimited file of authorized API keys"
    )
    api_key_generate_count: int = Field(
        default=5, description="Number of keys generated when the key file is missing"
    )

    # HTTP surface
    cors_allow_origins: list[str] = Field(
        default_factory=lambda: ["*"], description="Origins allowed by CORS"
    )
    rate_limit_per_minute: int = Field(
        default=100,
        description="Maximum number of requests allowed per IP address per minute (0 disables)",
    )

    # OpenShock forwarding
    openshock_api_url: str = Field(
        default=OPENSHOCK_CONTROL_URL, description="OpenShock control endpoint"
    )
    openshock_api_token: str | None = Field(
        default=None, description="Default forwarding token for subscribers that send none"
    )
    openshock_shocker_ids: str = Field(
        default="", description="Comma-separated default shocker IDs for subscribers"
    )
    openshock_custom_name: str = Field(
        default="shocker-hub broadcast", description="customName sent with control requests"
    )
    openshock_timeout_seconds: float = Field(
        default=10.0, description="Timeout for OpenShock API requests in seconds"
    )

    # YouTube polling
    youtube_api_key: str | None = Field(default=None, description="YouTube Data API key")
    youtube_channel_id: str | None = Field(default=None, description="Channel to poll")
    youtube_timeout_seconds: float = Field(
        default=10.0, description="Timeout for YouTube API requests in seconds"
    )
    poll_interval_seconds: float = Field(
        default=60.0, description="Interval between subscriber count polls in seconds"
    )
    broadcast_on_change: bool = Field(
        default=False, description="Broadcast when the subscriber count increases"
    )
    broadcast_intensity: int = Field(default=50, description="Intensity of change broadcasts")
    broadcast_duration: int = Field(
        default=1000, description="Duration of change broadcasts in milliseconds"
    )
    broadcast_type: str = Field(default="vibrate", description="'shock' or 'vibrate'")

    # Optional TOML file overriding the settings above
    config_file: str | None = Field(
        default=None, description="Path to TOML configuration file"
    )

    @field_validator("broadcast_type")
    @classmethod
    def validate_broadcast_type(cls, v: str) -> str:
        """Validate broadcast type is either 'shock' or 'vibrate'."""
        if v.lower() not in ("shock", "vibrate"):
            raise ValueError("broadcast_type must be either 'shock' or 'vibrate'")
        return v.lower()

    @field_validator("broadcast_intensity")
    @classmethod
    def validate_broadcast_intensity(cls, v: int) -> int:
        """Validate broadcast intensity is within 0..100."""
        if not is_valid_intensity(v):
            raise ValueError("broadcast_intensity must be between 0 and 100")
        return v

    @field_validator("broadcast_duration")
    @classmethod
    def validate_broadcast_duration(cls, v: int) -> int:
        """Validate broadcast duration is within 300..30000 milliseconds."""
        if not is_valid_duration(v):
            raise ValueError("broadcast_duration must be between 300 and 30000")
        return v

    @field_validator("poll_interval_seconds")
    @classmethod
    def validate_poll_interval(cls, v: float) -> float:
        """Validate poll interval is positive."""
        if v <= 0:
            raise ValueError("poll_interval_seconds must be positive")
        return v

    @classmethod
    def for_testing(cls, **overrides: Any) -> "AppConfig":
        """Build a config that ignores any local .env file."""
        return cls(_env_file=None, **overrides)  # type: ignore[call-arg]

    @property
    def default_shocker_ids(self) -> list[str]:
        """Default shocker IDs parsed from the comma-separated setting."""
        return [s.strip() for s in self.openshock_shocker_ids.split(",") if s.strip()]

    @property
    def youtube_enabled(self) -> bool:
        """Return True if subscriber count polling is configured."""
        return bool(self.youtube_api_key and self.youtube_channel_id)

    def load_toml_overrides(self) -> dict[str, Any]:
        """Load the TOML file and apply its [server], [forwarding] and [poll] tables.

        Returns:
            The parsed TOML data, or an empty dict if no file is configured.

        Raises:
            FileNotFoundError: If config_file is set but does not exist.
            ValueError: If a table is not a mapping or an override is invalid.
        """
        if not self.config_file:
            return {}

        config_path = Path(self.config_file)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, "rb") as f:
            toml_data = tomllib.load(f)

        overrides: dict[str, Any] = {}
        for section, keys in _TOML_SECTIONS.items():
            table = toml_data.get(section, {})
            if not isinstance(table, dict):
                raise ValueError(f"TOML config '{section}' must be a table")
            for key in keys:
                if key in table:
                    overrides[key] = table[key]

        if overrides:
            # Re-validate through the model so TOML values get the same checks as env values
            validated = self.model_validate({**self.model_dump(), **overrides})
            for key in overrides:
                setattr(self, key, getattr(validated, key))

        return toml_data
