"""File-backed store of authorized API keys."""

import logging
import secrets
from pathlib import Path

from shocker_hub.domain.errors import ConfigurationError
from shocker_hub.domain.models import KeyDescription

logger = logging.getLogger(__name__)

# 32 random bytes, hex encoded to 64 characters
KEY_BYTES = 32


def generate_keys(count: int = 10) -> list[str]:
    """Generate count fresh hex API keys."""
    if count < 1:
        raise ValueError("count must be at least 1")
    return [secrets.token_hex(KEY_BYTES) for _ in range(count)]


def preview_key(key: str) -> str:
    """Shorten a key to its first and last 8 characters."""
    return f"{key[:8]}...{key[-8:]}"


def read_keys(path: Path) -> list[str]:
    """Read newline-delimited keys, ignoring blank lines.

    Raises:
        OSError: If the file cannot be read.
    """
    text = path.read_text(encoding="utf-8")
    return [line.strip() for line in text.splitlines() if line.strip()]


def write_keys(path: Path, keys: list[str]) -> None:
    """Write keys one per line, creating parent directories as needed.

    Raises:
        OSError: If the file cannot be written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(keys) + "\n", encoding="utf-8")


class FileCredentialStore:
    """Authorized key set loaded once at startup from a flat file."""

    def __init__(self, path: str | Path, generate_count: int = 5) -> None:
        self._path = Path(path)
        self._generate_count = generate_count
        self._keys: list[str] = []
        self._key_set: frozenset[str] = frozenset()

    @property
    def path(self) -> Path:
        return self._path

    def load_or_generate(self) -> frozenset[str]:
        """Load the key file, generating and persisting keys when it has none.

        Raises:
            ConfigurationError: If generated keys cannot be written.
        """
        keys: list[str] = []
        if self._path.exists():
            try:
                keys = read_keys(self._path)
            except OSError as e:
                logger.warning(f"Could not read API keys from {self._path}: {e}")

        if keys:
            logger.info(f"Loaded {len(keys)} API key(s) from {self._path}")
        else:
            keys = generate_keys(self._generate_count)
            try:
                write_keys(self._path, keys)
            except OSError as e:
                raise ConfigurationError(
                    f"Failed to write generated API keys to {self._path}: {e}"
                ) from e
            logger.info(f"Generated {len(keys)} new API key(s) and saved them to {self._path}")

        # Duplicate lines collapse in the set but keep their first position for listing
        self._keys = list(dict.fromkeys(keys))
        self._key_set = frozenset(self._keys)
        return self._key_set

    def is_authorized(self, token: object) -> bool:
        if not isinstance(token, str) or not token.strip():
            return False
        return token in self._key_set

    def describe_keys(self) -> list[KeyDescription]:
        return [
            KeyDescription(id=index, key=key, preview=preview_key(key))
            for index, key in enumerate(self._keys, start=1)
        ]
