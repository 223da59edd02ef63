"""API key credential adapters."""

from shocker_hub.adapters.credentials.file_credential_store import (
    FileCredentialStore,
    generate_keys,
    preview_key,
    read_keys,
    write_keys,
)

__all__ = ["FileCredentialStore", "generate_keys", "preview_key", "read_keys", "write_keys"]
