"""Credential and TLS key material domain models."""

from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict


class KeyDescription(BaseModel):
    """Admin listing entry for one authorized API key."""

    model_config = ConfigDict(frozen=True)

    id: int
    key: str
    preview: str


@dataclass(frozen=True)
class KeyPair:
    """Paths to a TLS private key and its certificate."""

    key_path: Path
    cert_path: Path
