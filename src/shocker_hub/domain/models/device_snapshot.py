"""Device state snapshot domain model."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class DeviceSnapshot(BaseModel):
    """Read-only copy of the shared device record."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    is_on: bool = False
    intensity: int = 0
    duration_ms: int = 0
    last_activated_at: datetime | None = None

    def to_json(self) -> dict[str, Any]:
        """Serialize with camelCase keys and ISO-8601 timestamps."""
        return self.model_dump(mode="json", by_alias=True)
