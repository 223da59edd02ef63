"""Channel statistics domain model."""

from pydantic import BaseModel, ConfigDict


class ChannelStatistics(BaseModel):
    """Counter metric observed by the external poll."""

    model_config = ConfigDict(frozen=True)

    subscriber_count: int
    channel_name: str = ""
    view_count: int | None = None
    video_count: int | None = None
