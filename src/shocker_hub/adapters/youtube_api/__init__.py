"""YouTube Data API adapter."""

from shocker_hub.adapters.youtube_api.channel_statistics_source import (
    YouTubeApiError,
    YouTubeChannelStatisticsSource,
    parse_channel_statistics,
)

__all__ = ["YouTubeApiError", "YouTubeChannelStatisticsSource", "parse_channel_statistics"]
