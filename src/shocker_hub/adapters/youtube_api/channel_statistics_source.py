"""Subscriber count source backed by the YouTube Data API v3.

API Documentation: https://developers.google.com/youtube/v3/docs/channels/list
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

import aiohttp

from shocker_hub.adapters.api_request_logger import log_api_request
from shocker_hub.adapters.youtube_api.constants import (
    YOUTUBE_CHANNEL_PARTS,
    YOUTUBE_CHANNELS_URL,
)
from shocker_hub.domain.errors import ShockerHubError
from shocker_hub.domain.models import ChannelStatistics

if TYPE_CHECKING:
    from aiohttp import ClientSession

logger = logging.getLogger(__name__)


class YouTubeApiError(ShockerHubError):
    """The YouTube API could not be reached or returned an unusable response."""


def _as_int(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def parse_channel_statistics(data: Any) -> ChannelStatistics:
    """Extract statistics for the first channel in a channels.list response.

    Raises:
        YouTubeApiError: If the response reports an error, lists no channel
            or lacks a subscriber count.
    """
    if not isinstance(data, dict):
        raise YouTubeApiError("Failed to parse YouTube API response: not a JSON object")

    error = data.get("error")
    if error:
        message = error.get("message") if isinstance(error, dict) else None
        raise YouTubeApiError(f"YouTube API Error: {message or 'Unknown error'}")

    items = data.get("items") or []
    if not items:
        raise YouTubeApiError("Channel not found")

    channel = items[0]
    statistics = channel.get("statistics") or {}
    subscriber_count = _as_int(statistics.get("subscriberCount"))
    if subscriber_count is None:
        raise YouTubeApiError("Failed to parse YouTube API response: missing subscriberCount")

    return ChannelStatistics(
        subscriber_count=subscriber_count,
        channel_name=(channel.get("snippet") or {}).get("title", ""),
        view_count=_as_int(statistics.get("viewCount")),
        video_count=_as_int(statistics.get("videoCount")),
    )


class YouTubeChannelStatisticsSource:
    """Fetches subscriber statistics for one channel."""

    def __init__(
        self,
        session: ClientSession,
        api_key: str,
        channel_id: str,
        timeout_seconds: float = 10.0,
    ) -> None:
        self._session = session
        self._api_key = api_key
        self._channel_id = channel_id
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    @property
    def channel_id(self) -> str:
        return self._channel_id

    async def fetch(self) -> ChannelStatistics:
        """Fetch current statistics for the configured channel.

        Raises:
            YouTubeApiError: On network failure, timeout or a bad response.
        """
        params = {
            "part": YOUTUBE_CHANNEL_PARTS,
            "id": self._channel_id,
            "key": self._api_key,
        }
        log_api_request("GET", YOUTUBE_CHANNELS_URL, params=params)

        try:
            async with self._session.get(
                YOUTUBE_CHANNELS_URL, params=params, timeout=self._timeout
            ) as response:
                try:
                    data = await response.json(content_type=None)
                except ValueError as e:
                    raise YouTubeApiError(f"Failed to parse YouTube API response: {e}") from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise YouTubeApiError(f"Failed to fetch YouTube data: {e}") from e

        return parse_channel_statistics(data)
