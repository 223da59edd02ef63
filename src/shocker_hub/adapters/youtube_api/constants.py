"""Constants for the YouTube Data API."""

YOUTUBE_CHANNELS_URL = "https://www.googleapis.com/youtube/v3/channels"
YOUTUBE_CHANNEL_PARTS = "statistics,snippet"
