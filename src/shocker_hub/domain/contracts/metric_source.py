"""Protocol for the externally polled counter metric."""

from typing import Protocol

from shocker_hub.domain.models.channel_statistics import ChannelStatistics


class MetricSourceProtocol(Protocol):
    """Fetches the current value of an external counter."""

    async def fetch(self) -> ChannelStatistics:
        """Fetch the current statistics.

        Raises:
            Exception: Any network or parse error; callers log and skip.
        """
        ...
