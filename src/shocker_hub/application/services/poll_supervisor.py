"""Supervisor for the periodic external metric poll."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from shocker_hub.domain.models import BroadcastKind

if TYPE_CHECKING:
    from shocker_hub.application.services.forwarding_dispatcher import ForwardingDispatcher
    from shocker_hub.application.services.subscription_table import SubscriptionTable
    from shocker_hub.domain.contracts import MetricSourceProtocol
    from shocker_hub.domain.models import ChannelStatistics

logger = logging.getLogger(__name__)


class SupervisorState(Enum):
    """Whether the recurring poll is scheduled."""

    STOPPED = "stopped"
    RUNNING = "running"


@dataclass(frozen=True)
class PollSettings:
    """Poll schedule and the broadcast triggered by a metric increase."""

    interval_seconds: float = 60.0
    broadcast_on_change: bool = False
    intensity: int = 50
    duration: int = 1000
    kind: BroadcastKind = BroadcastKind.VIBRATE


def format_count(count: int) -> str:
    """Format a counter for logs, e.g. 1234567 -> '1.23M'."""
    if count >= 1_000_000:
        return f"{count / 1_000_000:.2f}M"
    if count >= 1_000:
        return f"{count / 1_000:.2f}K"
    return str(count)


class PollSupervisor:
    """Runs the external poll only while someone is subscribed to broadcasts."""

    def __init__(
        self,
        subscriptions: SubscriptionTable,
        dispatcher: ForwardingDispatcher,
        metric_source: MetricSourceProtocol | None,
        settings: PollSettings | None = None,
    ) -> None:
        """Initialize the supervisor.

        Args:
            subscriptions: Table whose active-subscriber predicate gates polling.
            dispatcher: Used to broadcast when the metric increases.
            metric_source: External counter; None disables the feature.
            settings: Poll interval and broadcast parameters.
        """
        self.subscriptions = subscriptions
        self.dispatcher = dispatcher
        self.metric_source = metric_source
        self.settings = settings or PollSettings()
        self.state = SupervisorState.STOPPED
        self.last_count: int | None = None
        self._task: asyncio.Task[None] | None = None
        self._disabled_logged = False

    def on_subscriber_set_changed(self) -> None:
        """Edge check: start or stop polling to match the subscriber set."""
        active = self.subscriptions.has_active_subscribers()

        if active and self.state is SupervisorState.STOPPED:
            if self.metric_source is None:
                if not self._disabled_logged:
                    logger.info(
                        "Metric polling not started: YOUTUBE_API_KEY or YOUTUBE_CHANNEL_ID not set"
                    )
                    self._disabled_logged = True
                return
            self._start()
        elif not active and self.state is SupervisorState.RUNNING:
            self._stop()

    def _start(self) -> None:
        self.state = SupervisorState.RUNNING
        self._task = asyncio.create_task(self._poll_loop())
        logger.info(
            f"Started metric polling every {self.settings.interval_seconds}s "
            f"(broadcast on change: {self.settings.broadcast_on_change})"
        )

    def _stop(self) -> None:
        self.state = SupervisorState.STOPPED
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
        # The next run establishes a fresh baseline
        self.last_count = None
        logger.info("Stopped metric polling (no active broadcast subscribers)")

    async def shutdown(self) -> None:
        """Cancel polling and wait for the task to finish."""
        task = self._task
        if self.state is SupervisorState.RUNNING:
            self._stop()
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                logger.info("Metric polling cancelled")

    async def _poll_loop(self) -> None:
        """Poll immediately, then on a fixed interval until cancelled."""
        await self.poll_once()
        try:
            while True:
                await asyncio.sleep(self.settings.interval_seconds)
                await self.poll_once()
        except asyncio.CancelledError:
            logger.debug("Metric poll loop cancelled")
            raise

    async def poll_once(self) -> None:
        """Fetch the metric once and broadcast if it increased."""
        assert self.metric_source is not None
        try:
            statistics = await self.metric_source.fetch()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Error fetching subscriber count: {e}")
            return

        await self._handle_statistics(statistics)

    async def _handle_statistics(self, statistics: ChannelStatistics) -> None:
        current = statistics.subscriber_count
        previous = self.last_count
        self.last_count = current
        count_text = f"{format_count(current)} ({current:,})"

        if previous is None or previous == current:
            logger.info(f"Subscribers: {count_text} | Channel: {statistics.channel_name}")
            return

        change = current - previous
        logger.info(
            f"Subscribers: {count_text} | Channel: {statistics.channel_name} | Change: {change:+,}"
        )
        if change < 0 or not self.settings.broadcast_on_change:
            return

        logger.info("Subscriber count increased, triggering broadcast")
        try:
            await self.dispatcher.dispatch_broadcast(
                self.settings.intensity, self.settings.duration, self.settings.kind.value
            )
        except Exception as e:
            logger.error(f"Broadcast after subscriber change failed: {e}", exc_info=True)
