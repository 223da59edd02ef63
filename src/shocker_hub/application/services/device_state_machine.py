"""Shared device record and its timed on/off transition."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime

from shocker_hub.domain.errors import ValidationError
from shocker_hub.domain.models import DeviceSnapshot
from shocker_hub.domain.validation import is_valid_duration, is_valid_intensity, parse_int

logger = logging.getLogger(__name__)

AutoOffCallback = Callable[[DeviceSnapshot], Awaitable[None]]


class DeviceStateMachine:
    """Owns the simulated device record.

    Each activation schedules its own auto-off task. Earlier tasks are not
    cancelled by a later activation or by stop(), so whichever timer fires
    last switches the device off.
    """

    def __init__(self, on_auto_off: AutoOffCallback | None = None) -> None:
        """Initialize the state machine.

        Args:
            on_auto_off: Optional coroutine called with the new snapshot after
                an auto-off timer fires.
        """
        self._is_on = False
        self._intensity = 0
        self._duration_ms = 0
        self._last_activated_at: datetime | None = None
        self._on_auto_off = on_auto_off
        self._timers: set[asyncio.Task[None]] = set()

    @property
    def pending_timers(self) -> int:
        """Number of auto-off timers that have not fired yet."""
        return len(self._timers)

    def snapshot(self) -> DeviceSnapshot:
        """Return a read-only copy of the current state."""
        return DeviceSnapshot(
            is_on=self._is_on,
            intensity=self._intensity,
            duration_ms=self._duration_ms,
            last_activated_at=self._last_activated_at,
        )

    def activate(self, intensity: object, duration: object) -> DeviceSnapshot:
        """Switch the device on and schedule the auto-off timer.

        Raises:
            ValidationError: If intensity or duration is out of range
                (intensity is checked first).
        """
        if not is_valid_intensity(intensity):
            raise ValidationError(
                "Intensity must be a number between 0 and 100",
                field="intensity",
                error="Invalid intensity",
            )
        if not is_valid_duration(duration):
            raise ValidationError(
                "Time must be a number between 300 and 30000 milliseconds",
                field="time",
                error="Invalid time",
            )

        self._is_on = True
        self._intensity = parse_int(intensity) or 0
        self._duration_ms = parse_int(duration) or 0
        self._last_activated_at = datetime.now(UTC)

        task = asyncio.create_task(self._auto_off(self._intensity, self._duration_ms))
        self._timers.add(task)
        task.add_done_callback(self._timers.discard)

        logger.info(f"Shocker activated: {self._intensity}% intensity for {self._duration_ms}ms")
        return self.snapshot()

    def stop(self) -> DeviceSnapshot:
        """Switch the device off and reset intensity and duration."""
        self._is_on = False
        self._intensity = 0
        self._duration_ms = 0
        logger.info("Shocker stopped")
        return self.snapshot()

    async def _auto_off(self, intensity: int, duration_ms: int) -> None:
        await asyncio.sleep(duration_ms / 1000.0)
        # Historical intensity/duration stay visible for status queries
        self._is_on = False
        logger.info(f"Shock completed: {intensity}% intensity for {duration_ms}ms")

        if self._on_auto_off is None:
            return
        try:
            await self._on_auto_off(self.snapshot())
        except Exception as e:
            logger.error(f"Failed to notify auto-off: {e}", exc_info=True)

    async def shutdown(self) -> None:
        """Cancel outstanding auto-off timers."""
        timers = list(self._timers)
        for task in timers:
            task.cancel()
        if timers:
            await asyncio.gather(*timers, return_exceptions=True)
            logger.info(f"Cancelled {len(timers)} pending auto-off timer(s)")
