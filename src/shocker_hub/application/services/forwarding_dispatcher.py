"""Broadcast dispatch with per-credential forwarding to the control API."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from shocker_hub.domain.errors import ValidationError
from shocker_hub.domain.models import (
    BroadcastKind,
    BroadcastOutcome,
    ForwardingResult,
    MessageType,
    utc_timestamp,
)
from shocker_hub.domain.validation import (
    is_missing,
    is_valid_duration,
    is_valid_intensity,
    parse_int,
)

if TYPE_CHECKING:
    from shocker_hub.application.services.broadcast_engine import BroadcastEngine
    from shocker_hub.application.services.subscription_table import SubscriptionTable
    from shocker_hub.domain.contracts import ControlApiClientProtocol

logger = logging.getLogger(__name__)


def validate_broadcast(intensity: Any, duration: Any, kind: Any) -> tuple[int, int, BroadcastKind]:
    """Validate broadcast parameters.

    Returns:
        Parsed (intensity, duration, kind).

    Raises:
        ValidationError: On the first failing check, in the order missing,
            type, intensity, duration.
    """
    if is_missing(intensity) or is_missing(duration) or is_missing(kind):
        raise ValidationError(
            "intensity, duration, and type are required",
            error="Missing required parameters",
        )
    try:
        parsed_kind = BroadcastKind(kind)
    except ValueError:
        raise ValidationError(
            'Type must be either "shock" or "vibrate"', field="type", error="Invalid type"
        ) from None
    if not is_valid_intensity(intensity):
        raise ValidationError(
            "Intensity must be a number between 0 and 100",
            field="intensity",
            error="Invalid intensity",
        )
    if not is_valid_duration(duration):
        raise ValidationError(
            "Duration must be a number between 300 and 30000 milliseconds",
            field="duration",
            error="Invalid duration",
        )
    return parse_int(intensity) or 0, parse_int(duration) or 0, parsed_kind


class ForwardingDispatcher:
    """Notifies subscribers, then forwards one control call per credential."""

    def __init__(
        self,
        subscriptions: SubscriptionTable,
        broadcast_engine: BroadcastEngine,
        control_api: ControlApiClientProtocol | None = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            subscriptions: Source of subscribers and their credentials.
            broadcast_engine: Engine used to notify subscribers.
            control_api: Downstream control API; None disables forwarding.
        """
        self._subscriptions = subscriptions
        self._broadcast_engine = broadcast_engine
        self._control_api = control_api

    async def dispatch_broadcast(
        self, intensity: Any, duration: Any, kind: Any
    ) -> BroadcastOutcome:
        """Validate, notify subscribers and forward to the control API.

        Forwarding is best-effort: its failures are logged and reported in
        the outcome but never fail the dispatch.

        Raises:
            ValidationError: If any parameter is missing or invalid. Nothing
                is sent in that case.
        """
        parsed_intensity, parsed_duration, parsed_kind = validate_broadcast(
            intensity, duration, kind
        )

        subscriber_count = len(self._subscriptions)
        logger.info(
            f"Broadcasting {parsed_kind.value} message: {parsed_intensity}% intensity for "
            f"{parsed_duration}ms to {subscriber_count} broadcast subscriber(s)"
        )
        sent = await self._broadcast_engine.notify_subscribers(
            MessageType.BROADCAST,
            {
                "intensity": parsed_intensity,
                "duration": parsed_duration,
                "type": parsed_kind.value,
                "timestamp": utc_timestamp(),
            },
        )
        if sent > 0:
            logger.info(f"Sent to {sent} subscriber(s)")

        # Snapshot before any await so disconnects cannot alter the iteration
        groups = self._subscriptions.group_by_credential()
        forwarding = await self._forward_groups(
            groups, parsed_intensity, parsed_duration, parsed_kind
        )

        return BroadcastOutcome(
            intensity=parsed_intensity,
            duration=parsed_duration,
            kind=parsed_kind,
            subscribers=len(self._subscriptions),
            sent=sent,
            forwarding=forwarding,
        )

    async def _forward_groups(
        self,
        groups: dict[str, set[str]],
        intensity: int,
        duration: int,
        kind: BroadcastKind,
    ) -> list[ForwardingResult]:
        if not groups:
            return []
        if self._control_api is None:
            return [
                ForwardingResult.disabled("OpenShock API not configured") for _ in groups.values()
            ]

        calls = [
            self._forward_one(credential, sorted(device_ids), intensity, duration, kind)
            for credential, device_ids in groups.items()
        ]
        return list(await asyncio.gather(*calls))

    async def _forward_one(
        self,
        credential: str,
        device_ids: list[str],
        intensity: int,
        duration: int,
        kind: BroadcastKind,
    ) -> ForwardingResult:
        assert self._control_api is not None
        try:
            result = await self._control_api.send_control(
                credential, device_ids, intensity, duration, kind
            )
        except Exception as e:
            logger.error(f"OpenShock API error: {e}")
            return ForwardingResult(
                enabled=True,
                success=False,
                device_ids=device_ids,
                error={"message": str(e)},
                transport_failed=True,
            )

        if not result.enabled:
            logger.info(f"OpenShock forwarding skipped: {result.message}")
        elif result.success:
            logger.info(
                f"OpenShock API: Control sent to {len(device_ids)} shocker(s) from subscribers"
            )
        else:
            logger.error(f"OpenShock API: Control failed - {result.error_message()}")
        return result
