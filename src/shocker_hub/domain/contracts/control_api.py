"""Protocol for the downstream control API."""

from typing import Protocol

from shocker_hub.domain.models.envelope import BroadcastKind
from shocker_hub.domain.models.forwarding_result import ForwardingResult


class ControlApiClientProtocol(Protocol):
    """Requests an effect on a set of devices using one credential."""

    async def send_control(
        self,
        credential: str,
        device_ids: list[str],
        intensity: int,
        duration: int,
        kind: BroadcastKind,
    ) -> ForwardingResult:
        """Send one control request.

        Returns:
            ForwardingResult describing whether the API accepted the request.

        Raises:
            ForwardingError: If the API could not be reached.
        """
        ...
