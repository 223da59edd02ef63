"""Application services (use cases) for the hub."""

from shocker_hub.application.services.broadcast_engine import BroadcastEngine, build_envelope
from shocker_hub.application.services.connection_registry import ConnectionRegistry
from shocker_hub.application.services.device_state_machine import DeviceStateMachine
from shocker_hub.application.services.forwarding_dispatcher import (
    ForwardingDispatcher,
    validate_broadcast,
)
from shocker_hub.application.services.poll_supervisor import (
    PollSettings,
    PollSupervisor,
    SupervisorState,
    format_count,
)
from shocker_hub.application.services.stream_session import StreamSession
from shocker_hub.application.services.subscription_table import (
    SubscriptionTable,
    normalize_device_ids,
)

__all__ = [
    "BroadcastEngine",
    "ConnectionRegistry",
    "DeviceStateMachine",
    "ForwardingDispatcher",
    "PollSettings",
    "PollSupervisor",
    "StreamSession",
    "SubscriptionTable",
    "SupervisorState",
    "build_envelope",
    "format_count",
    "normalize_device_ids",
    "validate_broadcast",
]
