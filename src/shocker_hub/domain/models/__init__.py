"""Domain models for the shocker hub."""

from shocker_hub.domain.models.broadcast_outcome import BroadcastOutcome
from shocker_hub.domain.models.channel_statistics import ChannelStatistics
from shocker_hub.domain.models.connection_state import ConnectionState
from shocker_hub.domain.models.device_snapshot import DeviceSnapshot
from shocker_hub.domain.models.envelope import (
    BroadcastKind,
    Envelope,
    InboundMessage,
    MessageType,
    utc_timestamp,
)
from shocker_hub.domain.models.forwarding_result import ForwardingResult
from shocker_hub.domain.models.key_material import KeyDescription, KeyPair
from shocker_hub.domain.models.subscription import Subscription

__all__ = [
    "BroadcastKind",
    "BroadcastOutcome",
    "ChannelStatistics",
    "ConnectionState",
    "DeviceSnapshot",
    "Envelope",
    "ForwardingResult",
    "InboundMessage",
    "KeyDescription",
    "KeyPair",
    "MessageType",
    "Subscription",
    "utc_timestamp",
]
