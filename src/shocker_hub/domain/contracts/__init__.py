"""Domain contracts (protocols) for the hub's collaborators."""

from shocker_hub.domain.contracts.broadcast_dispatcher import BroadcastDispatcherProtocol
from shocker_hub.domain.contracts.certificate_provider import CertificateProviderProtocol
from shocker_hub.domain.contracts.connection import ConnectionProtocol
from shocker_hub.domain.contracts.control_api import ControlApiClientProtocol
from shocker_hub.domain.contracts.credential_store import CredentialStoreProtocol
from shocker_hub.domain.contracts.device_controller import DeviceControllerProtocol
from shocker_hub.domain.contracts.metric_source import MetricSourceProtocol
from shocker_hub.domain.contracts.notifier import NotifierProtocol
from shocker_hub.domain.contracts.stream_handler import (
    ConnectionTrackerProtocol,
    StreamHandlerProtocol,
)

__all__ = [
    "BroadcastDispatcherProtocol",
    "CertificateProviderProtocol",
    "ConnectionProtocol",
    "ConnectionTrackerProtocol",
    "ControlApiClientProtocol",
    "CredentialStoreProtocol",
    "DeviceControllerProtocol",
    "MetricSourceProtocol",
    "NotifierProtocol",
    "StreamHandlerProtocol",
]
