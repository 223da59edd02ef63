"""Protocol for controlling the shared device record."""

from typing import Protocol

from shocker_hub.domain.models.device_snapshot import DeviceSnapshot


class DeviceControllerProtocol(Protocol):
    """Activates, stops and reports the simulated device."""

    def activate(self, intensity: object, duration: object) -> DeviceSnapshot:
        """Switch the device on for duration milliseconds.

        Raises:
            ValidationError: If intensity or duration is out of range.
        """
        ...

    def stop(self) -> DeviceSnapshot:
        """Reset the device to off."""
        ...

    def snapshot(self) -> DeviceSnapshot:
        """Return the current state."""
        ...
