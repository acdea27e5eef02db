"""Device record management and status probing."""

import logging
import time
from dataclasses import dataclass
from typing import Protocol

from smartlight_hub.adapters.device_http_client import DeviceClient
from smartlight_hub.domain.devices import DeviceRecord, DeviceStatus
from smartlight_hub.errors import DeviceNotFound, DeviceUnreachable

logger = logging.getLogger(__name__)


class DeviceDirectory(Protocol):
    """Storage interface for device records."""

    def list_devices(self) -> list[DeviceRecord]:
        """Return every known device."""

    def get(self, device_id: str) -> DeviceRecord | None:
        """Return a device by id, if present."""

    def create(self, device_id: str, name: str, address: str) -> DeviceRecord:
        """Create and return a new device record."""

    def delete(self, device_id: str) -> bool:
        """Delete a device, returning whether it existed."""

    def rename(self, device_id: str, name: str) -> DeviceRecord | None:
        """Change the display name of a device."""

    def auto_register(self, device_id: str, address: str) -> DeviceRecord:
        """Return the device, creating it or revising its address."""

    def set_status(self, device_id: str, status: DeviceStatus) -> bool:
        """Set the reachability status of a device."""

    def set_cached_angles(
        self,
        device_id: str,
        servo1_angle: int | None = None,
        servo2_angle: int | None = None,
    ) -> None:
        """Record servo angles last delivered to a device."""

    def set_cached_led(
        self,
        device_id: str,
        brightness: int | None = None,
        r: int | None = None,
        g: int | None = None,
        b: int | None = None,
    ) -> None:
        """Record LED state last delivered to a device."""


@dataclass(frozen=True)
class StatusProbe:
    """Outcome of polling a device's status endpoint."""

    device_id: str
    status: DeviceStatus
    data: dict[str, object] | None = None
    error: str | None = None


@dataclass
class DeviceService:
    """Administrative operations on device records."""

    directory: DeviceDirectory
    device_client: DeviceClient

    def list_devices(self) -> list[DeviceRecord]:
        """Return all device records."""
        return self.directory.list_devices()

    def get_device(self, device_id: str) -> DeviceRecord:
        """Return a device or raise DeviceNotFound."""
        device = self.directory.get(device_id)
        if device is None:
            raise DeviceNotFound(device_id)
        return device

    def create_device(
        self, name: str, address: str, device_id: str | None = None
    ) -> DeviceRecord:
        """Create a device, defaulting its id to a millisecond timestamp."""
        resolved_id = device_id or str(time.time_ns() // 1_000_000)
        device = self.directory.create(resolved_id, name=name, address=address)
        logger.info("Device created", extra={"device_id": device.id})
        return device

    def rename_device(self, device_id: str, name: str) -> DeviceRecord:
        """Rename a device."""
        device = self.directory.rename(device_id, name)
        if device is None:
            raise DeviceNotFound(device_id)
        return device

    def delete_device(self, device_id: str) -> None:
        """Delete a device; live sessions referencing it are left alone."""
        if not self.directory.delete(device_id):
            raise DeviceNotFound(device_id)
        logger.info("Device deleted", extra={"device_id": device_id})

    async def probe_status(self, device_id: str) -> StatusProbe:
        """Poll the device over HTTP and record whether it answered."""
        device = self.get_device(device_id)
        try:
            data = await self.device_client.get_status(device.address)
        except DeviceUnreachable:
            logger.warning(
                "Status probe failed",
                extra={"device_id": device_id, "address": device.address},
            )
            self.directory.set_status(device_id, DeviceStatus.DISCONNECTED)
            return StatusProbe(
                device_id=device_id,
                status=DeviceStatus.DISCONNECTED,
                error="Cannot reach device",
            )
        self.directory.set_status(device_id, DeviceStatus.CONNECTED)
        return StatusProbe(
            device_id=device_id, status=DeviceStatus.CONNECTED, data=data
        )
