"""In-process device directory guarded by a lock."""

import threading
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime

from smartlight_hub.domain.devices import (
    DeviceRecord,
    DeviceStatus,
    default_device_name,
)
from smartlight_hub.errors import DeviceAlreadyExists

DEFAULT_BRIGHTNESS = 128
DEFAULT_COLOR = (255, 255, 255)


@dataclass
class InMemoryDeviceDirectory:
    """Device directory that lives for the lifetime of the process."""

    _devices: dict[str, DeviceRecord] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def list_devices(self) -> list[DeviceRecord]:
        with self._lock:
            return list(self._devices.values())

    def get(self, device_id: str) -> DeviceRecord | None:
        with self._lock:
            return self._devices.get(device_id)

    def create(self, device_id: str, name: str, address: str) -> DeviceRecord:
        with self._lock:
            if device_id in self._devices:
                raise DeviceAlreadyExists(device_id)
            return self._insert(device_id, name, address)

    def delete(self, device_id: str) -> bool:
        with self._lock:
            return self._devices.pop(device_id, None) is not None

    def rename(self, device_id: str, name: str) -> DeviceRecord | None:
        with self._lock:
            device = self._devices.get(device_id)
            if device is None:
                return None
            updated = replace(device, name=name)
            self._devices[device_id] = updated
            return updated

    def auto_register(self, device_id: str, address: str) -> DeviceRecord:
        with self._lock:
            existing = self._devices.get(device_id)
            if existing is None:
                return self._insert(
                    device_id, default_device_name(device_id), address
                )
            if existing.address != address:
                existing = replace(existing, address=address)
                self._devices[device_id] = existing
            return existing

    def set_status(self, device_id: str, status: DeviceStatus) -> bool:
        with self._lock:
            device = self._devices.get(device_id)
            if device is None:
                return False
            if status is DeviceStatus.CONNECTED:
                device = replace(device, status=status, last_heartbeat=_now())
            else:
                device = replace(device, status=status)
            self._devices[device_id] = device
            return True

    def set_cached_angles(
        self,
        device_id: str,
        servo1_angle: int | None = None,
        servo2_angle: int | None = None,
    ) -> None:
        with self._lock:
            device = self._devices.get(device_id)
            if device is None:
                return
            self._devices[device_id] = replace(
                device,
                servo1_angle=_pick(servo1_angle, device.servo1_angle),
                servo2_angle=_pick(servo2_angle, device.servo2_angle),
                last_heartbeat=_now(),
            )

    def set_cached_led(
        self,
        device_id: str,
        brightness: int | None = None,
        r: int | None = None,
        g: int | None = None,
        b: int | None = None,
    ) -> None:
        with self._lock:
            device = self._devices.get(device_id)
            if device is None:
                return
            self._devices[device_id] = replace(
                device,
                brightness=_pick(brightness, device.brightness),
                color_r=_pick(r, device.color_r),
                color_g=_pick(g, device.color_g),
                color_b=_pick(b, device.color_b),
                last_heartbeat=_now(),
            )

    def _insert(self, device_id: str, name: str, address: str) -> DeviceRecord:
        red, green, blue = DEFAULT_COLOR
        device = DeviceRecord(
            id=device_id,
            name=name,
            address=address,
            status=DeviceStatus.DISCONNECTED,
            created_at=_now(),
            brightness=DEFAULT_BRIGHTNESS,
            color_r=red,
            color_g=green,
            color_b=blue,
        )
        self._devices[device_id] = device
        return device


def _now() -> datetime:
    return datetime.now(tz=UTC)


def _pick(new: int | None, current: int | None) -> int | None:
    return current if new is None else new
