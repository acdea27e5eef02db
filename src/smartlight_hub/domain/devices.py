"""Domain models for registered devices."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class DeviceStatus(StrEnum):
    """Last known reachability of a device."""

    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


@dataclass(frozen=True)
class DeviceRecord:
    """Represents a device known to the directory."""

    id: str
    name: str
    address: str
    status: DeviceStatus
    created_at: datetime
    last_heartbeat: datetime | None = None
    servo1_angle: int | None = None
    servo2_angle: int | None = None
    brightness: int | None = None
    color_r: int | None = None
    color_g: int | None = None
    color_b: int | None = None


def default_device_name(device_id: str) -> str:
    """Build a display name for a device that registered itself."""
    parts = device_id.split("_")
    suffix = parts[1] if len(parts) > 1 and parts[1] else device_id[:8]
    return f"Smart Light ({suffix})"
