"""Domain models for live device connections."""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol


class LiveChannel(Protocol):
    """Persistent bidirectional connection to one device."""

    @property
    def connection_id(self) -> str:
        """Return the opaque identity assigned by the transport."""

    @property
    def remote_origin(self) -> str | None:
        """Return the peer network address, if the transport knows it."""

    async def send(self, frame: dict[str, object]) -> None:
        """Serialize and send a frame to the device."""


@dataclass(frozen=True)
class Session:
    """Snapshot of one connection bound to a device identity."""

    connection_id: str
    device_id: str
    channel: LiveChannel
    bind_seq: int
    last_heartbeat: float
    last_seen_at: datetime
    servo1_angle: int | None = None
    servo2_angle: int | None = None
