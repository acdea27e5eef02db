"""Transport selection for device commands."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from smartlight_hub.adapters.device_http_client import DeviceClient
from smartlight_hub.domain.commands import (
    ClearLeds,
    DeviceCommand,
    SetLedBrightness,
    SetLedColor,
    SetServoAngle,
    led_command_from_payload,
)
from smartlight_hub.domain.devices import DeviceRecord
from smartlight_hub.errors import DeviceNotFound, DeviceUnreachable
from smartlight_hub.services.devices import DeviceDirectory
from smartlight_hub.services.session_runtime import SessionRuntime

logger = logging.getLogger(__name__)


class Transport(StrEnum):
    """How a command reached the device."""

    LIVE = "live"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class DispatchResult:
    """Successful command delivery."""

    device_id: str
    transport: Transport
    response: object | None = None


@dataclass(frozen=True)
class ServoReading:
    """Servo angles as reported by the device."""

    device_id: str
    transport: Transport
    servo1_angle: int | None
    servo2_angle: int | None
    data: dict[str, object] | None = None


@dataclass(frozen=True)
class LiveDevice:
    """Liveness snapshot of one connected device."""

    device_id: str
    name: str | None
    address: str | None
    last_heartbeat: datetime
    servo1_angle: int | None
    servo2_angle: int | None


@dataclass
class CommandRouter:
    """Delivers commands over the live channel, or directly over HTTP.

    The live channel is fire-and-forget: a send that does not raise counts as
    delivered. When no session exists the device's own web server gets one
    request, bounded by the client's timeout and never retried. Cached state
    in the directory is only written after a delivery succeeded.
    """

    directory: DeviceDirectory
    runtime: SessionRuntime
    device_client: DeviceClient

    async def dispatch(self, device_id: str, command: DeviceCommand) -> DispatchResult:
        """Validate and deliver a command, then record it in the directory."""
        device = self._require_device(device_id)
        command.validate()

        session = self.runtime.find_by_device(device_id)
        if session is not None:
            try:
                await session.channel.send(command.to_frame())
            except Exception as exc:
                logger.warning(
                    "Live send failed",
                    extra={
                        "device_id": device_id,
                        "connection_id": session.connection_id,
                    },
                )
                raise DeviceUnreachable(f"Live channel send failed: {exc}") from exc
            result = DispatchResult(device_id=device_id, transport=Transport.LIVE)
        else:
            request = command.fallback_request()
            try:
                response = await self.device_client.post_command(
                    device.address, request.path, request.body
                )
            except DeviceUnreachable:
                logger.warning(
                    "Fallback delivery failed",
                    extra={"device_id": device_id, "address": device.address},
                )
                raise
            result = DispatchResult(
                device_id=device_id, transport=Transport.FALLBACK, response=response
            )

        logger.info(
            "Command delivered",
            extra={
                "device_id": device_id,
                "command": command.to_frame()["type"],
                "transport": result.transport.value,
            },
        )
        self._record(device_id, command)
        return result

    async def dispatch_servo(
        self, device_id: str, servo: object, angle: object
    ) -> DispatchResult:
        """Move one servo of a device."""
        return await self.dispatch(
            device_id,
            SetServoAngle(servo=servo, angle=angle),  # type: ignore[arg-type]
        )

    async def dispatch_led(
        self, device_id: str, payload: Mapping[str, object]
    ) -> DispatchResult:
        """Deliver an LED command described by a request payload."""
        self._require_device(device_id)
        return await self.dispatch(device_id, led_command_from_payload(payload))

    async def query_servos(self, device_id: str) -> ServoReading:
        """Read servo angles without touching the directory's cached state."""
        device = self._require_device(device_id)
        session = self.runtime.find_by_device(device_id)
        if session is not None:
            return ServoReading(
                device_id=device_id,
                transport=Transport.LIVE,
                servo1_angle=session.servo1_angle,
                servo2_angle=session.servo2_angle,
            )
        data = await self.device_client.get_status(device.address)
        return ServoReading(
            device_id=device_id,
            transport=Transport.FALLBACK,
            servo1_angle=_reported_angle(data, "servo1"),
            servo2_angle=_reported_angle(data, "servo2"),
            data=data,
        )

    def live_devices(self, within_ms: int | None = None) -> list[LiveDevice]:
        """Join live sessions with their directory records."""
        devices: list[LiveDevice] = []
        for session in self.runtime.list_live(within_ms):
            record = self.directory.get(session.device_id)
            devices.append(
                LiveDevice(
                    device_id=session.device_id,
                    name=record.name if record else None,
                    address=record.address if record else None,
                    last_heartbeat=session.last_seen_at,
                    servo1_angle=session.servo1_angle,
                    servo2_angle=session.servo2_angle,
                )
            )
        return devices

    def _require_device(self, device_id: str) -> DeviceRecord:
        device = self.directory.get(device_id)
        if device is None:
            raise DeviceNotFound(device_id)
        return device

    def _record(self, device_id: str, command: DeviceCommand) -> None:
        if isinstance(command, SetServoAngle):
            self.directory.set_cached_angles(
                device_id,
                servo1_angle=command.angle if command.servo == 1 else None,
                servo2_angle=command.angle if command.servo == 2 else None,
            )
        elif isinstance(command, SetLedColor):
            self.directory.set_cached_led(
                device_id, r=command.r, g=command.g, b=command.b
            )
        elif isinstance(command, SetLedBrightness):
            self.directory.set_cached_led(device_id, brightness=command.brightness)
        elif isinstance(command, ClearLeds):
            # no cached field describes a cleared strip; only liveness moves
            self.directory.set_cached_led(device_id)


def _reported_angle(data: dict[str, object], key: str) -> int | None:
    servo = data.get(key)
    if not isinstance(servo, dict):
        return None
    angle = servo.get("angle")
    if isinstance(angle, bool) or not isinstance(angle, int | float):
        return None
    return int(angle)
