"""Per-connection state machine for the device live channel."""

import json
import logging
from dataclasses import dataclass
from enum import StrEnum

from pydantic import ValidationError

from smartlight_hub.domain.devices import DeviceStatus
from smartlight_hub.domain.frames import HeartbeatFrame, RegisterFrame
from smartlight_hub.domain.sessions import LiveChannel
from smartlight_hub.errors import ProtocolViolation
from smartlight_hub.services.devices import DeviceDirectory
from smartlight_hub.services.session_runtime import SessionRuntime

logger = logging.getLogger(__name__)


class ConnectionState(StrEnum):
    """Lifecycle of one live connection."""

    UNREGISTERED = "unregistered"
    REGISTERED = "registered"
    CLOSED = "closed"


@dataclass
class ConnectionProtocolHandler:
    """Interprets inbound frames for one connection and builds the replies.

    Malformed or unexpected frames produce error replies and never end the
    connection. Closing unbinds the session but leaves the directory status
    alone, since the device may still answer fallback requests.
    """

    channel: LiveChannel
    directory: DeviceDirectory
    runtime: SessionRuntime
    unknown_address: str = "unknown"
    state: ConnectionState = ConnectionState.UNREGISTERED
    device_id: str | None = None

    @property
    def connection_id(self) -> str:
        return self.channel.connection_id

    def handle_message(self, text: str | bytes) -> dict[str, object]:
        """Process one inbound frame and return the reply frame.

        Binary frames are decoded as JSON text; bytes that are not valid
        UTF-8 JSON get the same `invalid_json` reply as bad text.
        """
        if self.state is ConnectionState.CLOSED:
            raise ProtocolViolation("Frame received on a closed connection")
        try:
            payload = json.loads(text)
        except ValueError:
            logger.info(
                "Invalid JSON frame", extra={"connection_id": self.connection_id}
            )
            return _error("invalid_json")

        frame_type = payload.get("type") if isinstance(payload, dict) else None
        try:
            if frame_type == "register":
                return self._register(RegisterFrame.model_validate(payload))
            if frame_type == "heartbeat":
                return self._heartbeat(HeartbeatFrame.model_validate(payload))
        except ValidationError:
            # invalid_payload extends the device-facing error codes; firmware
            # that only knows invalid_json and unknown_type can ignore it.
            logger.info(
                "Invalid frame payload",
                extra={"connection_id": self.connection_id, "frame_type": frame_type},
            )
            return _error("invalid_payload")
        return _error("unknown_type")

    def close(self) -> None:
        """Tear down the session for this connection."""
        self.runtime.unbind(self.connection_id)
        self.state = ConnectionState.CLOSED
        logger.info(
            "Connection closed",
            extra={"connection_id": self.connection_id, "device_id": self.device_id},
        )

    def _register(self, frame: RegisterFrame) -> dict[str, object]:
        device_id = frame.device_id
        if self.directory.get(device_id) is None:
            address = self.channel.remote_origin or self.unknown_address
            logger.info(
                "Auto-registering device",
                extra={"device_id": device_id, "address": address},
            )
            self.directory.auto_register(device_id, address)

        self.runtime.bind(self.connection_id, device_id, self.channel)
        self.directory.set_status(device_id, DeviceStatus.CONNECTED)
        self.state = ConnectionState.REGISTERED
        self.device_id = device_id
        logger.info(
            "Device registered",
            extra={"device_id": device_id, "connection_id": self.connection_id},
        )
        return {"type": "ack", "action": "register", "deviceId": device_id}

    def _heartbeat(self, frame: HeartbeatFrame) -> dict[str, object]:
        session = self.runtime.touch(
            self.connection_id,
            servo1_angle=frame.servo1.rounded_angle() if frame.servo1 else None,
            servo2_angle=frame.servo2.rounded_angle() if frame.servo2 else None,
        )
        if session is None:
            logger.warning(
                "Heartbeat before registration",
                extra={"connection_id": self.connection_id},
            )
        else:
            self.directory.set_status(session.device_id, DeviceStatus.CONNECTED)
        return {"type": "ack", "action": "heartbeat"}


def _error(code: str) -> dict[str, object]:
    return {"type": "error", "error": code}
