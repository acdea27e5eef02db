"""Typed failures raised by the hub core."""


class HubError(Exception):
    """Base class for hub domain errors."""


class InvalidPayload(HubError):
    """A frame or request field is malformed or out of range."""


class InvalidCommand(InvalidPayload):
    """A device command has a wrong-typed or out-of-range parameter."""


class DeviceNotFound(HubError):
    """No directory record exists for the device id."""

    def __init__(self, device_id: str) -> None:
        super().__init__(f"Device not found: {device_id}")
        self.device_id = device_id


class DeviceUnreachable(HubError):
    """Neither the live channel nor the fallback request reached the device."""


class ProtocolViolation(HubError):
    """A connection sent a frame that is not valid in its current state."""


class DeviceAlreadyExists(HubError):
    """A directory record with the requested id is already present."""

    def __init__(self, device_id: str) -> None:
        super().__init__(f"Device already exists: {device_id}")
        self.device_id = device_id
