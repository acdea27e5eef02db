"""Device commands and their wire representations."""

from collections.abc import Mapping
from dataclasses import dataclass

from smartlight_hub.errors import InvalidCommand

SERVO_IDS = (1, 2)
ANGLE_RANGE = (0, 180)
CHANNEL_RANGE = (0, 255)
BRIGHTNESS_RANGE = (0, 255)

LED_PATH = "/api/led"


@dataclass(frozen=True)
class FallbackRequest:
    """HTTP request that carries a command straight to the device."""

    path: str
    body: dict[str, object]


@dataclass(frozen=True)
class SetServoAngle:
    """Move one servo to an absolute angle in degrees."""

    servo: int
    angle: int

    def validate(self) -> None:
        _require_int("servo", self.servo)
        if self.servo not in SERVO_IDS:
            raise InvalidCommand("Servo number must be 1 or 2")
        _require_range("angle", self.angle, ANGLE_RANGE)

    def to_frame(self) -> dict[str, object]:
        return {"type": "set_servo", "id": self.servo, "angle": self.angle}

    def fallback_request(self) -> FallbackRequest:
        return FallbackRequest(
            path=f"/api/servo{self.servo}", body={"angle": self.angle}
        )


@dataclass(frozen=True)
class SetLedColor:
    """Set every LED to one RGB color."""

    r: int
    g: int
    b: int

    def validate(self) -> None:
        for name, value in (("r", self.r), ("g", self.g), ("b", self.b)):
            _require_range(name, value, CHANNEL_RANGE)

    def to_frame(self) -> dict[str, object]:
        return {"type": "set_led_color", "r": self.r, "g": self.g, "b": self.b}

    def fallback_request(self) -> FallbackRequest:
        return FallbackRequest(path=LED_PATH, body=self.to_frame())


@dataclass(frozen=True)
class SetLedBrightness:
    """Set the strip brightness on the device's native 0-255 scale."""

    brightness: int

    def validate(self) -> None:
        _require_range("brightness", self.brightness, BRIGHTNESS_RANGE)

    def to_frame(self) -> dict[str, object]:
        return {"type": "set_led_brightness", "brightness": self.brightness}

    def fallback_request(self) -> FallbackRequest:
        return FallbackRequest(path=LED_PATH, body=self.to_frame())


@dataclass(frozen=True)
class ClearLeds:
    """Turn every LED off."""

    def validate(self) -> None:
        return None

    def to_frame(self) -> dict[str, object]:
        return {"type": "clear_leds"}

    def fallback_request(self) -> FallbackRequest:
        return FallbackRequest(path=LED_PATH, body=self.to_frame())


DeviceCommand = SetServoAngle | SetLedColor | SetLedBrightness | ClearLeds


def led_command_from_payload(payload: Mapping[str, object]) -> DeviceCommand:
    """Build an LED command from a request body keyed by its `type`."""
    command_type = payload.get("type")
    if not isinstance(command_type, str) or not command_type:
        raise InvalidCommand("Command type is required")
    if command_type == "set_led_color":
        return SetLedColor(
            r=payload.get("r"),  # type: ignore[arg-type]
            g=payload.get("g"),  # type: ignore[arg-type]
            b=payload.get("b"),  # type: ignore[arg-type]
        )
    if command_type == "set_led_brightness":
        return SetLedBrightness(brightness=payload.get("brightness"))  # type: ignore[arg-type]
    if command_type == "clear_leds":
        return ClearLeds()
    raise InvalidCommand(f"Unknown LED command: {command_type}")


def _require_int(name: str, value: object) -> None:
    # bool is an int subclass but never a valid command parameter
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidCommand(f"{name} must be an integer")


def _require_range(name: str, value: object, bounds: tuple[int, int]) -> None:
    _require_int(name, value)
    low, high = bounds
    if not low <= value <= high:  # type: ignore[operator]
        raise InvalidCommand(f"{name} must be between {low} and {high}")
