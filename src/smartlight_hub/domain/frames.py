"""Pydantic models for frames sent by devices over the live channel."""

import math
from typing import Literal

from pydantic import BaseModel, Field, field_validator


class ServoTelemetry(BaseModel):
    """Reported position of one servo.

    Firmware may report fractional angles; anything that is not a finite
    number is treated as missing so the heartbeat itself still counts.
    """

    angle: float | None = None

    @field_validator("angle", mode="before")
    @classmethod
    def _drop_non_numeric(cls, value: object) -> float | None:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        if not math.isfinite(value):
            return None
        return value

    def rounded_angle(self) -> int | None:
        return None if self.angle is None else round(self.angle)


class RegisterFrame(BaseModel):
    """Device announces which identity the connection represents."""

    type: Literal["register"]
    device_id: str = Field(alias="deviceId", min_length=1)


class HeartbeatFrame(BaseModel):
    """Periodic liveness signal with optional servo telemetry."""

    type: Literal["heartbeat"]
    servo1: ServoTelemetry | None = None
    servo2: ServoTelemetry | None = None

    @field_validator("servo1", "servo2", mode="before")
    @classmethod
    def _drop_non_object(cls, value: object) -> object:
        return value if isinstance(value, dict) else None
