"""Pydantic models for hub HTTP request bodies."""

from pydantic import BaseModel, Field


class DeviceCreateRequest(BaseModel):
    """Body for registering a device by hand."""

    name: str = Field(min_length=1)
    ip: str = Field(min_length=1)
    id: str | None = None


class DeviceUpdateRequest(BaseModel):
    """Body for editing a device record."""

    name: str | None = None


class ServoRequest(BaseModel):
    """Body for moving one servo."""

    servo: int
    angle: int


class LedRequest(BaseModel):
    """Body for an LED command; fields depend on `type`."""

    type: str | None = None
    r: int | None = None
    g: int | None = None
    b: int | None = None
    brightness: int | None = None
