"""Device management and command endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request, status

from smartlight_hub.api.models import (
    DeviceCreateRequest,
    DeviceUpdateRequest,
    LedRequest,
    ServoRequest,
)
from smartlight_hub.domain.devices import DeviceRecord  # noqa: TC001

if TYPE_CHECKING:
    from smartlight_hub.containers import AppContainer

router = APIRouter(prefix="/devices", tags=["devices"])


@router.get("")
async def list_devices(request: Request) -> list[dict[str, object]]:
    """Return every known device."""
    container: AppContainer = request.app.state.container
    return [_device_payload(d) for d in container.device_service.list_devices()]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_device(
    body: DeviceCreateRequest, request: Request
) -> dict[str, object]:
    """Create a device record by hand."""
    container: AppContainer = request.app.state.container
    device = container.device_service.create_device(
        name=body.name, address=body.ip, device_id=body.id
    )
    return _device_payload(device)


@router.get("/online")
async def online_devices(request: Request) -> list[dict[str, object]]:
    """Return devices with a recent heartbeat on the live channel."""
    container: AppContainer = request.app.state.container
    return [
        {
            "deviceId": live.device_id,
            "name": live.name,
            "ip": live.address,
            "lastHeartbeat": live.last_heartbeat.isoformat(),
            "servo1Angle": live.servo1_angle,
            "servo2Angle": live.servo2_angle,
        }
        for live in container.command_router.live_devices()
    ]


@router.get("/{device_id}")
async def get_device(device_id: str, request: Request) -> dict[str, object]:
    """Return a single device."""
    container: AppContainer = request.app.state.container
    return _device_payload(container.device_service.get_device(device_id))


@router.put("/{device_id}")
async def update_device(
    device_id: str, body: DeviceUpdateRequest, request: Request
) -> dict[str, object]:
    """Update the editable fields of a device."""
    container: AppContainer = request.app.state.container
    if body.name:
        device = container.device_service.rename_device(device_id, body.name)
    else:
        device = container.device_service.get_device(device_id)
    return {"success": True, "device": _device_payload(device)}


@router.delete("/{device_id}")
async def delete_device(device_id: str, request: Request) -> dict[str, bool]:
    """Delete a device record."""
    container: AppContainer = request.app.state.container
    container.device_service.delete_device(device_id)
    return {"success": True}


@router.post("/{device_id}/servo")
async def move_servo(
    device_id: str, body: ServoRequest, request: Request
) -> dict[str, object]:
    """Move one servo, over the live channel when possible."""
    container: AppContainer = request.app.state.container
    result = await container.command_router.dispatch_servo(
        device_id, body.servo, body.angle
    )
    payload: dict[str, object] = {
        "success": True,
        "transport": result.transport.value,
    }
    if result.response is not None:
        payload["response"] = result.response
    return payload


@router.get("/{device_id}/servo")
async def read_servos(device_id: str, request: Request) -> dict[str, object]:
    """Return the device's current servo angles."""
    container: AppContainer = request.app.state.container
    reading = await container.command_router.query_servos(device_id)
    return {
        "deviceId": reading.device_id,
        "transport": reading.transport.value,
        "servo1Angle": reading.servo1_angle,
        "servo2Angle": reading.servo2_angle,
    }


@router.post("/{device_id}/led")
async def send_led_command(
    device_id: str, body: LedRequest, request: Request
) -> dict[str, object]:
    """Deliver an LED command."""
    container: AppContainer = request.app.state.container
    payload = body.model_dump(exclude_none=True)
    result = await container.command_router.dispatch_led(device_id, payload)
    return {
        "success": True,
        "message": f"LED command {body.type} sent successfully",
        "deviceId": device_id,
        "transport": result.transport.value,
    }


@router.get("/{device_id}/status")
async def probe_status(device_id: str, request: Request) -> dict[str, object]:
    """Poll the device directly and report whether it answered."""
    container: AppContainer = request.app.state.container
    probe = await container.device_service.probe_status(device_id)
    payload: dict[str, object] = {
        "device": probe.device_id,
        "status": probe.status.value,
    }
    if probe.error is None:
        payload["data"] = probe.data
    else:
        payload["error"] = probe.error
    return payload


def _device_payload(device: DeviceRecord) -> dict[str, object]:
    """Serialize a device record with the wire protocol's key names."""
    return {
        "id": device.id,
        "name": device.name,
        "ip": device.address,
        "status": device.status.value,
        "createdAt": device.created_at.isoformat(),
        "lastHeartbeat": (
            device.last_heartbeat.isoformat() if device.last_heartbeat else None
        ),
        "servo1Angle": device.servo1_angle,
        "servo2Angle": device.servo2_angle,
        "brightness": device.brightness,
        "colorR": device.color_r,
        "colorG": device.color_g,
        "colorB": device.color_b,
    }
