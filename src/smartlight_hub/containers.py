"""Dependency container wiring for the hub."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from smartlight_hub.adapters.device_http_client import HttpxDeviceClient
from smartlight_hub.adapters.memory_device_directory import InMemoryDeviceDirectory
from smartlight_hub.config import Settings
from smartlight_hub.services.command_router import CommandRouter
from smartlight_hub.services.devices import DeviceDirectory, DeviceService
from smartlight_hub.services.session_runtime import SessionRuntime


@dataclass
class AppContainer:
    """Holds the hub's process-wide state and services."""

    settings: Settings
    directory: DeviceDirectory
    runtime: SessionRuntime
    device_service: DeviceService
    command_router: CommandRouter
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    directory = InMemoryDeviceDirectory()
    runtime = SessionRuntime(live_window_ms=resolved_settings.live_window_ms)
    device_client = HttpxDeviceClient.create(
        timeout_seconds=resolved_settings.fallback_timeout_seconds,
        unknown_address=resolved_settings.unknown_address,
    )
    device_service = DeviceService(directory=directory, device_client=device_client)
    command_router = CommandRouter(
        directory=directory,
        runtime=runtime,
        device_client=device_client,
    )

    async def close_resources() -> None:
        await device_client.close()

    return AppContainer(
        settings=resolved_settings,
        directory=directory,
        runtime=runtime,
        device_service=device_service,
        command_router=command_router,
        close_resources=close_resources,
    )
