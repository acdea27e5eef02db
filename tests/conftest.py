"""Shared test fixtures."""

from dataclasses import dataclass, field
from uuid import uuid4

import pytest

from smartlight_hub.adapters.device_http_client import DeviceClient
from smartlight_hub.adapters.memory_device_directory import InMemoryDeviceDirectory
from smartlight_hub.config import Settings
from smartlight_hub.containers import AppContainer
from smartlight_hub.errors import DeviceUnreachable
from smartlight_hub.services.command_router import CommandRouter
from smartlight_hub.services.devices import DeviceService
from smartlight_hub.services.session_runtime import SessionRuntime


@dataclass
class FakeChannel:
    """Live channel that records frames instead of sending them."""

    connection_id: str = field(default_factory=lambda: uuid4().hex)
    remote_origin: str | None = "192.168.1.50"
    sent: list[dict[str, object]] = field(default_factory=list)
    broken: bool = False

    async def send(self, frame: dict[str, object]) -> None:
        if self.broken:
            raise ConnectionError("socket closed")
        self.sent.append(frame)


@dataclass
class FakeDeviceClient(DeviceClient):
    """Device client that records fallback requests."""

    reply: object = field(default_factory=lambda: {"success": True})
    status_payload: dict[str, object] = field(
        default_factory=lambda: {
            "servo1": {"angle": 30},
            "servo2": {"angle": 150},
            "wifi": {"connected": True},
        }
    )
    unreachable: bool = False
    commands: list[tuple[str, str, dict[str, object]]] = field(default_factory=list)
    status_requests: list[str] = field(default_factory=list)

    async def post_command(
        self, address: str, path: str, body: dict[str, object]
    ) -> object:
        self.commands.append((address, path, body))
        if self.unreachable:
            raise DeviceUnreachable(f"http://{address}{path}: timed out")
        return self.reply

    async def get_status(self, address: str) -> dict[str, object]:
        self.status_requests.append(address)
        if self.unreachable:
            raise DeviceUnreachable(f"http://{address}/api/status: timed out")
        return self.status_payload


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def settings() -> Settings:
    return Settings(environment="test", fallback_timeout_seconds=1.0)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def directory() -> InMemoryDeviceDirectory:
    return InMemoryDeviceDirectory()


@pytest.fixture
def runtime(clock: FakeClock) -> SessionRuntime:
    return SessionRuntime(live_window_ms=30_000, clock=clock)


@pytest.fixture
def device_client() -> FakeDeviceClient:
    return FakeDeviceClient()


@pytest.fixture
def router(
    directory: InMemoryDeviceDirectory,
    runtime: SessionRuntime,
    device_client: FakeDeviceClient,
) -> CommandRouter:
    return CommandRouter(
        directory=directory, runtime=runtime, device_client=device_client
    )


@pytest.fixture
def container(
    settings: Settings,
    directory: InMemoryDeviceDirectory,
    runtime: SessionRuntime,
    device_client: FakeDeviceClient,
    router: CommandRouter,
) -> AppContainer:
    device_service = DeviceService(directory=directory, device_client=device_client)

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        directory=directory,
        runtime=runtime,
        device_service=device_service,
        command_router=router,
        close_resources=close_resources,
    )
