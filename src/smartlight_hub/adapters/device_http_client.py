"""Direct HTTP client for reaching a device without its live channel."""

from dataclasses import dataclass
from typing import Protocol

import httpx

from smartlight_hub.errors import DeviceUnreachable


class DeviceClient(Protocol):
    """Interface for one-shot requests to a device's own web server."""

    async def post_command(
        self, address: str, path: str, body: dict[str, object]
    ) -> object:
        """Send a command to the device and return its JSON reply."""

    async def get_status(self, address: str) -> dict[str, object]:
        """Fetch the device's status document."""


@dataclass
class HttpxDeviceClient(DeviceClient):
    """HTTPX-backed device client; every failure surfaces as DeviceUnreachable."""

    http_client: httpx.AsyncClient
    timeout_seconds: float
    unknown_address: str = "unknown"

    @classmethod
    def create(
        cls, timeout_seconds: float, unknown_address: str = "unknown"
    ) -> "HttpxDeviceClient":
        """Create a device client with a managed httpx session."""
        return cls(
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
            unknown_address=unknown_address,
        )

    async def post_command(
        self, address: str, path: str, body: dict[str, object]
    ) -> object:
        """POST a command body to the device."""
        url = self._url(address, path)
        try:
            response = await self.http_client.post(
                url, json=body, timeout=self.timeout_seconds
            )
            response.raise_for_status()
            return _decode(response)
        except httpx.HTTPError as exc:
            raise DeviceUnreachable(f"{url}: {exc}") from exc

    async def get_status(self, address: str) -> dict[str, object]:
        """GET the device status document."""
        url = self._url(address, "/api/status")
        try:
            response = await self.http_client.get(url, timeout=self.timeout_seconds)
            response.raise_for_status()
            data = _decode(response)
        except httpx.HTTPError as exc:
            raise DeviceUnreachable(f"{url}: {exc}") from exc
        if not isinstance(data, dict):
            raise DeviceUnreachable(f"{url}: unexpected status payload")
        return data

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    def _url(self, address: str, path: str) -> str:
        if not address or address == self.unknown_address:
            raise DeviceUnreachable("Device address is unknown")
        return f"http://{address}{path}"


def _decode(response: httpx.Response) -> object:
    """Return the JSON body, or None when the device replied with no content."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text
