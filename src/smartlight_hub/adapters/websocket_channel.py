"""Live channel backed by a FastAPI WebSocket."""

import json
from dataclasses import dataclass, field
from uuid import uuid4

from fastapi import WebSocket


@dataclass
class WebSocketChannel:
    """Sends JSON text frames to one connected device."""

    websocket: WebSocket
    connection_id: str = field(default_factory=lambda: uuid4().hex)

    @property
    def remote_origin(self) -> str | None:
        """Return the peer host as seen by the ASGI server."""
        client = self.websocket.client
        return client.host if client else None

    async def send(self, frame: dict[str, object]) -> None:
        """Send a frame as a JSON text message."""
        await self.websocket.send_text(json.dumps(frame))
