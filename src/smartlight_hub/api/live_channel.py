"""WebSocket endpoint that devices keep open to the hub."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from smartlight_hub.adapters.websocket_channel import WebSocketChannel
from smartlight_hub.services.connection_protocol import ConnectionProtocolHandler

if TYPE_CHECKING:
    from smartlight_hub.containers import AppContainer

logger = logging.getLogger(__name__)

router = APIRouter(tags=["live"])


@router.websocket("/ws")
async def device_channel(websocket: WebSocket) -> None:
    """Run the frame protocol for one device connection until it closes."""
    container: AppContainer = websocket.app.state.container
    await websocket.accept()
    channel = WebSocketChannel(websocket)
    handler = ConnectionProtocolHandler(
        channel=channel,
        directory=container.directory,
        runtime=container.runtime,
        unknown_address=container.settings.unknown_address,
    )
    logger.info(
        "Connection opened",
        extra={
            "connection_id": channel.connection_id,
            "remote_origin": channel.remote_origin,
        },
    )
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            frame = message.get("text")
            if frame is None:
                frame = message.get("bytes") or b""
            await channel.send(handler.handle_message(frame))
    except WebSocketDisconnect:
        pass
    except Exception:
        logger.exception(
            "Live channel failed", extra={"connection_id": channel.connection_id}
        )
    finally:
        handler.close()
