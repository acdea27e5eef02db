"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from smartlight_hub.api.devices import router as devices_router
from smartlight_hub.api.live_channel import router as live_channel_router
from smartlight_hub.app_logging import configure_logging
from smartlight_hub.containers import AppContainer
from smartlight_hub.errors import (
    DeviceAlreadyExists,
    DeviceNotFound,
    DeviceUnreachable,
    InvalidPayload,
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Hub starting",
            extra={"environment": app.state.container.settings.environment},
        )
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(devices_router)
    app.include_router(live_channel_router)

    @app.get("/health")
    async def health() -> dict[str, object]:
        """Simple health check endpoint."""
        return {"status": "ok", "connections": container.runtime.count()}

    @app.exception_handler(DeviceNotFound)
    async def device_not_found(request: Request, exc: DeviceNotFound) -> JSONResponse:
        return _error_response(status.HTTP_404_NOT_FOUND, "Device not found")

    @app.exception_handler(DeviceAlreadyExists)
    async def device_exists(request: Request, exc: DeviceAlreadyExists) -> JSONResponse:
        return _error_response(status.HTTP_409_CONFLICT, str(exc))

    @app.exception_handler(InvalidPayload)
    async def invalid_payload(request: Request, exc: InvalidPayload) -> JSONResponse:
        return _error_response(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(RequestValidationError)
    async def invalid_body(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        fields = sorted({str(error["loc"][-1]) for error in exc.errors()})
        return _error_response(
            status.HTTP_400_BAD_REQUEST, f"Invalid request: {', '.join(fields)}"
        )

    @app.exception_handler(DeviceUnreachable)
    async def device_unreachable(
        request: Request, exc: DeviceUnreachable
    ) -> JSONResponse:
        detail = "Device is not reachable"
        if container.settings.environment == "local":
            detail = f"{detail} (debug: {exc})"
        return _error_response(status.HTTP_503_SERVICE_UNAVAILABLE, detail)

    return app


def _error_response(status_code: int, detail: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": detail})
