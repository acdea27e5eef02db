"""Run the hub with uvicorn."""

import uvicorn

from smartlight_hub.config import Settings


def main() -> None:
    """Serve the ASGI app on the configured host and port."""
    settings = Settings()
    uvicorn.run("smartlight_hub.api.asgi:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
