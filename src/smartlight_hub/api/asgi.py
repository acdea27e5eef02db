"""ASGI entrypoint for the smart light hub."""

from smartlight_hub.api.app import create_app
from smartlight_hub.containers import build_container

app = create_app(build_container())
