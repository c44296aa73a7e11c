"""ASGI entrypoint for the diet manager API."""

from diet_manager.api.app import create_app
from diet_manager.containers import build_container

app = create_app(build_container())
