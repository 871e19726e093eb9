"""ASGI entrypoint for the beverage tracker API."""

from beverage_tracker.api.app import create_app
from beverage_tracker.containers import build_container

app = create_app(build_container())
