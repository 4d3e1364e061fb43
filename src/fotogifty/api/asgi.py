"""ASGI entrypoint for the order backend."""

from fotogifty.api.app import create_app
from fotogifty.containers import build_container

app = create_app(build_container())
