"""ASGI entrypoint for the diapets reminder API."""

from diapets.api.app import create_app
from diapets.containers import build_container

app = create_app(build_container())
