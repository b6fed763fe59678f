"""ASGI entrypoint for the print bot webhook API."""

from print_bot.api.app import create_app
from print_bot.containers import build_container

app = create_app(build_container())
