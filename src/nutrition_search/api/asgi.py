"""ASGI entrypoint for the nutrition search API."""

from nutrition_search.api.app import create_app
from nutrition_search.containers import build_container

app = create_app(build_container())
