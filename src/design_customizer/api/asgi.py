"""ASGI entrypoint for the design customizer API."""

from design_customizer.api.app import create_app
from design_customizer.containers import build_container

app = create_app(build_container())
