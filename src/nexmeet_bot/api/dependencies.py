"""Shared FastAPI dependencies."""

from fastapi import Request

from ..config.settings import Settings
from ..store.gateway import EventGateway


def get_gateway(request: Request) -> EventGateway:
    """Return the event gateway attached to the running app."""
    return request.app.state.gateway


def get_settings(request: Request) -> Settings:
    """Return the settings attached to the running app."""
    return request.app.state.settings
