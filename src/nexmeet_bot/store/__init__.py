"""Event store access."""

from .errors import DataStoreError
from .gateway import EventGateway
from .models import Event

__all__ = [
    'DataStoreError',
    'Event',
    'EventGateway',
]
