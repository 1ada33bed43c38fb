"""Per-chat conversation state."""

from .models import ChatSession, PendingInteraction
from .store import SessionStore

__all__ = [
    'ChatSession',
    'PendingInteraction',
    'SessionStore',
]
