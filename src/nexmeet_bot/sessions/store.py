"""In-memory store of pending chat interactions."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, Dict, Optional

from .models import ChatSession, PendingInteraction


logger = logging.getLogger(__name__)


class SessionStore:
    """Maps chat ids to at most one pending interaction.

    Owned by the application runner and shared by the bot handlers. All
    mutations go through an asyncio lock so that ``consume`` is an atomic
    read-and-delete.
    """

    def __init__(
        self,
        ttl_seconds: Optional[int] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize the session store.

        Args:
            ttl_seconds: Age after which a pending interaction is discarded;
                None keeps it until it is consumed or the process exits
            clock: Source of the current time, for tests
        """
        self.ttl_seconds = ttl_seconds
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._sessions: Dict[int, ChatSession] = {}
        self._lock = asyncio.Lock()

    async def begin(self, chat_id: int, state: PendingInteraction) -> ChatSession:
        """Record a pending interaction, replacing any previous one."""
        session = ChatSession(chat_id=chat_id, state=state, created_at=self._clock())
        async with self._lock:
            previous = self._sessions.get(chat_id)
            self._sessions[chat_id] = session
        if previous is not None and previous.state != state:
            logger.debug(f"Chat {chat_id}: {previous.state.value} replaced by {state.value}")
        return session

    async def consume(self, chat_id: int) -> Optional[PendingInteraction]:
        """Remove and return the pending interaction for a chat, if any."""
        async with self._lock:
            session = self._sessions.pop(chat_id, None)
        if session is None:
            return None
        if session.is_expired(self.ttl_seconds, self._clock()):
            logger.info(f"Discarded expired {session.state.value} session for chat {chat_id}")
            return None
        return session.state

    async def peek(self, chat_id: int) -> Optional[PendingInteraction]:
        """Return the pending interaction without consuming it."""
        async with self._lock:
            session = self._sessions.get(chat_id)
            if session is not None and session.is_expired(self.ttl_seconds, self._clock()):
                del self._sessions[chat_id]
                session = None
        return session.state if session else None

    def __len__(self) -> int:
        return len(self._sessions)
