"""Multi-turn location and category searches."""

import logging
from typing import Any, Awaitable, Callable, List

from telegram.constants import ParseMode

from ..sessions.models import PendingInteraction
from ..sessions.store import SessionStore
from ..store.gateway import EventGateway
from ..store.models import Event


logger = logging.getLogger(__name__)

# Sends one message to the chat currently being served: reply(text, **kwargs)
Reply = Callable[..., Awaitable[Any]]
Renderer = Callable[[Event], str]

PROMPTS = {
    PendingInteraction.AWAITING_LOCATION: "📍 Please enter the location you want to search for:",
    PendingInteraction.AWAITING_CATEGORY: "🏷️ Please enter the category you want to search for:",
}

SEARCH_FAILED = "Sorry, there was an error processing your request. Please try again later."


async def send_events(reply: Reply, events: List[Event], render: Renderer) -> None:
    """Send each event as its own HTML message, in order."""
    for event in events:
        await reply(render(event), parse_mode=ParseMode.HTML)


class SearchConversation:
    """State machine for searches that need a follow-up answer.

    Choosing "search by location" or "search by category" records a pending
    interaction for the chat; the next text message from that chat is
    taken as the search term and consumes it.
    """

    def __init__(self, sessions: SessionStore, gateway: EventGateway, render: Renderer):
        self.sessions = sessions
        self.gateway = gateway
        self.render = render

    async def prompt(self, chat_id: int, interaction: PendingInteraction, reply: Reply) -> None:
        """Ask the chat for a search term, replacing any earlier question."""
        await self.sessions.begin(chat_id, interaction)
        await reply(PROMPTS[interaction])

    async def handle_text(self, chat_id: int, text: str, reply: Reply) -> bool:
        """Answer a pending question with ``text``.

        Returns False, without side effects, when nothing was pending.
        """
        # Consumed before querying so a failed search cannot leave it behind
        state = await self.sessions.consume(chat_id)
        if state is None:
            return False

        try:
            if state is PendingInteraction.AWAITING_LOCATION:
                await self._search_location(text, reply)
            else:
                await self._search_category(text, reply)
        except Exception as e:
            logger.error(f"Error processing {state.value} reply from chat {chat_id}: {e}")
            await reply(SEARCH_FAILED)
        return True

    async def _search_location(self, location: str, reply: Reply) -> None:
        await reply(f"🔍 Searching for events in {location}...")
        events = await self.gateway.list_by_location(location)
        if not events:
            await reply(f"📭 No events found in {location}")
            return
        await reply(f"📍 Found {len(events)} events in {location}:")
        await send_events(reply, events, self.render)

    async def _search_category(self, category: str, reply: Reply) -> None:
        await reply(f"🔍 Searching for events in category {category}...")
        events = await self.gateway.list_by_category(category)
        if not events:
            await reply(f"📭 No events found in category {category}")
            return
        await reply(f"🏷️ Found {len(events)} events in category {category}:")
        await send_events(reply, events, self.render)
