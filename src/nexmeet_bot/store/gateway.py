"""Read-only gateway to the events table hosted on Supabase."""

import logging
from datetime import datetime
from typing import Any, List, Optional

from supabase import AsyncClient, acreate_client

from .errors import DataStoreError
from .models import Event
from ..config.settings import Settings


logger = logging.getLogger(__name__)

APPROVAL_COLUMN = "is_approved"


class EventGateway:
    """Issues filter/sort/limit queries against the events table.

    Every listing is restricted to approved events. Any failure raised by
    the client surfaces as a single :class:`DataStoreError`.
    """

    def __init__(self, settings: Settings, client: Optional[AsyncClient] = None):
        """
        Initialize the gateway.

        Args:
            settings: Application settings
            client: Pre-built Supabase client; created on initialize() if omitted
        """
        self.settings = settings
        self.table_name = settings.events_table
        self.client = client

    async def initialize(self) -> None:
        """Create the Supabase client."""
        if self.client is not None:
            return
        try:
            self.client = await acreate_client(self.settings.supabase_url, self.settings.supabase_key)
            logger.info(f"Connected to Supabase table '{self.table_name}'")
        except Exception as e:
            logger.error(f"Failed to create Supabase client: {e}")
            raise

    async def shutdown(self) -> None:
        """Drop the client reference."""
        self.client = None
        logger.info("Event gateway shutdown complete")

    def _approved(self) -> Any:
        if self.client is None:
            raise DataStoreError("Event gateway not initialized")
        return self.client.table(self.table_name).select("*").eq(APPROVAL_COLUMN, True)

    async def _fetch(self, query: Any, description: str) -> List[Event]:
        try:
            response = await query.execute()
            return [Event.model_validate(row) for row in (response.data or [])]
        except DataStoreError:
            raise
        except Exception as e:
            logger.error(f"Query for {description} failed: {e}")
            raise DataStoreError(str(e)) from e

    async def list_active(self, now: datetime) -> List[Event]:
        """Events that have not ended yet, newest first."""
        query = (
            self._approved()
            .gt("event_enddate", now.isoformat())
            .order("created_at", desc=True)
        )
        return await self._fetch(query, "active events")

    async def list_past(self, now: datetime, limit: int = 5) -> List[Event]:
        """The most recently finished events."""
        query = (
            self._approved()
            .lt("event_enddate", now.isoformat())
            .order("event_enddate", desc=True)
            .limit(limit)
        )
        return await self._fetch(query, "past events")

    async def list_by_location(self, location: str) -> List[Event]:
        """Case-insensitive substring match on the location column."""
        query = self._approved().ilike("event_location", f"%{location}%")
        return await self._fetch(query, f"location '{location}'")

    async def list_by_category(self, category: str) -> List[Event]:
        """Case-insensitive substring match on the category column."""
        query = self._approved().ilike("event_category", f"%{category}%")
        return await self._fetch(query, f"category '{category}'")

    async def list_popular(self, limit: int = 5) -> List[Event]:
        """Events with the most likes."""
        query = self._approved().order("event_likes", desc=True).limit(limit)
        return await self._fetch(query, "popular events")

    async def search_by_text(self, text: str, limit: int = 5) -> List[Event]:
        """Full-text search over event descriptions.

        The query string is passed to the store unchanged; ranking is the
        store's own.
        """
        query = (
            self._approved()
            .text_search("event_description", text, options={"type": "plain"})
            .limit(limit)
        )
        return await self._fetch(query, f"text search '{text}'")

    async def check_connection(self) -> Optional[str]:
        """Probe the table and return the first row's creation time, if any.

        This is the only query not restricted to approved events.
        """
        if self.client is None:
            raise DataStoreError("Event gateway not initialized")
        try:
            response = await self.client.table(self.table_name).select("created_at").limit(1).execute()
        except Exception as e:
            logger.error(f"Database connectivity check failed: {e}")
            raise DataStoreError(str(e)) from e
        rows = response.data or []
        return rows[0].get("created_at") if rows else None

    def is_ready(self) -> bool:
        """Check if the gateway has a client."""
        return self.client is not None
