"""Data models for pending chat interactions."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PendingInteraction(str, Enum):
    """The follow-up answer a chat is expected to send next."""
    AWAITING_LOCATION = "AWAITING_LOCATION"
    AWAITING_CATEGORY = "AWAITING_CATEGORY"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ChatSession(BaseModel):
    """One pending interaction for a chat."""

    model_config = ConfigDict(frozen=True)

    chat_id: int = Field(..., description="Telegram chat identifier")
    state: PendingInteraction = Field(..., description="What the chat was asked for")
    created_at: datetime = Field(default_factory=_utcnow, description="When the prompt was sent")

    def is_expired(self, ttl_seconds: Optional[int], now: datetime) -> bool:
        """Check whether the session outlived the configured TTL."""
        if ttl_seconds is None:
            return False
        return (now - self.created_at).total_seconds() > ttl_seconds
