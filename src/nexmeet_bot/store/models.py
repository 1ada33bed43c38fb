"""Data models for event records read from Supabase."""

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Event(BaseModel):
    """A single row of the events table.

    Columns are kept under their stored names and only the columns present
    in the row are returned to API clients. Columns not declared here are
    preserved as extras. Numbers in text columns are read as strings.
    """

    model_config = ConfigDict(
        extra="allow",
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    id: Union[int, str] = Field(..., description="Opaque event identifier")
    event_title: Optional[str] = None
    event_description: Optional[str] = None
    event_category: Optional[str] = None
    event_location: Optional[str] = None

    # Dates are stored as ISO strings and parsed at render time
    event_startdate: Optional[str] = None
    event_enddate: Optional[str] = None
    event_duration: Optional[Union[int, float, str]] = None
    team_size: Optional[Union[int, str]] = None
    event_registration_startdate: Optional[str] = None
    event_registration_enddate: Optional[str] = None
    redirection_link: Optional[str] = None

    is_event_free: Optional[bool] = Field(False, alias="isEventFree")
    event_price: Optional[Union[int, float, str]] = None

    organizer_name: Optional[str] = None
    organizer_email: Optional[str] = None
    organizer_contact: Optional[str] = None

    event_likes: Optional[int] = 0
    is_approved: Optional[bool] = None
    created_at: Optional[str] = None

    def detail_url(self, base_url: str) -> str:
        """Build the public detail-page URL for this event."""
        return f"{base_url.rstrip('/')}/{self.id}"

    def to_record(self) -> Dict[str, Any]:
        """Return the row as stored: undeclared columns kept, absent ones not filled in."""
        return self.model_dump(by_alias=True, mode="json", exclude_unset=True)
