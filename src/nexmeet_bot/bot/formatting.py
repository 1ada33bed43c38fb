"""Rendering of event records into Telegram HTML messages."""

from datetime import datetime
from html import escape
from typing import Any, Optional

from dateutil import parser as date_parser

from ..store.models import Event


def ordinal(day: int) -> str:
    """Return the day of month with its English suffix (1st, 2nd, 11th...)."""
    if 11 <= day % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


def _parse(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return date_parser.parse(value)


def format_date(value: Optional[str], with_time: bool = False) -> str:
    """Format a stored date as ``October 18th 2026`` (optionally ``, 3:05 pm``)."""
    try:
        moment = _parse(value)
    except (ValueError, OverflowError):
        return "Invalid date"
    if moment is None:
        return "TBA"

    text = f"{moment.strftime('%B')} {ordinal(moment.day)} {moment.year}"
    if with_time:
        hour = moment.hour % 12 or 12
        meridiem = "am" if moment.hour < 12 else "pm"
        text += f", {hour}:{moment.minute:02d} {meridiem}"
    return text


def format_price(event: Event, currency_symbol: str = "₹") -> str:
    """Return ``Free`` for free events, otherwise the currency-prefixed price."""
    if event.is_event_free:
        return "Free"
    return f"{currency_symbol}{_text(event.event_price)}"


def _text(value: Any) -> str:
    return escape(str(value)) if value is not None else ""


def format_event_message(
    event: Event,
    event_url_base: str = "https://www.nexmeet.social/explore-events/",
    currency_symbol: str = "₹",
) -> str:
    """Render one event as an HTML block for Telegram."""
    lines = [
        f"<b>{_text(event.event_title)}</b>",
        "",
        f"📝 <b>Description:</b> {_text(event.event_description)}",
        f"📍 <b>Location:</b> {_text(event.event_location)}",
        f"📅 <b>Start Date:</b> {format_date(event.event_startdate, with_time=True)}",
        f"⏳ <b>Duration:</b> {_text(event.event_duration)} hours",
        f"👥 <b>Team Size:</b> {_text(event.team_size)}",
        f"💰 <b>Price:</b> {format_price(event, currency_symbol)}",
        "",
        "<b>Registration:</b>",
        f"• Start: {format_date(event.event_registration_startdate)}",
        f"• End: {format_date(event.event_registration_enddate)}",
    ]
    if event.redirection_link:
        lines.append(f"• Register: {_text(event.redirection_link)}")

    lines += [
        "",
        "<b>Organizer Details:</b>",
        f"• Name: {_text(event.organizer_name)}",
        f"• Email: {_text(event.organizer_email)}",
        f"• Contact: {_text(event.organizer_contact)}",
        "",
        f"🏷️ <b>Category:</b> {_text(event.event_category)}",
        f"❤️ <b>Likes:</b> {event.event_likes or 0}",
        "",
        f"🔗 <b>Event Link:</b> {_text(event.detail_url(event_url_base))}",
    ]
    return "\n".join(lines)
