"""
Event endpoints.

Read-only views over approved events, mirroring the queries offered by
the bot menu. Store failures are reported as ``500`` with an ``error``
message; an empty result is a normal ``200`` with ``[]``.
"""

import logging
from datetime import datetime, timezone
from typing import Awaitable, List

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..dependencies import get_gateway
from ...store.errors import DataStoreError
from ...store.gateway import EventGateway
from ...store.models import Event


logger = logging.getLogger(__name__)

router = APIRouter()


async def _respond(query: Awaitable[List[Event]]):
    try:
        events = await query
    except DataStoreError as e:
        return JSONResponse(status_code=500, content={"error": str(e)})
    return [event.to_record() for event in events]


@router.get("/active")
async def active_events(gateway: EventGateway = Depends(get_gateway)):
    """Events that have not ended yet, newest first."""
    return await _respond(gateway.list_active(datetime.now(timezone.utc)))


@router.get("/past")
async def past_events(gateway: EventGateway = Depends(get_gateway)):
    """The five most recently finished events."""
    return await _respond(gateway.list_past(datetime.now(timezone.utc)))


@router.get("/location/{location}")
async def events_by_location(location: str, gateway: EventGateway = Depends(get_gateway)):
    return await _respond(gateway.list_by_location(location))


@router.get("/category/{category}")
async def events_by_category(category: str, gateway: EventGateway = Depends(get_gateway)):
    return await _respond(gateway.list_by_category(category))


@router.get("/popular")
async def popular_events(gateway: EventGateway = Depends(get_gateway)):
    """The five most liked events."""
    return await _respond(gateway.list_popular())
