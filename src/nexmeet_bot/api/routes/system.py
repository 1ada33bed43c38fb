"""
System endpoints.

``/api/system/status`` reports the server and probes the database;
``/health`` only confirms the process is alive and touches nothing
external.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..dependencies import get_gateway, get_settings
from ...config.settings import Settings
from ...store.errors import DataStoreError
from ...store.gateway import EventGateway


router = APIRouter()
health_router = APIRouter()


def utc_timestamp() -> str:
    """Current time as ISO 8601 in UTC with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@router.get("/status")
async def system_status(
    settings: Settings = Depends(get_settings),
    gateway: EventGateway = Depends(get_gateway),
):
    """Check that the server is running and the database answers."""
    server: Dict[str, Any] = {
        "status": "running",
        "timestamp": utc_timestamp(),
        "environment": settings.environment,
    }
    try:
        created_at = await gateway.check_connection()
    except DataStoreError as e:
        return JSONResponse(
            status_code=500,
            content={
                "status": "error",
                "server": server,
                "database": {"status": "error", "error": str(e)},
            },
        )

    return {
        "status": "ok",
        "server": server,
        "database": {"status": "connected", "timestamp": created_at or utc_timestamp()},
    }


@health_router.get("/health")
async def health():
    return {"status": "ok", "timestamp": utc_timestamp()}
