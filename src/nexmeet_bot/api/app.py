"""
FastAPI application exposing the event queries over HTTP.

``create_app`` wires the routers, CORS, the ``/api`` throttle and a
catch-all error responder around an already constructed gateway. The
application runner serves the result with uvicorn alongside the bot.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .rate_limit import RateLimiter, RateLimitExceeded
from .routes import events, system
from .. import __version__
from ..config.settings import Settings
from ..store.gateway import EventGateway


logger = logging.getLogger(__name__)


def create_app(
    settings: Settings,
    gateway: EventGateway,
    rate_limiter: Optional[RateLimiter] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Parameters
    ----------
    settings : Settings
        Application settings; CORS origins and throttle limits are read
        from here.
    gateway : EventGateway
        Initialised gateway shared with the bot.
    rate_limiter : Optional[RateLimiter]
        Throttle applied to every ``/api`` route. Built from settings
        when omitted.

    Returns
    -------
    FastAPI
        A configured application instance.
    """
    app = FastAPI(title="NexMeet Event API", version=__version__)
    app.state.settings = settings
    app.state.gateway = gateway
    app.state.rate_limiter = rate_limiter or RateLimiter(
        max_requests=settings.rate_limit_max_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api = APIRouter(dependencies=[Depends(app.state.rate_limiter)])
    api.include_router(events.router, prefix="/events", tags=["events"])
    api.include_router(system.router, prefix="/system", tags=["system"])
    app.include_router(api, prefix="/api")
    app.include_router(system.health_router, tags=["system"])

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
        return JSONResponse(status_code=429, content={"error": str(exc)})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(status_code=500, content={"error": "Something went wrong!"})

    return app
