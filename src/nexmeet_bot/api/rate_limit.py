"""Fixed-window request throttle for the public API."""

import json
import logging
import time
from typing import Callable, Dict, Optional, Tuple

from fastapi import Request


logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Too many requests, please try again tomorrow"


class RateLimitExceeded(Exception):
    """A client used up its request budget for the current window."""

    def __init__(self, key: str):
        super().__init__(RATE_LIMIT_MESSAGE)
        self.key = key


class RateLimiter:
    """Counts requests per client within fixed windows.

    Used as a FastAPI dependency. Clients are identified by the Telegram
    chat id in a JSON body when there is one, otherwise by address;
    requests that carry neither are not counted.
    """

    # Expired windows are swept once the table grows past this size
    PRUNE_THRESHOLD = 10_000

    def __init__(
        self,
        max_requests: int,
        window_seconds: int,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        # key -> (window start, hits in window)
        self._windows: Dict[str, Tuple[float, int]] = {}

    def hit(self, key: str) -> bool:
        """Record one request for ``key``; False once the budget is spent."""
        now = self._clock()
        start, count = self._windows.get(key, (now, 0))
        if now - start >= self.window_seconds:
            start, count = now, 0
        count += 1
        self._windows[key] = (start, count)

        if len(self._windows) > self.PRUNE_THRESHOLD:
            self._prune(now)
        return count <= self.max_requests

    def reset(self) -> None:
        self._windows.clear()

    def _prune(self, now: float) -> None:
        expired = [k for k, (start, _) in self._windows.items() if now - start >= self.window_seconds]
        for key in expired:
            del self._windows[key]

    @staticmethod
    async def client_key(request: Request) -> Optional[str]:
        """Identify the caller by chat id, falling back to its address."""
        body = await request.body()
        if body:
            try:
                payload = json.loads(body)
            except ValueError:
                payload = None
            if isinstance(payload, dict):
                chat = (payload.get("message") or {}).get("chat") or {}
                if isinstance(chat, dict) and chat.get("id") is not None:
                    return f"chat:{chat['id']}"

        if request.client and request.client.host:
            return f"ip:{request.client.host}"
        return None

    async def __call__(self, request: Request) -> None:
        key = await self.client_key(request)
        if key is None:
            return
        if not self.hit(key):
            logger.warning(f"Rate limit exceeded for {key} on {request.url.path}")
            raise RateLimitExceeded(key)
