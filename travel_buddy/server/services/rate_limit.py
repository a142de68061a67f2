"""
Request rate limiting.

A small in-process sliding window limiter and the FastAPI dependencies that
apply it to swipes, discovery, logins and sensitive account operations.
Limits are per process; behind several workers each worker counts on its own.
"""

from __future__ import annotations

import asyncio
import logging
import math
import time
from collections import deque
from typing import Callable, Deque, Dict, Optional

from fastapi import Depends, Request

from travel_buddy.core.database.entities.users import User
from travel_buddy.core.exceptions import RateLimitExceeded
from travel_buddy.server.core.config import settings

from .auth import get_current_user, get_optional_user

logger = logging.getLogger(__name__)


class SlidingWindowRateLimiter:
    """Allow at most ``max_requests`` hits per key within ``window_seconds``.

    Attributes:
        max_requests: Hits allowed per window
        window_seconds: Window length in seconds
        message: Error message used when the limit is exceeded
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        message: str = "Too many requests, please try again later.",
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.message = message
        self._clock = clock
        self._hits: Dict[str, Deque[float]] = {}
        self._swept_at = clock()
        self._lock = asyncio.Lock()

    def _sweep(self, now: float) -> None:
        """Forget keys whose newest hit has left the window, at most once per window."""
        if now - self._swept_at < self.window_seconds:
            return
        cutoff = now - self.window_seconds
        idle = [key for key, hits in self._hits.items() if not hits or hits[-1] <= cutoff]
        for key in idle:
            del self._hits[key]
        self._swept_at = now

    async def hit(self, key: str) -> int:
        """Count one request for ``key``.

        Returns:
            Number of requests still allowed in the current window

        Raises:
            RateLimitExceeded: The key already used up its window
        """
        async with self._lock:
            now = self._clock()
            self._sweep(now)
            hits = self._hits.setdefault(key, deque())
            while hits and hits[0] <= now - self.window_seconds:
                hits.popleft()
            if len(hits) >= self.max_requests:
                retry_after = math.ceil(hits[0] + self.window_seconds - now)
                logger.warning(f"Rate limit exceeded for {key}")
                raise RateLimitExceeded(self.message, retry_after=max(retry_after, 1))
            hits.append(now)
            return self.max_requests - len(hits)

    async def reset(self) -> None:
        async with self._lock:
            self._hits.clear()


_limits = settings.rate_limit

swipe_limiter = SlidingWindowRateLimiter(
    _limits.swipe_max, _limits.swipe_window_seconds, "Swipe limit reached, please slow down."
)
matches_limiter = SlidingWindowRateLimiter(
    _limits.matches_max, _limits.matches_window_seconds, "Too many requests, please try again later."
)
auth_limiter = SlidingWindowRateLimiter(
    _limits.auth_max,
    _limits.auth_window_seconds,
    "Too many login attempts from this IP, please try again after a minute",
)
sensitive_limiter = SlidingWindowRateLimiter(
    _limits.sensitive_max,
    _limits.sensitive_window_seconds,
    "Too many attempts for this operation, please try again later.",
)

ALL_LIMITERS = (swipe_limiter, matches_limiter, auth_limiter, sensitive_limiter)


def _enabled() -> bool:
    return settings.rate_limit.enabled


async def swipe_rate_limit(user: User = Depends(get_current_user)) -> None:
    if _enabled():
        await swipe_limiter.hit(f"user:{user.id}")


async def matches_rate_limit(user: User = Depends(get_current_user)) -> None:
    if _enabled():
        await matches_limiter.hit(f"user:{user.id}")


async def auth_rate_limit(request: Request) -> None:
    if _enabled():
        host = request.client.host if request.client else "unknown"
        await auth_limiter.hit(f"ip:{host}")


async def sensitive_rate_limit(request: Request, user: Optional[User] = Depends(get_optional_user)) -> None:
    """Limit sensitive account operations by user when logged in, else by client host."""
    if not _enabled():
        return
    if user is not None:
        key = f"user:{user.id}"
    else:
        key = f"ip:{request.client.host if request.client else 'unknown'}"
    await sensitive_limiter.hit(key)


async def reset_all_limiters() -> None:
    for limiter in ALL_LIMITERS:
        await limiter.reset()
