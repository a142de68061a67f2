"""Compatibility score cache.

This module keeps computed compatibility results in process memory with a
time-to-live. Entries that are close to expiring are still served, while a
background task recomputes them so hot pairs never go cold.
"""

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

RefreshCallable = Callable[[], Awaitable[Any]]


class MatchScoreCache:
    """Cache for compatibility results keyed by user pair.

    This cache handles:
    - Expiry of entries older than ``ttl``
    - Background refresh of entries older than ``refresh_after``
    - FIFO eviction once ``max_size`` entries are stored
    - Invalidation of every entry involving a user

    Attributes:
        ttl: Lifetime of an entry in seconds
        refresh_after: Age in seconds after which a served entry is refreshed
        max_size: Maximum number of entries (0 = unlimited)
    """

    def __init__(
        self,
        ttl: float = 3600,
        refresh_after: float = 3000,
        max_size: int = 0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the score cache.

        Args:
            ttl: Lifetime of an entry in seconds
            refresh_after: Age in seconds after which a served entry is refreshed
            max_size: Maximum number of entries (0 = unlimited)
            clock: Monotonic time source, replaceable in tests
        """
        self.ttl = ttl
        self.refresh_after = refresh_after
        self.max_size = max_size
        self._clock = clock
        self._entries: Dict[str, Tuple[Any, float]] = {}
        self._refreshing: Dict[str, asyncio.Task] = {}
        self._lock = asyncio.Lock()

    async def get(self, key: str, refresh: Optional[RefreshCallable] = None) -> Optional[Any]:
        """Get a cached value.

        Args:
            key: Cache key
            refresh: Coroutine factory recomputing the value, scheduled in the
                background when the entry is older than ``refresh_after``

        Returns:
            The cached value, or None on a miss or an expired entry
        """
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, stored_at = entry
            age = self._clock() - stored_at
            if age > self.ttl:
                del self._entries[key]
                return None
            if refresh is not None and age > self.refresh_after and key not in self._refreshing:
                self._refreshing[key] = asyncio.create_task(self._refresh(key, refresh))
            return value

    async def set(self, key: str, value: Any) -> None:
        """Store a value.

        Args:
            key: Cache key
            value: Value to cache
        """
        async with self._lock:
            self._store(key, value)

    async def invalidate_user(self, user_id: int) -> int:
        """Drop every entry whose key involves ``user_id``.

        Returns:
            Number of removed entries
        """
        needle = str(user_id)
        async with self._lock:
            stale = [key for key in self._entries if needle in key.split(":")[1:3]]
            for key in stale:
                del self._entries[key]
        if stale:
            logger.debug(f"Invalidated {len(stale)} cached scores for user {user_id}")
        return len(stale)

    async def clear(self) -> None:
        """Remove every entry."""
        async with self._lock:
            self._entries.clear()

    def size(self) -> int:
        """Get the current cache size."""
        return len(self._entries)

    async def close(self) -> None:
        """Cancel pending background refreshes and clear the cache."""
        tasks = list(self._refreshing.values())
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._refreshing.clear()
        await self.clear()

    def _store(self, key: str, value: Any) -> None:
        if key not in self._entries and self.max_size > 0 and len(self._entries) >= self.max_size:
            # Remove oldest entry (simple FIFO)
            oldest_key = next(iter(self._entries))
            del self._entries[oldest_key]
        self._entries[key] = (value, self._clock())

    async def _refresh(self, key: str, refresh: RefreshCallable) -> None:
        try:
            value = await refresh()
            async with self._lock:
                self._entries.pop(key, None)
                self._store(key, value)
            logger.debug(f"Refreshed cached score {key}")
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning(f"Background refresh of {key} failed: {e}")
        finally:
            self._refreshing.pop(key, None)

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
