"""Application cache – CacheAsidePolicy."""
from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Generic, TypeVar

from catalog_search.application.cache.store import SearchResultCache

__all__ = ["CacheAsidePolicy"]

T = TypeVar("T")


class CacheAsidePolicy(Generic[T]):
    """Cache-aside (lazy loading) with per-key stampede protection.

    Concurrent misses on the same key wait for a single *loader* call; the
    others re-read the cache once the lock is released.  A loader that
    raises stores nothing.
    """

    def __init__(self, cache: SearchResultCache, ttl: int = 60) -> None:
        self._cache = cache
        self._ttl = ttl
        self._locks: dict[str, asyncio.Lock] = {}

    async def get_or_load(self, key: str, loader: Callable[[], Awaitable[T]]) -> T:
        cached = await self._cache.get(key)
        if cached is not None:
            return cached

        lock = self._locks.setdefault(key, asyncio.Lock())
        try:
            async with lock:
                # another coroutine may have loaded it while we waited
                cached = await self._cache.get(key)
                if cached is not None:
                    return cached
                value = await loader()
                await self._cache.set(key, value, ttl=self._ttl)
                return value
        finally:
            if not lock.locked() and self._locks.get(key) is lock:
                del self._locks[key]

    @property
    def pending_keys(self) -> int:
        """Number of keys with a load in flight or queued."""
        return len(self._locks)
