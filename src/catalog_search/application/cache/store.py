"""Application cache – SearchResultCache port and in-memory implementation."""
from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

__all__ = ["InMemorySearchResultCache", "SearchResultCache"]


@runtime_checkable
class SearchResultCache(Protocol):
    async def get(self, key: str) -> Any: ...
    async def set(self, key: str, value: Any, ttl: int) -> None: ...


class InMemorySearchResultCache:
    """In-memory SearchResultCache – for unit tests (no TTL enforcement)."""

    def __init__(self) -> None:
        self._data: dict[str, Any] = {}
        self.ttls: dict[str, int] = {}

    async def get(self, key: str) -> Any:
        return self._data.get(key)

    async def set(self, key: str, value: Any, ttl: int = 60) -> None:
        self._data[key] = value
        self.ttls[key] = ttl

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)
