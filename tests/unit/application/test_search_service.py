"""Unit tests for ProductSearchService – caching, count fallback, error wrapping."""
from __future__ import annotations

import asyncio
import uuid

import pytest

from catalog_search.application.cache import InMemorySearchResultCache
from catalog_search.application.pagination import Page
from catalog_search.application.search import (
    ProductSearchService,
    SearchCriteriaCompiler,
    SearchQueryExecutor,
    SearchRequest,
)
from catalog_search.config.settings import SearchSettings
from catalog_search.kernel.errors import QueryExecutionError


class FakeExecutor:
    """Executor over an in-memory list; records what it was asked to run."""

    def __init__(self, items: list[str], *, count_error: Exception | None = None, fetch_error: Exception | None = None) -> None:
        self.items = items
        self.count_error = count_error
        self.fetch_error = fetch_error
        self.fetch_calls: list[tuple[SearchCriteriaCompiler, object]] = []
        self.count_calls = 0
        self.base_count_calls = 0

    async def fetch(self, compiler, pagination):
        await asyncio.sleep(0)
        self.fetch_calls.append((compiler, pagination))
        if self.fetch_error is not None:
            raise self.fetch_error
        return self.items[pagination.skip: pagination.skip + pagination.limit]

    async def count(self, compiler):
        await asyncio.sleep(0)
        self.count_calls += 1
        if self.count_error is not None:
            raise self.count_error
        return len(self.items)

    async def count_base(self):
        self.base_count_calls += 1
        return 999


def _items(n: int) -> list[str]:
    return [f"p{i}" for i in range(n)]


class TestProductSearchService:
    def test_executor_protocol(self):
        assert isinstance(FakeExecutor([]), SearchQueryExecutor)

    def test_returns_requested_page(self):
        service = ProductSearchService(FakeExecutor(_items(25)))
        page = asyncio.run(service.search(SearchRequest(page=2, limit=10)))
        assert isinstance(page, Page)
        assert page.items == [f"p{i}" for i in range(10, 20)]
        assert page.total == 25
        assert page.total_pages == 3

    def test_limit_is_clamped_before_fetch(self):
        executor = FakeExecutor(_items(150))
        page = asyncio.run(ProductSearchService(executor).search(SearchRequest(limit=500)))
        assert page.limit == 100
        assert len(page.items) == 100
        assert executor.fetch_calls[0][1].limit == 100

    def test_compiler_receives_request_and_settings(self):
        executor = FakeExecutor([])
        settings = SearchSettings(text_search_language="english")
        request = SearchRequest(search="shoes", category_id=uuid.uuid4())
        asyncio.run(ProductSearchService(executor, settings=settings).search(request))
        compiler = executor.fetch_calls[0][0]
        assert compiler.request == request
        assert compiler.requires_join() is True
        assert "to_tsvector('english'" in compiler.plan().where_sql[2]

    def test_count_failure_falls_back_to_base_count(self):
        executor = FakeExecutor(_items(3), count_error=RuntimeError("count exploded"))
        page = asyncio.run(ProductSearchService(executor).search(SearchRequest()))
        assert page.total == 999
        assert page.items == _items(3)
        assert executor.base_count_calls == 1

    def test_fetch_failure_wrapped(self):
        boom = RuntimeError("db down")
        executor = FakeExecutor([], fetch_error=boom)
        request = SearchRequest(search="laptop")
        with pytest.raises(QueryExecutionError) as exc_info:
            asyncio.run(ProductSearchService(executor).search(request))
        err = exc_info.value
        assert err.cause is boom
        assert err.__cause__ is boom
        assert err.cache_key == SearchCriteriaCompiler(request).get_cache_key()
        assert "db down" in err.message


class TestProductSearchServiceCaching:
    def test_result_is_cached_with_ttl(self):
        cache = InMemorySearchResultCache()
        settings = SearchSettings(cache_ttl_seconds=120)
        request = SearchRequest(search="laptop")
        asyncio.run(ProductSearchService(FakeExecutor(_items(2)), cache, settings).search(request))
        key = SearchCriteriaCompiler(request, settings).get_cache_key()
        assert key in cache
        assert cache.ttls[key] == 120

    def test_cache_hit_skips_executor(self):
        cache = InMemorySearchResultCache()
        executor = FakeExecutor(_items(2))
        service = ProductSearchService(executor, cache)
        first = asyncio.run(service.search(SearchRequest(page=1)))
        second = asyncio.run(service.search(SearchRequest(page=1)))
        assert second is first
        assert len(executor.fetch_calls) == 1
        assert executor.count_calls == 1

    def test_different_requests_do_not_share_entries(self):
        cache = InMemorySearchResultCache()
        executor = FakeExecutor(_items(30))
        service = ProductSearchService(executor, cache)
        asyncio.run(service.search(SearchRequest(page=1)))
        asyncio.run(service.search(SearchRequest(page=2)))
        assert len(executor.fetch_calls) == 2
        assert len(cache) == 2

    def test_failed_search_is_not_cached(self):
        cache = InMemorySearchResultCache()
        executor = FakeExecutor([], fetch_error=RuntimeError("x"))
        with pytest.raises(QueryExecutionError):
            asyncio.run(ProductSearchService(executor, cache).search(SearchRequest()))
        assert len(cache) == 0

    def test_concurrent_identical_searches_load_once(self):
        cache = InMemorySearchResultCache()
        executor = FakeExecutor(_items(5))
        service = ProductSearchService(executor, cache)

        async def run():
            return await asyncio.gather(*(service.search(SearchRequest(search="laptop")) for _ in range(5)))

        pages = asyncio.run(run())
        assert len(executor.fetch_calls) == 1
        assert executor.count_calls == 1
        assert all(page is pages[0] for page in pages)
