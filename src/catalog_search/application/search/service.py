"""Application search – ProductSearchService and the SearchQueryExecutor port."""
from __future__ import annotations

from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

from catalog_search.application.cache import CacheAsidePolicy, SearchResultCache
from catalog_search.application.pagination import Page, PaginationParams
from catalog_search.application.search.criteria import SearchCriteriaCompiler
from catalog_search.application.search.request import SearchRequest
from catalog_search.config.settings import SearchSettings
from catalog_search.kernel.errors import QueryExecutionError
from catalog_search.observability.logging import get_logger

T = TypeVar("T")

__all__ = ["ProductSearchService", "SearchQueryExecutor"]

logger = get_logger(__name__)


@runtime_checkable
class SearchQueryExecutor(Protocol[T]):
    """Port: runs compiled searches against a data store."""

    async def fetch(self, compiler: SearchCriteriaCompiler, pagination: PaginationParams) -> list[T]: ...
    async def count(self, compiler: SearchCriteriaCompiler) -> int: ...
    async def count_base(self) -> int: ...


class ProductSearchService(Generic[T]):
    """Runs a product search end to end.

    1. Serve from *cache* when the request's cache key is present.
       Concurrent misses on one key share a single load.
    2. Count with the join-free count query; if that fails, fall back to
       counting every active, non-deleted product.
    3. Fetch the requested page with the full query.
    4. Store the resulting :class:`Page` under the cache key.
    """

    def __init__(
        self,
        executor: SearchQueryExecutor[T],
        cache: SearchResultCache | None = None,
        settings: SearchSettings | None = None,
    ) -> None:
        self._executor = executor
        self._settings = settings or SearchSettings()
        self._cache_policy: CacheAsidePolicy[Page[T]] | None = (
            CacheAsidePolicy(cache, ttl=self._settings.cache_ttl_seconds) if cache is not None else None
        )

    async def search(self, request: SearchRequest) -> Page[T]:
        compiler = SearchCriteriaCompiler(request, self._settings)
        cache_key = compiler.get_cache_key()
        log = logger.bind(cache_key=cache_key)

        if self._cache_policy is None:
            return await self._load(request, compiler, log)
        return await self._cache_policy.get_or_load(
            cache_key, lambda: self._load(request, compiler, log)
        )

    async def _load(self, request: SearchRequest, compiler: SearchCriteriaCompiler, log: Any) -> Page[T]:
        pagination = compiler.get_pagination_params()
        try:
            total = await self._count(compiler, log)
            items = await self._executor.fetch(compiler, pagination)
        except Exception as exc:
            log.error("search.failed", error=str(exc), request=request)
            raise QueryExecutionError(
                f"Failed to search products: {exc}", cache_key=compiler.get_cache_key(), cause=exc
            ) from exc

        page: Page[T] = Page(items=items, total=total, page=pagination.page, limit=pagination.limit)
        log.info(
            "search.completed",
            total=total,
            returned=len(items),
            page=pagination.page,
            limit=pagination.limit,
        )
        return page

    async def _count(self, compiler: SearchCriteriaCompiler, log: Any) -> int:
        try:
            return await self._executor.count(compiler)
        except Exception as exc:  # noqa: BLE001
            log.warning("search.count_failed", error=str(exc))
            return await self._executor.count_base()
