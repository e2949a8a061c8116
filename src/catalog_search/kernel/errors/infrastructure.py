"""Infrastructure errors – data-store failures."""

from __future__ import annotations

from typing import Any

from catalog_search.kernel.errors.base import BaseError


class InfrastructureError(BaseError):
    """Infrastructure / I/O failure that is not a business rule violation."""

    default_code = "infrastructure_error"


class QueryExecutionError(InfrastructureError):
    """Executing a compiled search against the data store failed."""

    default_code = "query_execution_error"

    def __init__(
        self,
        message: str,
        *,
        cache_key: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.cache_key = cache_key
        if cache_key is not None:
            self.detail.setdefault("cache_key", cache_key)


__all__ = ["InfrastructureError", "QueryExecutionError"]
