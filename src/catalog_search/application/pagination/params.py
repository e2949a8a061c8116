"""Application pagination – PaginationParams."""
from __future__ import annotations

import dataclasses

from catalog_search.kernel.ddd import ValueObject


@dataclasses.dataclass(frozen=True)
class PaginationParams(ValueObject):
    """Offset-based pagination derived from a search request.

    ``skip`` is always ``(page - 1) * limit``.
    """
    page: int = 1
    limit: int = 20
    skip: int = 0

    @classmethod
    def clamp(cls, page: int | None, limit: int | None, *, default_limit: int = 20, max_limit: int = 100) -> "PaginationParams":
        """Build params from possibly out-of-range input without raising.

        Missing or non-positive ``page`` becomes 1; missing or non-positive
        ``limit`` becomes *default_limit*; ``limit`` is capped at *max_limit*.
        """
        effective_page = page if page is not None and page >= 1 else 1
        effective_limit = limit if limit is not None and limit >= 1 else default_limit
        effective_limit = min(effective_limit, max_limit)
        return cls(
            page=effective_page,
            limit=effective_limit,
            skip=(effective_page - 1) * effective_limit,
        )

    def to_dict(self) -> dict[str, int]:
        return {"page": self.page, "limit": self.limit, "skip": self.skip}


__all__ = ["PaginationParams"]
