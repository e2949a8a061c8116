"""SQLAlchemy adapter – SqlAlchemySearchExecutor (async)."""
from __future__ import annotations

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from catalog_search.adapters.sqlalchemy.models import Product
from catalog_search.adapters.sqlalchemy.query import SqlAlchemyQueryContext
from catalog_search.application.pagination import PaginationParams
from catalog_search.application.search.criteria import SearchCriteriaCompiler


class SqlAlchemySearchExecutor:
    """Runs compiled product searches on an :class:`AsyncSession`.

    The category relation is joined only when the compiler asks for it.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    def build_statement(self, compiler: SearchCriteriaCompiler, pagination: PaginationParams | None = None) -> Any:
        stmt = select(Product).options(selectinload(Product.categories))
        if compiler.requires_join():
            stmt = stmt.join(Product.categories)
        stmt = compiler.compile_query(SqlAlchemyQueryContext(stmt)).statement
        if pagination is not None:
            stmt = stmt.offset(pagination.skip).limit(pagination.limit)
        return stmt

    def build_count_statement(self, compiler: SearchCriteriaCompiler) -> Any:
        stmt = select(func.count()).select_from(Product)
        return compiler.compile_count_query(SqlAlchemyQueryContext(stmt)).statement

    async def fetch(self, compiler: SearchCriteriaCompiler, pagination: PaginationParams) -> list[Product]:
        result = await self._session.execute(self.build_statement(compiler, pagination))
        return list(result.scalars().all())

    async def count(self, compiler: SearchCriteriaCompiler) -> int:
        """Run the count query inside a savepoint.

        A failed statement rolls back only to the savepoint, so the session
        stays usable for :meth:`count_base` on PostgreSQL.
        """
        async with self._session.begin_nested():
            result = await self._session.execute(self.build_count_statement(compiler))
            return int(result.scalar_one())

    async def count_base(self) -> int:
        stmt = (
            select(func.count())
            .select_from(Product)
            .where(Product.not_deleted_filter(), Product.is_active.is_(True))
        )
        result = await self._session.execute(stmt)
        return int(result.scalar_one())


__all__ = ["SqlAlchemySearchExecutor"]
