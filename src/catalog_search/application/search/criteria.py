"""Application search – SearchCriteriaCompiler.

Compiles a :class:`SearchRequest` into filter and sort calls on a
:class:`QueryContext`, plus pagination, join hint and cache key.

Filter stages run in a fixed order; every stage after the base filters is
conjunctive with them::

    base -> text search -> category -> price -> stock -> rating -> sort

The count variant skips the category stage (it needs a join) and replaces
the text search with a plain ``ILIKE`` match.  Both make the count an
over-estimate in edge cases, which is accepted in exchange for a cheap
single-table count.
"""
from __future__ import annotations

from typing import TypeVar

from catalog_search.application.cache import CacheKey
from catalog_search.application.pagination import PaginationParams
from catalog_search.application.search.context import CompiledQuery, QueryContext, QueryPlanBuilder
from catalog_search.application.search.query import (
    AnyOf,
    Between,
    Compare,
    FullTextMatch,
    ILike,
    IsNull,
    NullsPolicy,
    Param,
    Similar,
    SortOrder,
)
from catalog_search.application.search.request import ProductSortBy, SearchRequest
from catalog_search.config.settings import SearchSettings
from catalog_search.observability.logging import get_logger

__all__ = ["CategoryField", "ProductField", "SORT_FIELDS", "SearchCriteriaCompiler"]

logger = get_logger(__name__)

TContext = TypeVar("TContext", bound=QueryContext)


class ProductField:
    ID = "product.id"
    NAME = "product.name"
    DESCRIPTION = "product.description"
    PRICE = "product.price"
    STOCK = "product.stock"
    RATING = "product.rating"
    IS_ACTIVE = "product.is_active"
    DELETED_AT = "product.deleted_at"
    CREATED_AT = "product.created_at"
    ORDER_COUNT = "product.order_count"
    VIEW_COUNT = "product.view_count"


class CategoryField:
    ID = "category.id"


SORT_FIELDS: dict[ProductSortBy, str] = {
    ProductSortBy.NAME: ProductField.NAME,
    ProductSortBy.PRICE: ProductField.PRICE,
    ProductSortBy.CREATED_AT: ProductField.CREATED_AT,
    ProductSortBy.RATING: ProductField.RATING,
    ProductSortBy.POPULARITY: ProductField.ORDER_COUNT,
    ProductSortBy.VIEWS: ProductField.VIEW_COUNT,
}


class SearchCriteriaCompiler:
    """Stateless compiler over one immutable :class:`SearchRequest`.

    Create one per incoming search and discard it afterwards.  It performs
    no I/O and raises nothing of its own; a failing context propagates
    untouched.
    """

    def __init__(self, request: SearchRequest, settings: SearchSettings | None = None) -> None:
        self._request = request
        self._settings = settings or SearchSettings()

    @property
    def request(self) -> SearchRequest:
        return self._request

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def compile_query(self, context: TContext) -> TContext:
        """Apply every filter stage and the sort stage to *context*."""
        self._apply_base_filters(context)
        self._apply_text_search(context)
        self._apply_category_filter(context)
        self._apply_price_filter(context)
        self._apply_stock_filter(context)
        self._apply_rating_filter(context)
        self._apply_sorting(context)
        logger.debug(
            "search.compiled",
            variant="full",
            cache_key=self.get_cache_key(),
            requires_join=self.requires_join(),
        )
        return context

    def compile_count_query(self, context: TContext) -> TContext:
        """Apply the join-free filters used to count matches."""
        self._apply_base_filters(context)
        self._apply_simple_text_search(context)
        self._apply_price_filter(context)
        self._apply_stock_filter(context)
        self._apply_rating_filter(context)
        # category filter omitted: it needs a join, so the count may over-estimate
        logger.debug("search.compiled", variant="count", cache_key=self.get_cache_key())
        return context

    def plan(self) -> CompiledQuery:
        """Shortcut: :meth:`compile_query` onto a fresh :class:`QueryPlanBuilder`."""
        return self.compile_query(QueryPlanBuilder()).build()

    def count_plan(self) -> CompiledQuery:
        return self.compile_count_query(QueryPlanBuilder()).build()

    def get_pagination_params(self) -> PaginationParams:
        return PaginationParams.clamp(
            self._request.page,
            self._request.limit,
            default_limit=self._settings.default_limit,
            max_limit=self._settings.max_limit,
        )

    def requires_join(self) -> bool:
        """Whether the full query reads the category relation."""
        return self._request.category_id is not None

    def get_cache_key(self) -> str:
        r = self._request
        return CacheKey.for_search(
            self._settings.cache_namespace,
            {
                "search": r.search,
                "categoryId": r.category_id,
                "minPrice": r.min_price,
                "maxPrice": r.max_price,
                "inStock": r.in_stock,
                "minRating": r.min_rating,
                "sortBy": r.sort_by,
                "sortOrder": r.sort_order,
                "page": r.page,
                "limit": r.limit,
            },
        )

    # ------------------------------------------------------------------
    # Filter stages
    # ------------------------------------------------------------------

    def _search_term(self) -> str | None:
        if self._request.search is None:
            return None
        term = self._request.search.strip()
        return term or None

    def _apply_base_filters(self, context: QueryContext) -> None:
        context.set_base_condition(IsNull(ProductField.DELETED_AT))
        context.add_condition(Compare(ProductField.IS_ACTIVE, "eq", True))

    def _apply_text_search(self, context: QueryContext) -> None:
        term = self._search_term()
        if term is None:
            return

        param = Param("searchTerm")
        similarity = (
            Similar(ProductField.NAME, param),
            Similar(ProductField.DESCRIPTION, param),
        )
        if len(term) >= self._settings.full_text_min_length:
            full_text = FullTextMatch(
                (ProductField.NAME, ProductField.DESCRIPTION),
                self._settings.text_search_language,
                param,
            )
            context.add_condition(AnyOf((full_text, *similarity)), {"searchTerm": term})
        else:
            # short terms tokenize poorly; rely on trigram similarity only
            context.add_condition(AnyOf(similarity), {"searchTerm": term})

    def _apply_simple_text_search(self, context: QueryContext) -> None:
        term = self._search_term()
        if term is None:
            return
        param = Param("searchPattern")
        context.add_condition(
            AnyOf((ILike(ProductField.NAME, param), ILike(ProductField.DESCRIPTION, param))),
            {"searchPattern": f"%{term}%"},
        )

    def _apply_category_filter(self, context: QueryContext) -> None:
        if self._request.category_id is None:
            return
        context.add_condition(
            Compare(CategoryField.ID, "eq", Param("categoryId")),
            {"categoryId": self._request.category_id},
        )

    def _apply_price_filter(self, context: QueryContext) -> None:
        min_price = self._request.min_price
        max_price = self._request.max_price

        if min_price is not None and max_price is not None:
            # an inverted range is left as-is and simply matches nothing
            context.add_condition(
                Between(ProductField.PRICE, Param("minPrice"), Param("maxPrice")),
                {"minPrice": min_price, "maxPrice": max_price},
            )
        elif min_price is not None:
            context.add_condition(
                Compare(ProductField.PRICE, "gte", Param("minPrice")), {"minPrice": min_price}
            )
        elif max_price is not None:
            context.add_condition(
                Compare(ProductField.PRICE, "lte", Param("maxPrice")), {"maxPrice": max_price}
            )

    def _apply_stock_filter(self, context: QueryContext) -> None:
        if self._request.in_stock is True:
            context.add_condition(Compare(ProductField.STOCK, "gt", 0))

    def _apply_rating_filter(self, context: QueryContext) -> None:
        if self._request.min_rating is None:
            return
        # unrated products stay visible under any rating floor
        context.add_condition(
            AnyOf((
                Compare(ProductField.RATING, "gte", Param("minRating")),
                IsNull(ProductField.RATING),
            )),
            {"minRating": self._request.min_rating},
        )

    def _apply_sorting(self, context: QueryContext) -> None:
        sort_by = self._request.sort_by
        order = self._request.sort_order
        field = SORT_FIELDS[sort_by]

        if sort_by is ProductSortBy.RATING:
            nulls = NullsPolicy.LAST if order is SortOrder.DESC else NullsPolicy.FIRST
            context.set_sort_key(field, order, nulls)
        else:
            context.set_sort_key(field, order)

        if sort_by is not ProductSortBy.CREATED_AT:
            # tie-breaker keeps page boundaries stable
            context.add_secondary_sort_key(ProductField.ID, SortOrder.ASC)
