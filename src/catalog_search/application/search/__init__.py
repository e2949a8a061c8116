"""Application search – request, compiler, query descriptors and service."""
from catalog_search.application.search.context import CompiledQuery, QueryContext, QueryPlanBuilder
from catalog_search.application.search.criteria import (
    SORT_FIELDS,
    CategoryField,
    ProductField,
    SearchCriteriaCompiler,
)
from catalog_search.application.search.query import (
    AllOf,
    AnyOf,
    Between,
    Compare,
    Condition,
    FullTextMatch,
    ILike,
    IsNull,
    NullsPolicy,
    Param,
    Predicate,
    Similar,
    SortKey,
    SortOrder,
    render,
)
from catalog_search.application.search.request import (
    ProductSearchParams,
    ProductSortBy,
    SearchRequest,
    validate_price_range,
    validate_search_request,
)
from catalog_search.application.search.service import ProductSearchService, SearchQueryExecutor

__all__ = [
    "SORT_FIELDS",
    "AllOf",
    "AnyOf",
    "Between",
    "CategoryField",
    "Compare",
    "CompiledQuery",
    "Condition",
    "FullTextMatch",
    "ILike",
    "IsNull",
    "NullsPolicy",
    "Param",
    "Predicate",
    "ProductField",
    "ProductSearchParams",
    "ProductSearchService",
    "ProductSortBy",
    "QueryContext",
    "QueryPlanBuilder",
    "SearchCriteriaCompiler",
    "SearchQueryExecutor",
    "SearchRequest",
    "Similar",
    "SortKey",
    "SortOrder",
    "render",
    "validate_price_range",
    "validate_search_request",
]
