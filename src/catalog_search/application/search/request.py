"""Application search – SearchRequest value object and request validation.

:func:`validate_search_request` turns raw query parameters into an
immutable :class:`SearchRequest`, collecting every field failure into a
single :class:`~catalog_search.kernel.errors.ValidationError`.  The
compiler assumes its input already went through here.
"""
from __future__ import annotations

import dataclasses
import decimal
import re
import uuid
from collections.abc import Mapping
from enum import Enum
from typing import Annotated, Any

import pydantic
from pydantic import UUID4, BaseModel, ConfigDict, Field, StringConstraints, field_validator, model_validator
from pydantic_core import PydanticCustomError

from catalog_search.application.search.query import SortOrder
from catalog_search.kernel.ddd import ValueObject
from catalog_search.kernel.errors import ValidationError

__all__ = [
    "ProductSearchParams",
    "ProductSortBy",
    "SearchRequest",
    "SortOrder",
    "validate_price_range",
    "validate_search_request",
]

MAX_SEARCH_LENGTH = 255
MAX_RATING = decimal.Decimal(5)
MAX_LIMIT = 100
MAX_PAGE = 100_000
# products.price is NUMERIC(10, 2)
MAX_PRICE = decimal.Decimal("99999999.99")
PRICE_RANGE_MESSAGE = "Maximum price must be greater than or equal to minimum price"

_INTEGER_PATTERN = re.compile(r"-?\d{1,18}")


class ProductSortBy(str, Enum):
    NAME = "name"
    PRICE = "price"
    CREATED_AT = "createdAt"
    RATING = "rating"
    POPULARITY = "popularity"  # order count
    VIEWS = "viewCount"


def _to_decimal(value: Any) -> decimal.Decimal:
    if isinstance(value, decimal.Decimal):
        return value
    # str() first so that 19.99 does not become 19.989999...
    return decimal.Decimal(str(value))


@dataclasses.dataclass(frozen=True)
class SearchRequest(ValueObject):
    """Validated, normalised product search request."""

    search: str | None = None
    category_id: uuid.UUID | None = None
    min_price: decimal.Decimal | None = None
    max_price: decimal.Decimal | None = None
    in_stock: bool | None = None
    min_rating: decimal.Decimal | None = None
    sort_by: ProductSortBy = ProductSortBy.CREATED_AT
    sort_order: SortOrder = SortOrder.DESC
    page: int = 1
    limit: int = 20

    def __post_init__(self) -> None:
        for name in ("min_price", "max_price", "min_rating"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, decimal.Decimal):
                object.__setattr__(self, name, _to_decimal(value))
        if isinstance(self.category_id, str):
            object.__setattr__(self, "category_id", uuid.UUID(self.category_id))
        if not isinstance(self.sort_by, ProductSortBy):
            object.__setattr__(self, "sort_by", ProductSortBy(self.sort_by))
        if not isinstance(self.sort_order, SortOrder):
            object.__setattr__(self, "sort_order", SortOrder(self.sort_order))


def validate_price_range(request: SearchRequest) -> bool:
    """``True`` unless both bounds are present and ``max_price < min_price``."""
    if request.min_price is not None and request.max_price is not None:
        return request.max_price >= request.min_price
    return True


# ---------------------------------------------------------------------------
# Raw parameter schema
# ---------------------------------------------------------------------------


class ProductSearchParams(BaseModel):
    """Schema of the raw search parameters, keyed by their wire names."""

    model_config = ConfigDict(extra="ignore")

    search: Annotated[str, StringConstraints(min_length=1, max_length=MAX_SEARCH_LENGTH)] | None = Field(
        default=None, alias="search"
    )
    category_id: UUID4 | None = Field(default=None, alias="categoryId")
    min_price: Annotated[decimal.Decimal, Field(ge=0, le=MAX_PRICE)] | None = Field(
        default=None, alias="minPrice"
    )
    max_price: Annotated[decimal.Decimal, Field(ge=0, le=MAX_PRICE)] | None = Field(
        default=None, alias="maxPrice"
    )
    in_stock: bool | None = Field(default=None, alias="inStock")
    min_rating: Annotated[decimal.Decimal, Field(ge=0, le=MAX_RATING)] | None = Field(
        default=None, alias="minRating"
    )
    sort_by: ProductSortBy = Field(default=ProductSortBy.CREATED_AT, alias="sortBy")
    sort_order: SortOrder = Field(default=SortOrder.DESC, alias="sortOrder")
    page: int = Field(default=1, ge=1, le=MAX_PAGE, alias="page")
    limit: int = Field(default=20, ge=1, le=MAX_LIMIT, alias="limit")

    @field_validator("min_price", "max_price", "min_rating", mode="before")
    @classmethod
    def reject_bool_number(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("booleans are not numbers")
        return value

    @field_validator("in_stock", mode="before")
    @classmethod
    def parse_in_stock(cls, value: Any) -> bool:
        if isinstance(value, str):
            return value.strip().lower() == "true"
        return bool(value)

    @field_validator("page", "limit", mode="before")
    @classmethod
    def plain_integer(cls, value: Any) -> Any:
        # digits only: no exponent, no fraction, no bool
        if isinstance(value, bool):
            raise ValueError("booleans are not integers")
        if isinstance(value, str):
            value = value.strip()
            if not _INTEGER_PATTERN.fullmatch(value):
                raise ValueError("not a plain integer")
        return value

    @model_validator(mode="after")
    def check_price_range(self) -> "ProductSearchParams":
        if self.min_price is not None and self.max_price is not None and self.max_price < self.min_price:
            raise PydanticCustomError("price_range", PRICE_RANGE_MESSAGE)
        return self

    def to_request(self) -> SearchRequest:
        return SearchRequest(**self.model_dump())


_SEARCH_LENGTH = f"Search term must be between 1 and {MAX_SEARCH_LENGTH} characters"

# wire name -> {pydantic error type -> message}; "*" covers every other type
_MESSAGES: dict[str, dict[str, str]] = {
    "search": {
        "string_too_short": _SEARCH_LENGTH,
        "string_too_long": _SEARCH_LENGTH,
        "*": "Search term must be a string",
    },
    "categoryId": {"*": "Category ID must be a valid UUID"},
    "minPrice": {
        "greater_than_equal": "Minimum price cannot be negative",
        "less_than_equal": f"Minimum price cannot exceed {MAX_PRICE}",
        "*": "Minimum price must be a number",
    },
    "maxPrice": {
        "greater_than_equal": "Maximum price cannot be negative",
        "less_than_equal": f"Maximum price cannot exceed {MAX_PRICE}",
        "*": "Maximum price must be a number",
    },
    "inStock": {"*": "In stock must be a boolean"},
    "minRating": {
        "greater_than_equal": "Rating cannot be less than 0",
        "less_than_equal": "Rating cannot be greater than 5",
        "*": "Minimum rating must be a number",
    },
    "sortBy": {"*": "Invalid sort field"},
    "sortOrder": {"*": "Sort order must be ASC or DESC"},
    "page": {
        "greater_than_equal": "Page must be at least 1",
        "less_than_equal": f"Page cannot exceed {MAX_PAGE}",
        "*": "Page must be an integer",
    },
    "limit": {
        "greater_than_equal": "Limit must be at least 1",
        "less_than_equal": f"Limit cannot exceed {MAX_LIMIT}",
        "*": "Limit must be an integer",
    },
}

# (wire name, attribute name) in declaration order
_FIELDS: tuple[tuple[str, str], ...] = tuple(
    (info.alias or name, name) for name, info in ProductSearchParams.model_fields.items()
)


def _is_absent(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def _lookup(params: Mapping[str, Any], wire_name: str, attr_name: str) -> Any:
    if wire_name in params:
        return params[wire_name]
    return params.get(attr_name)


def _field_error(error: Mapping[str, Any], data: Mapping[str, Any]) -> dict[str, Any]:
    if error["type"] == "price_range":
        return {"field": "maxPrice", "message": PRICE_RANGE_MESSAGE, "value": data.get("maxPrice")}
    field = str(error["loc"][0])
    messages = _MESSAGES[field]
    return {
        "field": field,
        "message": messages.get(error["type"], messages["*"]),
        "value": data.get(field),
    }


def validate_search_request(params: Mapping[str, Any]) -> SearchRequest:
    """Validate and normalise raw search parameters.

    Keys may be given in their wire form (``minPrice``) or attribute form
    (``min_price``).  Unknown keys are ignored.  ``None`` and blank strings
    count as absent, except for ``search`` where an empty string is a
    length violation.  The price range is only checked once every field
    is individually valid.

    Raises:
        ValidationError: listing every failing field in ``errors``.
    """
    data: dict[str, Any] = {}
    for wire_name, attr_name in _FIELDS:
        raw = _lookup(params, wire_name, attr_name)
        if raw is None or (wire_name != "search" and _is_absent(raw)):
            continue
        data[wire_name] = raw

    try:
        parsed = ProductSearchParams.model_validate(data)
    except pydantic.ValidationError as exc:
        errors = [_field_error(e, data) for e in exc.errors()]
        raise ValidationError(
            f"Invalid search request: {', '.join(e['field'] for e in errors)}",
            errors=errors,
            cause=exc,
        ) from exc
    return parsed.to_request()
