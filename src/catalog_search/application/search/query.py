"""Application search – predicate and sort descriptors.

A compiled search is a sequence of backend-neutral predicate descriptors.
Adapters (see :mod:`catalog_search.adapters.sqlalchemy`) translate them into
concrete statements; :func:`render` turns them into readable SQL-ish text
for logs and assertions.

Fields are alias-qualified strings such as ``"product.price"`` or
``"category.id"``.  Named parameters are referenced with :class:`Param`;
any other operand is a literal.
"""
from __future__ import annotations

import dataclasses
from enum import Enum
from typing import Any, Literal, Union

from catalog_search.kernel.ddd import ValueObject

__all__ = [
    "AllOf",
    "AnyOf",
    "Between",
    "Compare",
    "Condition",
    "FullTextMatch",
    "ILike",
    "IsNull",
    "NullsPolicy",
    "Param",
    "Predicate",
    "Similar",
    "SortKey",
    "SortOrder",
    "referenced_aliases",
    "render",
]

CompareOp = Literal["eq", "gt", "gte", "lt", "lte"]

_OP_SYMBOLS: dict[str, str] = {"eq": "=", "gt": ">", "gte": ">=", "lt": "<", "lte": "<="}


class SortOrder(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


class NullsPolicy(str, Enum):
    FIRST = "NULLS FIRST"
    LAST = "NULLS LAST"


@dataclasses.dataclass(frozen=True)
class Param(ValueObject):
    """Reference to a named parameter bound alongside the condition."""
    name: str


@dataclasses.dataclass(frozen=True)
class IsNull(ValueObject):
    field: str


@dataclasses.dataclass(frozen=True)
class Compare(ValueObject):
    field: str
    op: CompareOp
    operand: Any


@dataclasses.dataclass(frozen=True)
class Between(ValueObject):
    """Inclusive range; ``low > high`` matches nothing."""
    field: str
    low: Param
    high: Param


@dataclasses.dataclass(frozen=True)
class ILike(ValueObject):
    field: str
    pattern: Param


@dataclasses.dataclass(frozen=True)
class Similar(ValueObject):
    """Trigram similarity (``field % :param``)."""
    field: str
    term: Param


@dataclasses.dataclass(frozen=True)
class FullTextMatch(ValueObject):
    """Full-text match of *term* against a search vector over *fields*.

    The first field is used as-is, the remaining ones are coalesced to an
    empty string so that a ``NULL`` description does not null the vector.
    """
    fields: tuple[str, ...]
    language: str
    term: Param


@dataclasses.dataclass(frozen=True)
class AnyOf(ValueObject):
    terms: tuple["Predicate", ...]


@dataclasses.dataclass(frozen=True)
class AllOf(ValueObject):
    terms: tuple["Predicate", ...]


Predicate = Union[IsNull, Compare, Between, ILike, Similar, FullTextMatch, AnyOf, AllOf]


@dataclasses.dataclass(frozen=True)
class Condition(ValueObject):
    """A predicate together with the values of the parameters it references."""
    predicate: Predicate
    parameters: dict[str, Any] = dataclasses.field(default_factory=dict)

    def __hash__(self) -> int:
        return hash((self.predicate, tuple(sorted(self.parameters.items(), key=lambda kv: kv[0]))))

    @property
    def sql(self) -> str:
        return render(self.predicate)


@dataclasses.dataclass(frozen=True)
class SortKey(ValueObject):
    field: str
    direction: SortOrder = SortOrder.ASC
    nulls: NullsPolicy | None = None

    @property
    def sql(self) -> str:
        text = f"{self.field} {self.direction.value}"
        if self.nulls is not None:
            text = f"{text} {self.nulls.value}"
        return text


def _operand(value: Any) -> str:
    if isinstance(value, Param):
        return f":{value.name}"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return "'" + value.replace("'", "''") + "'"
    return str(value)


def render(predicate: Predicate) -> str:  # noqa: PLR0911
    """Render *predicate* as PostgreSQL-flavoured text."""
    match predicate:
        case IsNull(field=field):
            return f"{field} IS NULL"
        case Compare(field=field, op=op, operand=operand):
            return f"{field} {_OP_SYMBOLS[op]} {_operand(operand)}"
        case Between(field=field, low=low, high=high):
            return f"{field} BETWEEN {_operand(low)} AND {_operand(high)}"
        case ILike(field=field, pattern=pattern):
            return f"{field} ILIKE {_operand(pattern)}"
        case Similar(field=field, term=term):
            return f"{field} % {_operand(term)}"
        case FullTextMatch(fields=fields, language=language, term=term):
            document = " || ' ' || ".join(
                [fields[0], *(f"COALESCE({f}, '')" for f in fields[1:])]
            )
            return (
                f"to_tsvector('{language}', {document}) "
                f"@@ plainto_tsquery('{language}', {_operand(term)})"
            )
        case AnyOf(terms=terms):
            return "(" + " OR ".join(render(t) for t in terms) + ")"
        case AllOf(terms=terms):
            return "(" + " AND ".join(render(t) for t in terms) + ")"
    raise TypeError(f"Unsupported predicate: {predicate!r}")


def _fields(predicate: Predicate) -> list[str]:
    match predicate:
        case AnyOf(terms=terms) | AllOf(terms=terms):
            return [f for t in terms for f in _fields(t)]
        case FullTextMatch(fields=fields):
            return list(fields)
        case _:
            return [predicate.field]  # type: ignore[union-attr]


def referenced_aliases(predicate: Predicate) -> frozenset[str]:
    """Return the relation aliases (``"product"``, ``"category"``) *predicate* reads."""
    return frozenset(f.split(".", 1)[0] for f in _fields(predicate) if "." in f)
