"""SQLAlchemy adapter – SqlAlchemyQueryContext.

Implements :class:`~catalog_search.application.search.QueryContext` over a
SQLAlchemy 2.x ``Select`` and translates predicate descriptors into
PostgreSQL expressions (``to_tsvector``/``plainto_tsquery`` for full-text,
``pg_trgm``'s ``%`` operator for similarity).
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy import Select, and_, bindparam, func, literal_column, or_, true
from sqlalchemy.sql.elements import BindParameter, ColumnElement

from catalog_search.adapters.sqlalchemy.models import Category, Product
from catalog_search.application.search.query import (
    AllOf,
    AnyOf,
    Between,
    Compare,
    FullTextMatch,
    ILike,
    IsNull,
    NullsPolicy,
    Param,
    Predicate,
    Similar,
    SortOrder,
)

DEFAULT_ALIASES: dict[str, Any] = {"product": Product, "category": Category}


class SqlAlchemyQueryContext:
    """Collects WHERE/ORDER BY clauses and applies them to *stmt* on demand.

    Usage::

        ctx = compiler.compile_query(SqlAlchemyQueryContext(select(Product)))
        rows = await session.execute(ctx.statement)
    """

    def __init__(self, stmt: Select[Any], aliases: Mapping[str, Any] | None = None) -> None:
        self._stmt = stmt
        self._aliases = dict(aliases or DEFAULT_ALIASES)
        self._where: list[ColumnElement[bool]] = []
        self._order_by: list[Any] = []
        self._binds: dict[str, BindParameter[Any]] = {}

    # ------------------------------------------------------------------
    # QueryContext
    # ------------------------------------------------------------------

    def set_base_condition(self, predicate: Predicate, parameters: Mapping[str, Any] | None = None) -> None:
        self._where = []
        self._binds = {}
        self.add_condition(predicate, parameters)

    def add_condition(self, predicate: Predicate, parameters: Mapping[str, Any] | None = None) -> None:
        self._where.append(self._translate(predicate, parameters or {}))

    def set_sort_key(self, field: str, direction: SortOrder, nulls: NullsPolicy | None = None) -> None:
        self._order_by = [self._order(field, direction, nulls)]

    def add_secondary_sort_key(self, field: str, direction: SortOrder) -> None:
        self._order_by.append(self._order(field, direction, None))

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    @property
    def statement(self) -> Select[Any]:
        stmt = self._stmt
        if self._where:
            stmt = stmt.where(*self._where)
        if self._order_by:
            stmt = stmt.order_by(*self._order_by)
        return stmt

    # ------------------------------------------------------------------
    # Translation
    # ------------------------------------------------------------------

    def _column(self, field: str) -> Any:
        alias, _, attribute = field.partition(".")
        try:
            entity = self._aliases[alias]
        except KeyError:
            raise ValueError(f"Unknown alias {alias!r} in field {field!r}") from None
        return getattr(entity, attribute)

    def _bind(self, param: Param, parameters: Mapping[str, Any]) -> BindParameter[Any]:
        if param.name not in parameters:
            raise ValueError(f"Missing value for parameter {param.name!r}")
        existing = self._binds.get(param.name)
        if existing is not None and existing.value == parameters[param.name]:
            return existing
        bound = bindparam(param.name, parameters[param.name])
        self._binds[param.name] = bound
        return bound

    def _operand(self, operand: Any, parameters: Mapping[str, Any]) -> Any:
        if isinstance(operand, Param):
            return self._bind(operand, parameters)
        if operand is True:
            return true()
        return operand

    def _translate(self, predicate: Predicate, parameters: Mapping[str, Any]) -> ColumnElement[bool]:  # noqa: PLR0911
        match predicate:
            case IsNull(field=field):
                return self._column(field).is_(None)
            case Compare(field=field, op=op, operand=operand):
                column = self._column(field)
                value = self._operand(operand, parameters)
                match op:
                    case "eq":  return column == value
                    case "gt":  return column > value
                    case "gte": return column >= value
                    case "lt":  return column < value
                    case "lte": return column <= value
                raise ValueError(f"Unsupported comparison {op!r}")
            case Between(field=field, low=low, high=high):
                return self._column(field).between(
                    self._bind(low, parameters), self._bind(high, parameters)
                )
            case ILike(field=field, pattern=pattern):
                return self._column(field).ilike(self._bind(pattern, parameters))
            case Similar(field=field, term=term):
                return self._column(field).bool_op("%")(self._bind(term, parameters))
            case FullTextMatch(fields=fields, language=language, term=term):
                if not language.isidentifier():
                    raise ValueError(f"Invalid text search configuration {language!r}")
                regconfig = literal_column(f"'{language}'")
                document = self._column(fields[0])
                for extra in fields[1:]:
                    document = document + " " + func.coalesce(self._column(extra), "")
                return func.to_tsvector(regconfig, document).bool_op("@@")(
                    func.plainto_tsquery(regconfig, self._bind(term, parameters))
                )
            case AnyOf(terms=terms):
                return or_(*(self._translate(t, parameters) for t in terms))
            case AllOf(terms=terms):
                return and_(*(self._translate(t, parameters) for t in terms))
        raise TypeError(f"Unsupported predicate: {predicate!r}")

    def _order(self, field: str, direction: SortOrder, nulls: NullsPolicy | None) -> Any:
        column = self._column(field)
        clause = column.desc() if direction is SortOrder.DESC else column.asc()
        if nulls is NullsPolicy.LAST:
            clause = clause.nulls_last()
        elif nulls is NullsPolicy.FIRST:
            clause = clause.nulls_first()
        return clause


__all__ = ["DEFAULT_ALIASES", "SqlAlchemyQueryContext"]
