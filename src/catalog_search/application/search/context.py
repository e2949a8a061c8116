"""Application search – QueryContext port and the QueryPlanBuilder accumulator."""
from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from catalog_search.application.search.query import (
    Condition,
    NullsPolicy,
    Predicate,
    SortKey,
    SortOrder,
    referenced_aliases,
)

__all__ = ["CompiledQuery", "QueryContext", "QueryPlanBuilder"]


@runtime_checkable
class QueryContext(Protocol):
    """Query-construction capability supplied by the caller.

    Conditions are conjunctive: every :meth:`add_condition` is ANDed with
    what is already present.  :meth:`set_base_condition` restarts the
    condition list and :meth:`set_sort_key` restarts the sort list.
    """

    def set_base_condition(self, predicate: Predicate, parameters: Mapping[str, Any] | None = None) -> None: ...
    def add_condition(self, predicate: Predicate, parameters: Mapping[str, Any] | None = None) -> None: ...
    def set_sort_key(self, field: str, direction: SortOrder, nulls: NullsPolicy | None = None) -> None: ...
    def add_secondary_sort_key(self, field: str, direction: SortOrder) -> None: ...


@dataclasses.dataclass(frozen=True)
class CompiledQuery:
    """Immutable description of a filtered, sorted query."""

    root: str
    conditions: tuple[Condition, ...] = ()
    sort_keys: tuple[SortKey, ...] = ()

    @property
    def parameters(self) -> dict[str, Any]:
        merged: dict[str, Any] = {}
        for condition in self.conditions:
            merged.update(condition.parameters)
        return merged

    @property
    def joins(self) -> frozenset[str]:
        """Aliases other than *root* that the conditions read."""
        aliases: set[str] = set()
        for condition in self.conditions:
            aliases |= referenced_aliases(condition.predicate)
        aliases.discard(self.root)
        return frozenset(aliases)

    @property
    def where_sql(self) -> list[str]:
        return [c.sql for c in self.conditions]

    @property
    def order_by_sql(self) -> list[str]:
        return [k.sql for k in self.sort_keys]

    def to_sql(self) -> str:
        """Readable SQL-ish rendering; not meant to be executed."""
        text = f"SELECT {self.root} FROM {self.root}"
        if self.conditions:
            text += " WHERE " + " AND ".join(self.where_sql)
        if self.sort_keys:
            text += " ORDER BY " + ", ".join(self.order_by_sql)
        return text


class QueryPlanBuilder:
    """Records context calls in order and builds a :class:`CompiledQuery`.

    Example::

        plan = compiler.compile_query(QueryPlanBuilder()).build()
        plan.where_sql[0]  # 'product.deleted_at IS NULL'
    """

    def __init__(self, root: str = "product") -> None:
        self._root = root
        self._conditions: list[Condition] = []
        self._sort_keys: list[SortKey] = []

    def set_base_condition(self, predicate: Predicate, parameters: Mapping[str, Any] | None = None) -> None:
        self._conditions = [Condition(predicate, dict(parameters or {}))]

    def add_condition(self, predicate: Predicate, parameters: Mapping[str, Any] | None = None) -> None:
        self._conditions.append(Condition(predicate, dict(parameters or {})))

    def set_sort_key(self, field: str, direction: SortOrder, nulls: NullsPolicy | None = None) -> None:
        self._sort_keys = [SortKey(field, direction, nulls)]

    def add_secondary_sort_key(self, field: str, direction: SortOrder) -> None:
        self._sort_keys.append(SortKey(field, direction))

    def build(self) -> CompiledQuery:
        return CompiledQuery(
            root=self._root,
            conditions=tuple(self._conditions),
            sort_keys=tuple(self._sort_keys),
        )
