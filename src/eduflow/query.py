"""
eduflow.query  ──  chainable, single-use read cursor over one table.

    result = await client.table("contents").select("*").eq("status", "published").limit(3)
    row = client.table("profiles").select().eq("id", uid).single().data

`select()` takes a deep copy of the table; every later step narrows that copy,
so mutations made after `select()` never leak into the result.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence, Union

from pydantic import BaseModel

from .core.tables import RecordStore, Row, matches

logger = logging.getLogger(__name__)

Cursor = Union[List[Row], Row, None]


class QueryResult(BaseModel):
    """`{data, error}` pair; awaiting it yields itself."""

    data: Any = None
    error: Any = None

    def __await__(self):
        return self._resolved().__await__()

    async def _resolved(self) -> "QueryResult":
        return self


# ---- operation variants ------------------------------------------------
class Operation(BaseModel):
    model_config = {"frozen": True}


class Project(Operation):
    columns: str = "*"


class Filter(Operation):
    column: str
    value: Any


class Exclude(Operation):
    column: str
    operator: str
    value: Any


class Sort(Operation):
    column: str | None = None
    ascending: bool = True
    nulls_first: bool = False


class Limit(Operation):
    count: int


def _parse_in_list(value: Any) -> List[Any]:
    """Accept a sequence or a PostgREST-style '(a,b,c)' string."""
    if isinstance(value, str):
        inner = value.strip()
        if inner.startswith("(") and inner.endswith(")"):
            inner = inner[1:-1]
        return [part.strip().strip('"') for part in inner.split(",") if part.strip()]
    return list(value)


def _excluded(row: Row, op: Exclude) -> bool:
    field = row.get(op.column)
    if op.operator == "eq":
        return matches(field, op.value)
    if op.operator == "neq":
        return not matches(field, op.value)
    if op.operator == "is":
        return field is op.value or matches(field, op.value)
    if op.operator == "in":
        return any(matches(field, v) for v in _parse_in_list(op.value))
    raise ValueError(op.operator)


class QueryBuilder:
    """Stateful cursor; each call records an Operation and narrows the data."""

    def __init__(self, store: RecordStore, table: str, faithful: bool = False):
        self.store = store
        self.table = table
        self.faithful = faithful
        self.operations: List[Operation] = []
        self._cursor: Cursor = None
        self._error: Any = None

    # ---- entry ----------------------------------------------------------
    def select(self, columns: str = "*") -> "QueryBuilder":
        """Seed the cursor with a deep copy; `columns` is never projected."""
        self.operations.append(Project(columns=columns))
        self._cursor = self.store.read(self.table)
        return self

    # ---- narrowing ------------------------------------------------------
    def eq(self, column: str, value: Any) -> "QueryBuilder":
        self.operations.append(Filter(column=column, value=value))
        if isinstance(self._cursor, list):
            self._cursor = [row for row in self._cursor if matches(row.get(column), value)]
        elif isinstance(self._cursor, dict) and not matches(self._cursor.get(column), value):
            self._cursor = None
        return self

    def not_(self, column: str, operator: str, value: Any) -> "QueryBuilder":
        op = Exclude(column=column, operator=operator, value=value)
        self.operations.append(op)
        if not self.faithful:
            logger.debug("not_(%s %s) ignored on %r", column, operator, self.table)
            return self
        if not isinstance(self._cursor, list):
            return self
        try:
            self._cursor = [row for row in self._cursor if not _excluded(row, op)]
        except ValueError:
            logger.warning("Unsupported not_ operator %r on %r, ignored", operator, self.table)
        return self

    def order(
        self,
        column: str | None = None,
        *,
        ascending: bool = True,
        nulls_first: bool = False,
    ) -> "QueryBuilder":
        op = Sort(column=column, ascending=ascending, nulls_first=nulls_first)
        self.operations.append(op)
        if not self.faithful or column is None:
            logger.debug("order(%s) left to storage order on %r", column, self.table)
            return self
        if isinstance(self._cursor, list):
            try:
                self._cursor = _sorted(self._cursor, op)
            except TypeError:
                logger.warning("order(%s) on %r: values not comparable, storage order kept", column, self.table)
        return self

    def limit(self, n: int) -> "QueryBuilder":
        op = Limit(count=n)
        self.operations.append(op)
        if isinstance(self._cursor, list):
            self._cursor = self._cursor[: op.count]
        return self

    # ---- terminals ------------------------------------------------------
    def single(self) -> QueryResult:
        """First row, or None; absence is not an error."""
        if isinstance(self._cursor, list):
            data: Optional[Row] = self._cursor[0] if self._cursor else None
        else:
            data = self._cursor
        return QueryResult(data=data, error=self._error)

    def execute(self) -> QueryResult:
        return QueryResult(data=self._cursor, error=self._error)

    def __await__(self):
        return self.execute().__await__()


def _sorted(rows: Sequence[Row], op: Sort) -> List[Row]:
    """Stable sort; None values go first or last regardless of direction."""
    present = [r for r in rows if r.get(op.column) is not None]
    missing = [r for r in rows if r.get(op.column) is None]
    present.sort(key=lambda r: r[op.column], reverse=not op.ascending)
    return missing + present if op.nulls_first else present + missing


__all__ = [
    "QueryBuilder",
    "QueryResult",
    "Operation",
    "Project",
    "Filter",
    "Exclude",
    "Sort",
    "Limit",
]
