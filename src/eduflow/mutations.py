"""
eduflow.mutations  ──  insert / upsert / update / delete for one table.

Every mutation changes the in-memory table first and then calls
`RecordStore.commit()` exactly once. Zero matching rows is a success.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Callable, Dict, List, Optional

from .core.record import Record, new_record_id
from .core.tables import RecordStore, Row, matches, rows_of
from .query import QueryResult

logger = logging.getLogger(__name__)

DEFAULT_AUTHOR_LABEL = "You (Demo User)"
DEFAULT_CATEGORY_LABEL = "General"
AUTHOR_FIELDS = ("creator_id", "user_id")


# ---- join-enrichment -------------------------------------------------------
def _author_label(store: RecordStore, row: Row) -> str:
    profiles = store.live("profiles")
    if isinstance(profiles, dict):
        for field in AUTHOR_FIELDS:
            profile = profiles.get(row.get(field))  # type: ignore[arg-type]
            if profile and profile.get("full_name"):
                return profile["full_name"]
    return DEFAULT_AUTHOR_LABEL


def _category_label(store: RecordStore, category_id: Any) -> str:
    for category in rows_of(store.live("categories") or []):
        if matches(category.get("id"), category_id):
            return category.get("name") or DEFAULT_CATEGORY_LABEL
    return DEFAULT_CATEGORY_LABEL


def enrich(store: RecordStore, table: str, row: Row) -> Row:
    """
    Attach denormalized labels the way a joined select would return them.
    Labels are captured once and never refreshed.
    """
    row["profiles"] = {"full_name": _author_label(store, row)}
    if "category_id" in row:
        row["categories"] = {"name": _category_label(store, row["category_id"])}
    if table == "contents":
        row["content_tags"] = []
    return row


# ---- result types ----------------------------------------------------------
class InsertSelection:
    """`insert(...).select()`: only `single()` is offered."""

    def __init__(self, row: Row):
        self._row = row

    def single(self) -> QueryResult:
        return QueryResult(data=copy.deepcopy(self._row))

    def execute(self) -> QueryResult:
        return QueryResult(data=[copy.deepcopy(self._row)])

    def __await__(self):
        return self.execute().__await__()


class InsertResult:
    """Narrow result of an insert: no filtering, just the new row."""

    def __init__(self, row: Row):
        self._row = row

    def select(self, columns: str = "*") -> InsertSelection:
        return InsertSelection(self._row)

    def execute(self) -> QueryResult:
        return QueryResult(data=[copy.deepcopy(self._row)])

    def __await__(self):
        return self.execute().__await__()


class PendingFilter:
    """`update(patch)` / `delete()` waiting for its `eq(column, value)`."""

    def __init__(self, apply: Callable[[str, Any], None]):
        self._apply = apply

    def eq(self, column: str, value: Any) -> QueryResult:
        self._apply(column, value)
        return QueryResult(data=None, error=None)


# ---- gateway ---------------------------------------------------------------
class MutationGateway:
    def __init__(self, store: RecordStore, table: str):
        self.store = store
        self.table = table

    def insert(self, record: Dict[str, Any]) -> InsertResult:
        if self.store.is_map(self.table):
            row = self._put_keyed(record)
        else:
            row = self._insert_row(record)
        self.store.commit()
        return InsertResult(copy.deepcopy(row) if row is not None else {})

    def upsert(self, record: Dict[str, Any], on_conflict: str = "id") -> QueryResult:
        if self.store.is_map(self.table):
            row = self._put_keyed(record, merge=True)
        else:
            row = self._merge_row(record, on_conflict) or self._insert_row(record)
        self.store.commit()
        return QueryResult(data=[copy.deepcopy(row)] if row is not None else [])

    def update(self, patch: Dict[str, Any]) -> PendingFilter:
        def apply(column: str, value: Any) -> None:
            changed = 0
            data = self.store.live(self.table)
            if isinstance(data, list):
                for i, row in enumerate(data):
                    if matches(row.get(column), value):
                        data[i] = {**row, **patch}
                        changed += 1
            elif isinstance(data, dict):
                for key, row in data.items():
                    if matches({"id": key, **row}.get(column), value):
                        data[key] = {**row, **{k: v for k, v in patch.items() if k != "id"}}
                        changed += 1
            logger.debug("update %s where %s=%r: %d row(s)", self.table, column, value, changed)
            self.store.commit()

        return PendingFilter(apply)

    def delete(self) -> PendingFilter:
        def apply(column: str, value: Any) -> None:
            data = self.store.live(self.table)
            if isinstance(data, list):
                data[:] = [row for row in data if not matches(row.get(column), value)]
            elif isinstance(data, dict):
                for key in [k for k, row in data.items() if matches({"id": k, **row}.get(column), value)]:
                    del data[key]
            self.store.commit()

        return PendingFilter(apply)

    # ---- internals ------------------------------------------------------
    def _insert_row(self, record: Dict[str, Any]) -> Row:
        data: List[Row] = self.store.live(self.table, create=True)  # type: ignore[assignment]
        taken = {row.get("id") for row in data}
        row = enrich(self.store, self.table, Record.build(record, taken).as_row())
        data.insert(0, row)
        return row

    def _merge_row(self, record: Dict[str, Any], on_conflict: str) -> Optional[Row]:
        data = self.store.live(self.table)
        if not isinstance(data, list) or on_conflict not in record:
            return None
        for i, row in enumerate(data):
            if matches(row.get(on_conflict), record[on_conflict]):
                data[i] = {**row, **record}
                return data[i]
        return None

    def _put_keyed(self, record: Dict[str, Any], merge: bool = False) -> Optional[Row]:
        data: Dict[str, Row] = self.store.live(self.table)  # type: ignore[assignment]
        key = record.get("id")
        if key is None and not merge:
            key = new_record_id(data)
        if key is None:
            logger.warning("Row for map-valued table %r has no id, skipped", self.table)
            return None
        fields = {k: v for k, v in record.items() if k != "id"}
        data[key] = {**data.get(key, {}), **fields} if merge else fields
        return {"id": key, **data[key]}
