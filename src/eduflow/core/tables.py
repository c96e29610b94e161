"""
In-memory Record Store.

Owns every table for the lifetime of the process. Readers get deep copies,
writers get the live collection and must call `commit()` afterwards.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Dict, List, Optional, Union

from ..persistence.store import SnapshotStore

logger = logging.getLogger(__name__)

Row = Dict[str, Any]
TableData = Union[List[Row], Dict[str, Row]]

DEFAULT_CATEGORIES = [
    {"id": "cat1", "name": "Computers"},
    {"id": "cat2", "name": "English"},
    {"id": "cat3", "name": "Mathematics"},
    {"id": "cat4", "name": "Art"},
]


def default_tables(demo_user_id: str = "demo-user-id") -> Dict[str, TableData]:
    """Fixed seed used when the durable slot is empty or unusable."""
    return {
        "contents": [],
        "profiles": {demo_user_id: {"full_name": "Demo User", "role": "learner"}},
        "categories": copy.deepcopy(DEFAULT_CATEGORIES),
        "view_history": [],
    }


def matches(field: Any, value: Any) -> bool:
    """Strict equality: a bool never equals a number (True == 1 in Python)."""
    if isinstance(field, bool) != isinstance(value, bool):
        return False
    return field == value


def rows_of(data: TableData) -> List[Row]:
    """Uniform row view: map-valued tables expose their key as `id`."""
    if isinstance(data, dict):
        return [{"id": key, **row} for key, row in data.items()]
    return list(data)


class RecordStore:
    """The only component that mutates persisted state."""

    def __init__(self, persistence: SnapshotStore, demo_user_id: str = "demo-user-id"):
        self.persistence = persistence
        self.demo_user_id = demo_user_id
        self._tables: Dict[str, TableData] = {}

    def initialize(self) -> "RecordStore":
        """Seed from the durable slot, else from the defaults. Never raises."""
        saved = self.persistence.load()
        defaults = default_tables(self.demo_user_id)
        if saved is None:
            logger.info("No usable snapshot under %r, seeding defaults", self.persistence.key)
            self._tables = defaults
            return self

        for name, data in defaults.items():
            saved.setdefault(name, data)
        self._tables = saved
        return self

    # ---- access ---------------------------------------------------------
    def has(self, name: str) -> bool:
        return name in self._tables

    def is_map(self, name: str) -> bool:
        return isinstance(self._tables.get(name), dict)

    def read(self, name: str) -> List[Row]:
        """Deep copy of a table's rows; missing tables read as empty."""
        data = self._tables.get(name)
        if data is None:
            return []
        return copy.deepcopy(rows_of(data))

    def live(self, name: str, create: bool = False) -> Optional[TableData]:
        """The live collection, for mutation only. `create` adds a list table."""
        if name not in self._tables and create:
            logger.debug("Creating ad-hoc table %r", name)
            self._tables[name] = []
        return self._tables.get(name)

    def replace(self, name: str, data: TableData) -> None:
        self._tables[name] = data

    def snapshot(self) -> Dict[str, TableData]:
        return copy.deepcopy(self._tables)

    # ---- persistence ----------------------------------------------------
    def commit(self) -> bool:
        """Hand the full table set to the persistence adapter (best effort)."""
        return self.persistence.save(self._tables)
