"""
Snapshot schema: `{table: [record, ...] | {id: record}}`.

Used both to serialize the Record Store and to vet whatever comes back out
of the durable slot before it is trusted.
"""

from __future__ import annotations

from typing import Any, Dict, List, Union

from pydantic import RootModel, model_validator

TableData = Union[List[Dict[str, Any]], Dict[str, Dict[str, Any]]]

MAP_TABLES = frozenset({"profiles"})
LIST_TABLES = frozenset({"contents", "categories", "view_history"})


class Snapshot(RootModel[Dict[str, TableData]]):
    """Complete state of all tables at one point in time."""

    @model_validator(mode="after")
    def _check_known_shapes(self) -> "Snapshot":
        for name, data in self.root.items():
            if name in MAP_TABLES and not isinstance(data, dict):
                raise ValueError(f"table {name!r} must be map-valued")
            if name in LIST_TABLES and not isinstance(data, list):
                raise ValueError(f"table {name!r} must be list-valued")
        return self
