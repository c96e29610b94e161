"""
Record kernel – *pure Pydantic* (no SQLAlchemy imports).

* A Record is an open mapping: any extra field is kept verbatim.
* `id` and `created_at` are assigned once, at insertion, and never again.
* Tables store plain dicts; Record is only the construction/validation step.
"""

from __future__ import annotations

import datetime as dt
import uuid
from typing import Any, Container, Dict

from pydantic import BaseModel

ID_PREFIX = "demo-"


# helpers
def now_utc() -> dt.datetime:  # created_at and slot timestamps are UTC
    return dt.datetime.now(tz=dt.timezone.utc)


def new_record_id(taken: Container[str] = ()) -> str:
    """Short opaque id, re-drawn until it is not in `taken`."""
    while True:
        rec_id = ID_PREFIX + uuid.uuid4().hex[:9]
        if rec_id not in taken:
            return rec_id


# Record base
class Record(BaseModel):
    """One row of a list-valued table."""

    id: Any = None
    created_at: Any = None

    model_config = {"extra": "allow", "arbitrary_types_allowed": True}

    @classmethod
    def build(cls, fields: Dict[str, Any], taken: Container[str] = ()) -> "Record":
        """
        Defaults first, caller fields merged over them.

        A caller-supplied `id` or `created_at` wins over the generated one.
        """
        defaults = {"id": new_record_id(taken), "created_at": now_utc().isoformat()}
        return cls(**{**defaults, **fields})

    def as_row(self) -> Dict[str, Any]:
        return self.model_dump(mode="python")
