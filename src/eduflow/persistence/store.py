"""
Persistence adapter around the `kv_slots` table.

Failures of the durable medium never reach callers: `save` logs and returns,
`load` logs and reports "no snapshot".
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError
from pydantic_core import PydanticSerializationError
from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..errors import PersistenceError
from ..core.record import now_utc
from .models import SlotRow
from .snapshot import Snapshot

logger = logging.getLogger(__name__)


class SnapshotStore:
    """Thin data‑access layer around one key of the `kv_slots` table."""

    def __init__(self, engine: Engine, key: str):
        self.engine = engine
        self.key = key

    def _new_session(self) -> Session:
        return Session(bind=self.engine, future=True)

    # ---- writes ---------------------------------------------------------
    def save(self, tables: Dict[str, Any]) -> bool:
        """
        Serialize `tables` into the slot. Returns False (after logging a
        warning) when the medium refuses the write; memory stays authoritative.
        """
        try:
            self.write(tables)
        except PersistenceError as e:
            logger.warning(
                "Snapshot not saved (%s); data is kept in memory for this process",
                e,
            )
            return False
        return True

    def write(self, tables: Dict[str, Any]) -> None:
        """Write one snapshot in a single transaction; raises PersistenceError."""
        try:
            payload = Snapshot(tables).model_dump_json()
        except (ValidationError, PydanticSerializationError) as e:
            raise PersistenceError(f"snapshot not serializable: {e}") from e

        try:
            with self._new_session() as s:
                s.merge(SlotRow(key=self.key, payload=payload, updated_ts=now_utc()))
                s.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(str(e)) from e

    # ---- reads ---------------------------------------------------------
    def load(self) -> Optional[Dict[str, Any]]:
        """Return the stored table set, or None if missing or malformed."""
        try:
            with self._new_session() as s:
                payload = s.execute(
                    select(SlotRow.payload).where(SlotRow.key == self.key)
                ).scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.warning("Snapshot slot %r unreadable: %s", self.key, e)
            return None

        if payload is None:
            return None
        try:
            return Snapshot.model_validate_json(payload).root
        except ValidationError as e:
            logger.warning(
                "Snapshot slot %r is malformed, ignoring it (%d errors)",
                self.key,
                e.error_count(),
            )
            return None
