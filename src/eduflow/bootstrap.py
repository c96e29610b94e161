"""
Single entry-point that wires SQLAlchemy into the Record Store.
Call once per process, e.g. from `runtime.create_client()`.
"""

import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from .config import Settings
from .core.tables import RecordStore
from .persistence.models import Base
from .persistence.store import SnapshotStore

logger = logging.getLogger(__name__)


def make_engine(settings: Settings) -> Engine:
    return create_engine(settings.snapshot_db_url, future=True)


def init_store(engine: Engine, settings: Settings) -> RecordStore:
    """
    Create the `kv_slots` table if needed and seed a RecordStore from the
    durable slot (or the defaults). An unusable medium leaves the store
    memory-only.
    """
    try:
        Base.metadata.create_all(engine)
    except SQLAlchemyError as e:
        logger.warning("Snapshot medium unavailable (%s); running memory-only", e)
    persistence = SnapshotStore(engine, settings.storage_key)
    return RecordStore(persistence, demo_user_id=settings.demo_user_id).initialize()
