"""
eduflow.runtime  ──  the client façade UI code talks to.

Usage pattern in caller code
----------------------------
    from eduflow import create_client

    client = create_client()            # emulation unless a backend URL is set

    rows = (await client.table("contents").select("*").eq("status", "published")).data
    await client.auth.sign_in_with_password({"email": "me@example.com"})

A real remote client exposes the same surface, so callers never need to know
which one they got.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from sqlalchemy.engine import Engine

from .auth import SessionBus
from .bootstrap import init_store, make_engine
from .config import Settings
from .core.tables import RecordStore
from .errors import BackendConfigError
from .mutations import InsertResult, MutationGateway, PendingFilter
from .query import QueryBuilder, QueryResult

logger = logging.getLogger(__name__)

RemoteFactory = Callable[[str, Optional[str]], Any]


class TableRef:
    """Entry point for one table: reads go to a QueryBuilder, writes to the gateway."""

    def __init__(self, store: RecordStore, name: str, faithful: bool = False):
        self.store = store
        self.name = name
        self.faithful = faithful

    def select(self, columns: str = "*") -> QueryBuilder:
        return QueryBuilder(self.store, self.name, faithful=self.faithful).select(columns)

    def insert(self, record: Dict[str, Any]) -> InsertResult:
        return MutationGateway(self.store, self.name).insert(record)

    def upsert(self, record: Dict[str, Any], on_conflict: str = "id") -> QueryResult:
        return MutationGateway(self.store, self.name).upsert(record, on_conflict=on_conflict)

    def update(self, patch: Dict[str, Any]) -> PendingFilter:
        return MutationGateway(self.store, self.name).update(patch)

    def delete(self) -> PendingFilter:
        return MutationGateway(self.store, self.name).delete()


class DemoClient:
    """In-process stand-in for the remote backend client."""

    def __init__(self, store: RecordStore, settings: Settings):
        self.store = store
        self.settings = settings
        self.auth = SessionBus(store, user_id=settings.demo_user_id)

    def table(self, name: str) -> TableRef:
        return TableRef(self.store, name, faithful=self.settings.faithful_queries)

    from_ = table


def create_client(
    settings: Optional[Settings] = None,
    *,
    engine: Optional[Engine] = None,
    remote_factory: Optional[RemoteFactory] = None,
) -> Any:
    """
    Return `remote_factory(url, key)` when a backend is configured, otherwise
    a DemoClient backed by the durable slot on `engine`.
    """
    settings = settings or Settings.from_env()
    if settings.remote_configured:
        if remote_factory is None:
            raise BackendConfigError(
                f"Backend URL {settings.backend_url!r} is set but no remote client factory was given"
            )
        return remote_factory(settings.backend_url, settings.backend_key)

    logger.info("No remote backend configured, using local emulation")
    store = init_store(engine or make_engine(settings), settings)
    return DemoClient(store, settings)
