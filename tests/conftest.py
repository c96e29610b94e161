import pytest
from sqlalchemy import create_engine

from eduflow.config import Settings
from eduflow.runtime import create_client


@pytest.fixture()
def settings(tmp_path):
    return Settings(snapshot_db_url=f"sqlite:///{tmp_path / 'slot.db'}", storage_key="test_slot")


@pytest.fixture()
def engine(settings):
    eng = create_engine(settings.snapshot_db_url, future=True)
    yield eng
    eng.dispose()


@pytest.fixture()
def client(settings, engine):
    return create_client(settings, engine=engine)


@pytest.fixture()
def faithful_client(settings, engine):
    return create_client(settings.model_copy(update={"faithful_queries": True}), engine=engine)
