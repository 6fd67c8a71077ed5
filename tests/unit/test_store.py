import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from backend.models.kv_entry import KeyValueEntry
from database.base import Base
from report_engine.store import InMemoryKeyValueStore, SqlKeyValueStore


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


def test_sql_store_round_trip(session_factory):
    store = SqlKeyValueStore(session_factory)
    assert store.load("files") == []
    store.save("files", [{"id": "a"}])
    store.save("files", [{"id": "a"}, {"id": "b"}])
    assert store.load("files") == [{"id": "a"}, {"id": "b"}]
    assert store.load("customers") == []


def test_sql_store_ignores_non_list_value(session_factory):
    db = session_factory()
    db.add(KeyValueEntry(key="files", value={"not": "a list"}))
    db.commit()
    db.close()
    assert SqlKeyValueStore(session_factory).load("files") == []


def test_memory_store_copies_documents():
    store = InMemoryKeyValueStore()
    docs = [{"id": "a"}]
    store.save("k", docs)
    docs[0]["id"] = "changed"
    assert store.load("k") == [{"id": "a"}]


def test_engine_uses_configured_database_url():
    from database.connection import engine, settings
    assert engine.url.render_as_string(hide_password=False) == settings.DATABASE_URL
