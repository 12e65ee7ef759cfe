import pytest
from sqlalchemy import text

from recall.errors import StorageError
from recall.history import (
    SCHEMA_VERSION,
    ItemStore,
    create_history_engine,
    init_db,
    reset_db,
    schema_version,
)


def _table_names(engine):
    with engine.connect() as conn:
        rows = conn.execute(text("SELECT name FROM sqlite_master WHERE type IN ('table', 'trigger')"))
        return {row[0] for row in rows}


def test_fresh_database_gets_full_schema(store, engine):
    assert schema_version(engine) == SCHEMA_VERSION
    names = _table_names(engine)
    assert {"items", "sessions", "review_events", "items_fts"} <= names
    assert {"items_fts_bu", "items_fts_bd", "items_fts_au", "items_fts_ai"} <= names


def test_migration_runs_once(store, engine):
    store.ensure_item("hello")
    init_db(engine)
    init_db(engine)
    assert store.all_keys() == ["hello"]


def test_reopening_existing_database_keeps_rows(store, db_url, clock):
    store.ensure_item("hello")

    other = create_history_engine(db_url)
    try:
        reopened = ItemStore(other, clock=clock)
        assert reopened.all_keys() == ["hello"]
        assert schema_version(other) == SCHEMA_VERSION
    finally:
        other.dispose()


def test_newer_schema_is_refused(db_url):
    engine = create_history_engine(db_url)
    try:
        with engine.begin() as conn:
            conn.exec_driver_sql(f"PRAGMA user_version = {SCHEMA_VERSION + 1}")
        with pytest.raises(StorageError):
            ItemStore(engine)
    finally:
        engine.dispose()


def test_only_sqlite_urls_are_accepted():
    with pytest.raises(StorageError):
        create_history_engine("postgresql://localhost/history")


def test_foreign_keys_are_enforced(engine, store):
    with engine.connect() as conn:
        assert conn.exec_driver_sql("PRAGMA foreign_keys").scalar() == 1


def test_reset_db_empties_everything(store, engine, tracker):
    store.ensure_item("hello")
    tracker.current_session()

    reset_db(engine)

    assert store.count_items() == 0
    assert store.count_sessions() == 0
    assert schema_version(engine) == SCHEMA_VERSION
    store.ensure_item("again")
    assert store.search("aga") == ["again"]


def test_timestamps_come_back_timezone_aware(store, clock):
    record = store.ensure_item("hello")
    assert record.due_at.tzinfo is not None
    assert store.get_item("hello").due_at == clock.now
