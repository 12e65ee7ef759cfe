"""
Database - Engine setup and schema migration

Handles the SQLite engine, sessions and the one-time schema migration that
is gated by ``PRAGMA user_version``.

This module handles ONLY connection and schema bookkeeping.
Row-level operations live in item_store.py.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from recall import config
from recall.errors import StorageError
from recall.history.models import Base

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

# FTS4 external-content index over items.key. The triggers mirror every
# insert/update/delete on items; BEFORE triggers run while the old row is
# still readable by the content table lookup.
FTS_SCHEMA = [
    'CREATE VIRTUAL TABLE items_fts USING fts4(content="items", "key")',
    """
    CREATE TRIGGER items_fts_bu BEFORE UPDATE ON items BEGIN
        DELETE FROM items_fts WHERE docid = old.id;
    END
    """,
    """
    CREATE TRIGGER items_fts_bd BEFORE DELETE ON items BEGIN
        DELETE FROM items_fts WHERE docid = old.id;
    END
    """,
    """
    CREATE TRIGGER items_fts_au AFTER UPDATE ON items BEGIN
        INSERT INTO items_fts (docid, "key") VALUES (new.id, new."key");
    END
    """,
    """
    CREATE TRIGGER items_fts_ai AFTER INSERT ON items BEGIN
        INSERT INTO items_fts (docid, "key") VALUES (new.id, new."key");
    END
    """,
]

FTS_DROP = [
    "DROP TRIGGER IF EXISTS items_fts_bu",
    "DROP TRIGGER IF EXISTS items_fts_bd",
    "DROP TRIGGER IF EXISTS items_fts_au",
    "DROP TRIGGER IF EXISTS items_fts_ai",
    "DROP TABLE IF EXISTS items_fts",
]

# Engines whose schema has already been checked in this process
_migrated: set[Engine] = set()
_default_engine: Optional[Engine] = None


# ---- Engine Management ----

def create_history_engine(url: Optional[str] = None, echo: bool = False) -> Engine:
    """
    Create an engine for the history database.

    pysqlite's implicit transaction handling is switched off and BEGIN is
    emitted explicitly, so DDL in the migration is transactional too.
    Foreign keys are enabled on every new connection. Connections may be
    used from any thread; callers serialize access (see Reviewer).

    Args:
        url: SQLAlchemy URL (defaults to config.get_database_url())
        echo: Log emitted SQL

    Returns:
        SQLAlchemy Engine instance
    """
    url = url or config.get_database_url()
    if not url.startswith("sqlite"):
        raise StorageError(f"unsupported database URL {url!r}; only SQLite is supported")

    engine = create_engine(url, echo=echo, connect_args={"check_same_thread": False})

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return engine


def get_engine() -> Engine:
    """
    Get the process-wide engine for the configured database.

    Created on first use and migrated before it is returned.
    """
    global _default_engine

    if _default_engine is None:
        _default_engine = create_history_engine()
    init_db(_default_engine)
    return _default_engine


def make_session_factory(engine: Engine) -> sessionmaker:
    """Session factory bound to engine (objects stay usable after commit)."""
    return sessionmaker(bind=engine, expire_on_commit=False)


# ---- Schema ----

def schema_version(engine: Engine) -> int:
    """Read PRAGMA user_version."""
    with engine.connect() as conn:
        return int(conn.exec_driver_sql("PRAGMA user_version").scalar() or 0)


def init_db(engine: Engine) -> None:
    """
    Create the schema if the database is fresh.

    Runs at most once per engine per process. A database at version 0 gets
    the full schema in a single transaction; a database written by a newer
    schema is refused.

    Raises:
        StorageError: if the migration fails or the schema is too new
    """
    if engine in _migrated:
        return

    try:
        version = schema_version(engine)
        if version > SCHEMA_VERSION:
            raise StorageError(
                f"history database has schema version {version}, "
                f"this program understands up to {SCHEMA_VERSION}"
            )
        if version == 0:
            logger.info("Creating history schema (version %d) at %s", SCHEMA_VERSION, engine.url)
            with engine.begin() as conn:
                conn.exec_driver_sql("PRAGMA auto_vacuum = INCREMENTAL")
                Base.metadata.create_all(conn)
                for statement in FTS_SCHEMA:
                    conn.exec_driver_sql(statement)
                conn.exec_driver_sql(f"PRAGMA user_version = {SCHEMA_VERSION}")
    except SQLAlchemyError as exc:
        raise StorageError(f"schema migration failed: {exc}") from exc

    _migrated.add(engine)


def reset_db(engine: Optional[Engine] = None) -> None:
    """
    DANGEROUS: Delete all data and recreate tables.

    Only use this for testing or when you want to start fresh.
    All review history will be lost!
    """
    engine = engine or get_engine()
    try:
        with engine.begin() as conn:
            for statement in FTS_DROP:
                conn.exec_driver_sql(statement)
            Base.metadata.drop_all(conn)
            conn.exec_driver_sql("PRAGMA user_version = 0")
    except SQLAlchemyError as exc:
        raise StorageError(f"reset failed: {exc}") from exc

    _migrated.discard(engine)
    logger.warning("History database at %s was reset", engine.url)
    init_db(engine)
