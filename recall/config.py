"""
Configuration - Paths and environment settings.

Values are read from the environment (a .env file is honoured) each time a
getter is called, so tests can override them with monkeypatch.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

APP_NAME = "recall"
DB_NAME = "history.db"
TEST_DB_NAME = "test_history.db"


def is_test_mode() -> bool:
    """Check if running in test mode."""
    return os.getenv("TEST_MODE", "false").lower() == "true"


def _ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """
    Directory holding the history database.

    Returns:
        RECALL_DATA_DIR if set, otherwise ~/.local/share/recall (created on demand)
    """
    override = os.getenv("RECALL_DATA_DIR")
    if override:
        return _ensure_dir(Path(override).expanduser())
    return _ensure_dir(Path.home() / ".local" / "share" / APP_NAME)


def get_log_dir() -> Path:
    """Directory for review-mode log files."""
    override = os.getenv("RECALL_LOG_DIR")
    if override:
        return _ensure_dir(Path(override).expanduser())
    return _ensure_dir(Path.home() / ".cache" / APP_NAME)


def get_db_path() -> Path:
    """
    Get the database path based on TEST_MODE environment variable.

    Returns:
        Path to history.db (production) or test_history.db (test mode)
    """
    db_name = TEST_DB_NAME if is_test_mode() else DB_NAME
    return get_data_dir() / db_name


def get_database_url() -> str:
    """SQLAlchemy URL for the history store."""
    url = os.getenv("RECALL_DATABASE_URL")
    if url:
        return url
    return f"sqlite:///{get_db_path()}"


def get_log_level() -> str:
    return os.getenv("RECALL_LOG_LEVEL", "INFO").upper()


def get_mongo_uri() -> str | None:
    """Connection string for the optional MongoDB lexicon."""
    return os.getenv("MONGO_URI") or None


def get_lexicon_db_name() -> str:
    return os.getenv("RECALL_LEXICON_DB", "recall")
