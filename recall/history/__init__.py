"""
History - Persistent review history

Quick start:
    from recall import history

    store = history.ItemStore(history.get_engine())
    history.add_history(store, "hello")

    reviewer = history.Reviewer(store)
    item = reviewer.next()
    reviewer.record_feedback(item.key, "good")
"""

from __future__ import annotations

import logging

from recall.history.database import (
    SCHEMA_VERSION,
    create_history_engine,
    get_engine,
    init_db,
    reset_db,
    schema_version,
)
from recall.history.feedback import FeedbackApplicator
from recall.history.item_store import ItemRecord, ItemStore, ReviewRecord
from recall.history.review_selector import START_OF_TABLE, ReviewSelector
from recall.history.reviewer import Reviewer
from recall.history.session_tracker import SessionTracker

logger = logging.getLogger(__name__)


def should_ignore(word: str) -> bool:
    """Empty words and words starting with whitespace are not recorded."""
    return not word or word[0].isspace()


def add_history(store: ItemStore, word: str) -> bool:
    """
    Record a looked-up word so it enters the review queue.

    Returns:
        False if the word was ignored, True otherwise (including when it
        was already in the history)
    """
    if should_ignore(word):
        logger.debug("Ignoring %r", word)
        return False
    store.ensure_item(word)
    return True


__all__ = [
    # Database
    "SCHEMA_VERSION",
    "create_history_engine",
    "get_engine",
    "init_db",
    "reset_db",
    "schema_version",

    # Components
    "ItemStore",
    "ItemRecord",
    "ReviewRecord",
    "SessionTracker",
    "ReviewSelector",
    "START_OF_TABLE",
    "FeedbackApplicator",
    "Reviewer",

    # Helpers
    "add_history",
    "should_ignore",
]
