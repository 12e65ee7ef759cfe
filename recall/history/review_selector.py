"""
Review Selector - Picks the next due item of a pass

Two-phase search:
1. A random due item, not yet shown in this session, with a row ordinal
   past the resume point
2. If the tail is exhausted, the same query from the first row

The chosen item is stamped with the session id before it is returned, so
it cannot be picked again in the same pass.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Optional

from recall.history.item_store import ItemRecord, ItemStore
from recall.history.session_tracker import SessionTracker

logger = logging.getLogger(__name__)

START_OF_TABLE = -1


class ReviewSelector:

    def __init__(self, store: ItemStore, tracker: SessionTracker):
        self.store = store
        self.tracker = tracker

    def next_due(
        self,
        session_id: int,
        resume_after_row: int = START_OF_TABLE,
        now: Optional[datetime] = None,
    ) -> Optional[ItemRecord]:
        """
        Next item to show in session_id.

        Args:
            session_id: Open session; items already marked with it are skipped
            resume_after_row: Row ordinal of the previous pick (START_OF_TABLE to begin)
            now: Current time (defaults to the store clock)

        Returns:
            The item, already marked as shown (its row_id is the next resume
            point), or None when the pass is complete
        """
        now = now if now is not None else self.store.clock()

        item = self.store.pick_due(now, exclude_session=session_id, after_row=resume_after_row)
        if item is None and resume_after_row != START_OF_TABLE:
            logger.debug("No due items after row %d, searching from the start", resume_after_row)
            item = self.store.pick_due(now, exclude_session=session_id)

        if item is None:
            logger.info("Session %d: nothing left to review", session_id)
            return None

        self.tracker.mark_shown(item.key, session_id)
        logger.info("Session %d: next %r (row %d)", session_id, item.key, item.row_id)
        return replace(item, session_id=session_id)
