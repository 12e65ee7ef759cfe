"""
Reviewer - The scheduler instance used by the CLI and the web front-end

Ties the store, session tracker, selector and feedback applicator together
behind two calls, next() and record_feedback(). One Reviewer owns one open
pass and one resume cursor; calls are serialized with a lock so a
multi-threaded host (Streamlit) never interleaves two operations.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Optional

from recall.fsrs.constants import Rating
from recall.fsrs.scheduler import RetrievabilityScheduler, SchedulerModel
from recall.history.feedback import FeedbackApplicator
from recall.history.item_store import ItemRecord, ItemStore
from recall.history.review_selector import START_OF_TABLE, ReviewSelector
from recall.history.session_tracker import SessionTracker

logger = logging.getLogger(__name__)


class Reviewer:

    def __init__(self, store: ItemStore, model: Optional[SchedulerModel] = None):
        self.store = store
        self.model = model or RetrievabilityScheduler()
        self.tracker = SessionTracker(store)
        self.selector = ReviewSelector(store, self.tracker)
        self.feedback = FeedbackApplicator(store, self.model)
        self.row_id = START_OF_TABLE
        self._lock = threading.Lock()

    @property
    def session_id(self) -> Optional[int]:
        return self.tracker.session_id

    def next(self, now: Optional[datetime] = None) -> Optional[ItemRecord]:
        """
        Next item to review, or None when the pass is complete.

        A session is only opened once there is something to show.
        """
        with self._lock:
            now = now if now is not None else self.store.clock()
            if self.tracker.session_id is None and self.store.count_due(now) == 0:
                logger.info("No word to review")
                return None

            session_id = self.tracker.current_session()
            item = self.selector.next_due(session_id, self.row_id, now)
            if item is not None:
                self.row_id = item.row_id
            return item

    def record_feedback(self, key: str, rating, now: Optional[datetime] = None) -> ItemRecord:
        """Apply rating to key. Raises InvalidRating, ItemNotFound or ModelError."""
        rating = Rating.parse(rating)
        with self._lock:
            return self.feedback.apply_rating(key, rating, session_id=self.tracker.session_id, now=now)

    def new_pass(self) -> None:
        """Close the open session and rewind the cursor."""
        with self._lock:
            self.tracker.close()
            self.row_id = START_OF_TABLE
