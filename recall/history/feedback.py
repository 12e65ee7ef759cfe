"""
Feedback Applicator - Applies a rating to an item

Workflow:
1. Load the item's strength state and last review time
2. Compute the elapsed time
3. Ask the scheduler model for the next state and due time
4. Persist both (plus a review event) in one transaction

Nothing is written unless every step succeeds.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from recall.errors import ModelError, RecallError
from recall.fsrs.constants import Rating
from recall.fsrs.memory_state import StrengthState, days
from recall.fsrs.scheduler import SchedulerModel
from recall.history.item_store import ItemRecord, ItemStore, ReviewRecord

logger = logging.getLogger(__name__)


class FeedbackApplicator:

    def __init__(self, store: ItemStore, model: SchedulerModel):
        self.store = store
        self.model = model

    def apply_rating(
        self,
        key: str,
        rating: Rating,
        session_id: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> ItemRecord:
        """
        Rate key and reschedule it.

        Args:
            key: Item key
            rating: Rating (or anything Rating.parse accepts)
            session_id: Recorded on the review event
            now: Review time (defaults to the store clock)

        Returns:
            The updated item

        Raises:
            InvalidRating: rating is not again/hard/good/easy
            ItemNotFound: key is not stored
            ModelError: the model failed or returned an invalid result
        """
        rating = Rating.parse(rating)
        now = now if now is not None else self.store.clock()

        item = self.store.get_item(key)
        elapsed = now - item.last_reviewed_at

        try:
            new_state, due_at = self.model.next_state(item.state, rating, elapsed, now)
        except RecallError:
            raise
        except Exception as exc:
            raise ModelError(f"scheduler model failed for {key!r}: {exc}") from exc

        if not isinstance(new_state, StrengthState):
            raise ModelError(f"scheduler model returned {type(new_state).__name__}, not StrengthState")
        if not isinstance(due_at, datetime) or due_at.tzinfo is None:
            raise ModelError(f"scheduler model returned invalid due time {due_at!r}")

        updated = self.store.update_item(
            key,
            due_at,
            new_state,
            reviewed_at=now,
            review=ReviewRecord(
                rating=rating,
                elapsed_days=max(0.0, days(elapsed)),
                previous=item.state,
                session_id=session_id,
            ),
        )
        logger.info(
            "%s rated %s: due %s (stability %.2f, phase %s)",
            key, rating.name.lower(), due_at.isoformat(), new_state.stability,
            getattr(new_state.phase, "value", new_state.phase),
        )
        return updated
