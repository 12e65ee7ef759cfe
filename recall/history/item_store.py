"""
Item Store - Durable table of reviewable items

Owns every mutation of the items table. The FTS index over keys is kept in
step by triggers, so each write here updates it in the same transaction.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterator, Optional

from sqlalchemy import func, text
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from recall.errors import ItemNotFound, StorageError
from recall.fsrs.constants import LearningPhase, Rating
from recall.fsrs.memory_state import StrengthState
from recall.history.database import init_db, make_session_factory
from recall.history.models import Item, ReviewEvent, ReviewSession, utcnow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ItemRecord:
    """Detached snapshot of one item row."""
    key: str
    due_at: datetime
    state: StrengthState
    last_reviewed_at: datetime
    session_id: Optional[int]
    row_id: int


@dataclass(frozen=True)
class ReviewRecord:
    """What to append to the review log alongside an item update."""
    rating: Rating
    elapsed_days: float
    previous: StrengthState
    session_id: Optional[int] = None


def _phase(value: str):
    # Unknown phases are passed through so the model can reject them
    try:
        return LearningPhase(value)
    except ValueError:
        return value


def _to_record(row: Item) -> ItemRecord:
    return ItemRecord(
        key=row.key,
        due_at=row.due_at,
        state=StrengthState(
            stability=row.stability,
            difficulty=row.difficulty,
            elapsed_days=row.elapsed_days,
            scheduled_days=row.scheduled_days,
            reps=row.reps,
            lapses=row.lapses,
            phase=_phase(row.phase),
        ),
        last_reviewed_at=row.last_reviewed_at,
        session_id=row.session_id,
        row_id=row.id,
    )


def _phase_value(phase) -> str:
    return phase.value if isinstance(phase, LearningPhase) else str(phase)


def _state_columns(state: StrengthState) -> dict:
    return {
        "stability": state.stability,
        "difficulty": state.difficulty,
        "elapsed_days": state.elapsed_days,
        "scheduled_days": state.scheduled_days,
        "reps": state.reps,
        "lapses": state.lapses,
        "phase": _phase_value(state.phase),
    }


class ItemStore:
    """
    Repository over the items, sessions and review_events tables.

    Args:
        engine: SQLAlchemy engine; the schema is migrated on construction
        clock: Returns the current aware UTC time (injectable for tests)
    """

    def __init__(self, engine: Engine, clock: Callable[[], datetime] = utcnow):
        init_db(engine)
        self.engine = engine
        self.clock = clock
        self._session_factory = make_session_factory(engine)

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Transactional scope: commit on success, roll back on any error."""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            raise StorageError(str(exc)) from exc
        except BaseException:
            session.rollback()
            raise
        finally:
            session.close()

    def _now(self, now: Optional[datetime]) -> datetime:
        return now if now is not None else self.clock()

    # ---- Item operations ----

    def ensure_item(self, key: str, now: Optional[datetime] = None) -> ItemRecord:
        """
        Insert key with a fresh strength state, due immediately.

        An existing row is returned unchanged (no due-date or strength reset).
        """
        now = self._now(now)
        values = {
            "key": key,
            "due_at": now,
            "last_reviewed_at": now,
            "session_id": None,
            **_state_columns(StrengthState.new()),
        }
        with self.session_scope() as session:
            stmt = sqlite_insert(Item).values(**values).on_conflict_do_nothing(index_elements=["key"])
            result = session.execute(stmt)
            if result.rowcount:
                logger.info("Added %r to history", key)
            row = session.query(Item).filter(Item.key == key).one()
            return _to_record(row)

    def get_item(self, key: str) -> ItemRecord:
        """
        Raises:
            ItemNotFound: if key is not stored
        """
        with self.session_scope() as session:
            row = session.query(Item).filter(Item.key == key).first()
            if row is None:
                raise ItemNotFound(key)
            return _to_record(row)

    def update_item(
        self,
        key: str,
        new_due_at: datetime,
        new_state: StrengthState,
        reviewed_at: Optional[datetime] = None,
        review: Optional[ReviewRecord] = None,
    ) -> ItemRecord:
        """
        Replace due time and strength state as one write.

        Args:
            key: Item key
            new_due_at: Next due time
            new_state: New strength state
            reviewed_at: Stored as last_reviewed_at (defaults to now)
            review: If given, a review_events row is added in the same transaction

        Raises:
            ItemNotFound: if key is not stored (nothing is written)
        """
        reviewed_at = self._now(reviewed_at)
        with self.session_scope() as session:
            row = session.query(Item).filter(Item.key == key).first()
            if row is None:
                raise ItemNotFound(key)

            for column, value in _state_columns(new_state).items():
                setattr(row, column, value)
            row.due_at = new_due_at
            row.last_reviewed_at = reviewed_at

            if review is not None:
                session.add(ReviewEvent(
                    item_id=row.id,
                    item_key=key,
                    reviewed_at=reviewed_at,
                    rating=int(review.rating),
                    elapsed_days=review.elapsed_days,
                    stability_before=review.previous.stability,
                    difficulty_before=review.previous.difficulty,
                    phase_before=_phase_value(review.previous.phase),
                    stability_after=new_state.stability,
                    difficulty_after=new_state.difficulty,
                    phase_after=_phase_value(new_state.phase),
                    due_at_after=new_due_at,
                    session_id=review.session_id,
                ))
            session.flush()
            return _to_record(row)

    def remove_item(self, key: str) -> int:
        """Hard delete (explicit forgetting). Returns the number of rows removed."""
        with self.session_scope() as session:
            count = session.query(Item).filter(Item.key == key).delete(synchronize_session=False)
        if count:
            logger.info("Removed %r from history", key)
        return count

    def all_keys(self) -> list[str]:
        return list(self.iter_keys())

    def iter_keys(self, batch_size: int = 500) -> Iterator[str]:
        """Stream keys in row order without loading the whole table."""
        last_id = 0
        while True:
            with self.session_scope() as session:
                rows = (
                    session.query(Item.id, Item.key)
                    .filter(Item.id > last_id)
                    .order_by(Item.id)
                    .limit(batch_size)
                    .all()
                )
            if not rows:
                return
            for row_id, key in rows:
                yield key
            last_id = rows[-1][0]

    def search(self, prefix: str, limit: int = 20) -> list[str]:
        """
        Prefix search over keys through the FTS index.

        Args:
            prefix: Leading characters of one or more key tokens; every token must match
            limit: Maximum number of keys

        Returns:
            Matching keys, in row order
        """
        tokens = "".join(ch if ch.isalnum() else " " for ch in prefix).split()
        if not tokens:
            return []
        with self.session_scope() as session:
            rows = session.execute(
                text(
                    'SELECT items."key" FROM items_fts '
                    "JOIN items ON items.id = items_fts.docid "
                    "WHERE items_fts MATCH :query ORDER BY items.id LIMIT :limit"
                ),
                {"query": " ".join(f"{token}*" for token in tokens), "limit": limit},
            ).all()
        return [row[0] for row in rows]

    # ---- Review queue queries ----

    def pick_due(
        self,
        now: datetime,
        exclude_session: Optional[int],
        after_row: Optional[int] = None,
    ) -> Optional[ItemRecord]:
        """
        One random item that is due and not yet shown in exclude_session.

        Args:
            now: Items with due_at <= now qualify
            exclude_session: Session whose marked items are skipped (None = skip nothing)
            after_row: Only consider rows with a greater ordinal
        """
        with self.session_scope() as session:
            query = session.query(Item).filter(Item.due_at <= now)
            if exclude_session is not None:
                query = query.filter(
                    (Item.session_id.is_(None)) | (Item.session_id != exclude_session)
                )
            if after_row is not None:
                query = query.filter(Item.id > after_row)
            row = query.order_by(func.random()).limit(1).first()
            return _to_record(row) if row is not None else None

    def count_items(self) -> int:
        with self.session_scope() as session:
            return session.query(func.count(Item.id)).scalar()

    def count_due(self, now: Optional[datetime] = None, exclude_session: Optional[int] = None) -> int:
        now = self._now(now)
        with self.session_scope() as session:
            query = session.query(func.count(Item.id)).filter(Item.due_at <= now)
            if exclude_session is not None:
                query = query.filter(
                    (Item.session_id.is_(None)) | (Item.session_id != exclude_session)
                )
            return query.scalar()

    def count_sessions(self) -> int:
        with self.session_scope() as session:
            return session.query(func.count(ReviewSession.id)).scalar()

    def recent_events(self, limit: int = 10) -> list[dict]:
        """Most recent review events, newest first."""
        with self.session_scope() as session:
            events = (
                session.query(ReviewEvent)
                .order_by(ReviewEvent.reviewed_at.desc(), ReviewEvent.id.desc())
                .limit(limit)
                .all()
            )
            return [
                {
                    "key": event.item_key,
                    "reviewed_at": event.reviewed_at,
                    "rating": Rating(event.rating).name.lower(),
                    "stability_before": event.stability_before,
                    "stability_after": event.stability_after,
                    "phase_after": event.phase_after,
                    "due_at_after": event.due_at_after,
                    "session_id": event.session_id,
                }
                for event in events
            ]


__all__ = ["ItemStore", "ItemRecord", "ReviewRecord"]
