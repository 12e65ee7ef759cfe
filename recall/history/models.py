"""
SQLAlchemy ORM Models for the review history

Defines the session ledger, the item table and the review event log.
The FTS index over items.key is created by the migration in database.py,
since virtual tables have no ORM mapping.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, TypeDecorator
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


class UTCDateTime(TypeDecorator):
    """Stores naive UTC, returns timezone-aware UTC datetimes."""

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            raise ValueError(f"naive datetime {value!r}; pass an aware UTC datetime")
        return value.astimezone(timezone.utc).replace(tzinfo=None)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return value.replace(tzinfo=timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ReviewSession(Base):
    """
    One continuous pass through the review queue.

    Ids are assigned by SQLite AUTOINCREMENT and never reused, so every new
    pass has an id greater than all previous ones.
    """
    __tablename__ = 'sessions'
    __table_args__ = {'sqlite_autoincrement': True}

    id = Column(Integer, primary_key=True)
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)

    def __repr__(self):
        return f"<ReviewSession(id={self.id})>"


class Item(Base):
    """
    A reviewable word and its current scheduling state.

    ``id`` doubles as the SQLite rowid; it is the row ordinal the review
    selector resumes from and the docid of the FTS index.
    """
    __tablename__ = 'items'

    id = Column(Integer, primary_key=True)
    key = Column(String, nullable=False, unique=True)

    due_at = Column(UTCDateTime, nullable=False, index=True)

    # Strength state (owned by the scheduler model)
    stability = Column(Float, nullable=False)
    difficulty = Column(Float, nullable=False)
    elapsed_days = Column(Integer, nullable=False, default=0)
    scheduled_days = Column(Integer, nullable=False, default=0)
    reps = Column(Integer, nullable=False, default=0)
    lapses = Column(Integer, nullable=False, default=0)
    phase = Column(String(16), nullable=False)

    last_reviewed_at = Column(UTCDateTime, nullable=False)

    # Last session this item was shown in; NULL = never shown
    session_id = Column(Integer, ForeignKey('sessions.id', ondelete='SET NULL'), nullable=True)

    events = relationship(
        "ReviewEvent",
        back_populates="item",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<Item({self.key!r}, due={self.due_at}, session={self.session_id})>"


class ReviewEvent(Base):
    """
    Log entry for a single applied rating.

    Captures the strength state before/after the review.
    """
    __tablename__ = 'review_events'

    id = Column(Integer, primary_key=True, autoincrement=True)
    item_id = Column(Integer, ForeignKey('items.id', ondelete='CASCADE'), nullable=False, index=True)
    item_key = Column(String, nullable=False)

    reviewed_at = Column(UTCDateTime, nullable=False, index=True)
    rating = Column(Integer, nullable=False)  # 1=AGAIN, 2=HARD, 3=GOOD, 4=EASY
    elapsed_days = Column(Float, nullable=False)

    # State before review
    stability_before = Column(Float, nullable=False)
    difficulty_before = Column(Float, nullable=False)
    phase_before = Column(String(16), nullable=False)

    # State after review
    stability_after = Column(Float, nullable=False)
    difficulty_after = Column(Float, nullable=False)
    phase_after = Column(String(16), nullable=False)
    due_at_after = Column(UTCDateTime, nullable=False)

    session_id = Column(Integer, nullable=True)

    item = relationship("Item", back_populates="events")

    def __repr__(self):
        return f"<ReviewEvent(id={self.id}, {self.item_key!r}, rating={self.rating})>"
