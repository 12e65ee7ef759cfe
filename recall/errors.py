"""
Errors - Exception taxonomy for the review history.

Every error raised by the store, the scheduler model or the review loop
derives from RecallError so callers can catch the whole family at once.
"""

from __future__ import annotations


class RecallError(Exception):
    """Base class for all review history errors."""


class ItemNotFound(RecallError, LookupError):
    """An operation referenced a key that is not in the store."""

    def __init__(self, key: str):
        super().__init__(f"{key!r} not found in history")
        self.key = key


class InvalidRating(RecallError, ValueError):
    """A rating outside again/hard/good/easy was supplied."""

    def __init__(self, value: object):
        super().__init__(f"invalid rating {value!r} (expected 1-4 or again/hard/good/easy)")
        self.value = value


class ModelError(RecallError):
    """The scheduler model failed or produced an invalid state."""


class StorageError(RecallError):
    """Durable storage failed (I/O, constraint violation, bad schema)."""
