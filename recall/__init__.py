"""
Recall - Spaced repetition for words you looked up

Subpackages:
    recall.fsrs      scheduling model (strength state, ratings, due times)
    recall.history   persistent item store, review sessions and feedback
"""

from recall.errors import InvalidRating, ItemNotFound, ModelError, RecallError, StorageError

__version__ = "0.1.0"

__all__ = [
    "RecallError",
    "ItemNotFound",
    "InvalidRating",
    "ModelError",
    "StorageError",
]
