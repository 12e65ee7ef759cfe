"""
FSRS Constants and Parameters

All configurable parameters for the scheduling model in one place.
"""

from __future__ import annotations

from enum import Enum, IntEnum

from recall.errors import InvalidRating


# ---- Ratings ----

class Rating(IntEnum):
    """User feedback on a retrieval attempt."""
    AGAIN = 1   # Retrieval failed
    HARD = 2    # Retrieved with high effort
    GOOD = 3    # Retrieved normally
    EASY = 4    # Retrieved fluently

    @classmethod
    def parse(cls, value: object) -> "Rating":
        """
        Coerce user input into a Rating.

        Accepts a Rating, an int 1-4 (or its string form) or a
        case-insensitive name such as "easy".

        Raises:
            InvalidRating: for anything else
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise InvalidRating(value)
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                raise InvalidRating(value) from None
        if isinstance(value, str):
            text = value.strip()
            try:
                if text.isdecimal():
                    return cls(int(text))
                return cls[text.upper()]
            except (ValueError, KeyError):
                raise InvalidRating(value) from None
        raise InvalidRating(value)


# ---- Learning Phases ----

class LearningPhase(str, Enum):
    """Where an item sits in its learning lifecycle."""
    NEW = "new"
    LEARNING = "learning"
    REVIEW = "review"
    RELEARNING = "relearning"


# ---- Global Constants ----

R_TARGET = 0.70        # Retrievability at which an item becomes due
S_MIN = 0.5            # Minimum stability (days)
D_MIN = 1.0            # Minimum difficulty
D_MAX = 10.0           # Maximum difficulty
D_INITIAL = 5.0        # Difficulty of a brand new item
MIN_INTERVAL_MINUTES = 30   # Shortest gap after a successful review
RELEARN_DELAY_MINUTES = 10  # Gap after AGAIN


# ---- Learning Parameters ----

K = 1.2          # Stability learning rate
K_FAIL = 0.6     # Stability penalty rate on failure
ALPHA = 0.15     # Difficulty penalty factor (higher = slower learning for hard items)
ETA = 0.8        # Difficulty adaptation rate (higher = faster difficulty changes)


# ---- Base Learning Gain by Rating ----
# Multiplier for stability increase on successful retrieval

BASE_GAIN = {
    Rating.HARD: 0.5,
    Rating.GOOD: 1.0,
    Rating.EASY: 1.8,
}


# ---- Difficulty Update Direction by Rating ----

U_RATING = {
    Rating.AGAIN: +1.0,
    Rating.HARD: +0.35,
    Rating.GOOD: -0.20,
    Rating.EASY: -0.60,
}
