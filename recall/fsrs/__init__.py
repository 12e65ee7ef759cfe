"""
FSRS - Default scheduling model for the review history

Quick start:
    from recall import fsrs

    model = fsrs.RetrievabilityScheduler()
    state, due_at = model.next_state(None, fsrs.Rating.GOOD, timedelta(0), now)
"""

from recall.fsrs.constants import (
    ALPHA,
    BASE_GAIN,
    D_MAX,
    D_MIN,
    ETA,
    K,
    K_FAIL,
    R_TARGET,
    S_MIN,
    U_RATING,
    LearningPhase,
    Rating,
)
from recall.fsrs.memory_state import (
    StrengthState,
    calculate_retrievability,
    interval_for_stability,
)
from recall.fsrs.scheduler import RetrievabilityScheduler, SchedulerModel


__all__ = [
    # Model
    "SchedulerModel",
    "RetrievabilityScheduler",

    # Enums
    "Rating",
    "LearningPhase",

    # Memory state
    "StrengthState",
    "calculate_retrievability",
    "interval_for_stability",

    # Parameters
    "R_TARGET",
    "S_MIN",
    "D_MIN",
    "D_MAX",
    "K",
    "K_FAIL",
    "ALPHA",
    "ETA",
    "BASE_GAIN",
    "U_RATING",
]
