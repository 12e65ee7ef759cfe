"""
Memory State - Strength state and retrievability

Key concepts:
- Stability (S): How slowly memory decays (in days)
- Difficulty (D): How hard the item is to learn (1-10 scale)
- Retrievability (R): Probability of successful recall after Δt days
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from datetime import timedelta

from recall.fsrs.constants import D_INITIAL, LearningPhase, R_TARGET, S_MIN


SECONDS_PER_DAY = 86400.0


@dataclass(frozen=True)
class StrengthState:
    """
    Scheduling parameters for one item.

    The history store treats this as an opaque payload: it is produced by a
    scheduler model and persisted column by column.
    """
    stability: float = S_MIN
    difficulty: float = D_INITIAL
    elapsed_days: int = 0      # Whole days between the last two reviews
    scheduled_days: int = 0    # Whole days until the next review
    reps: int = 0
    lapses: int = 0
    phase: LearningPhase = field(default=LearningPhase.NEW)

    @classmethod
    def new(cls) -> "StrengthState":
        """Default state for an item that was just looked up."""
        return cls()

    @property
    def is_new(self) -> bool:
        return self.reps == 0

    def evolve(self, **changes) -> "StrengthState":
        return replace(self, **changes)


def days(delta: timedelta) -> float:
    """Convert a timedelta to fractional days."""
    return delta.total_seconds() / SECONDS_PER_DAY


def calculate_retrievability(stability: float, elapsed_days: float) -> float:
    """
    Calculate retrievability using exponential decay.

    Formula: R = exp(-Δt / S)

    Args:
        stability: Current stability in days
        elapsed_days: Time since the last review in days

    Returns:
        Retrievability between 0 and 1
    """
    if elapsed_days <= 0:
        return 1.0
    return math.exp(-elapsed_days / stability)


def interval_for_stability(stability: float, r_target: float = R_TARGET) -> float:
    """
    Days until retrievability decays to r_target.

    Inverse of calculate_retrievability: Δt = -S * ln(R_target)
    """
    return -stability * math.log(r_target)
