"""
Scheduler - Scheduling model (algorithm logic only)

Pure state transitions, no database calls:
1. Validate the incoming strength state
2. Calculate retrievability from the elapsed time
3. Apply stability/difficulty update rules
4. Move the learning phase and pick the next due time

Any object with a matching ``next_state`` method can stand in for the
default model; the history store never looks inside StrengthState.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta
from typing import Optional, Protocol, Tuple, runtime_checkable

from recall.errors import ModelError
from recall.fsrs import ltm_updates
from recall.fsrs.constants import (
    D_MAX,
    D_MIN,
    MIN_INTERVAL_MINUTES,
    R_TARGET,
    RELEARN_DELAY_MINUTES,
    LearningPhase,
    Rating,
)
from recall.fsrs.memory_state import (
    StrengthState,
    calculate_retrievability,
    days,
    interval_for_stability,
)

logger = logging.getLogger(__name__)


@runtime_checkable
class SchedulerModel(Protocol):
    """Maps (state, rating, elapsed time, now) to a new state and due time."""

    def next_state(
        self,
        state: Optional[StrengthState],
        rating: Rating,
        elapsed: timedelta,
        now: datetime,
    ) -> Tuple[StrengthState, datetime]:
        ...


class RetrievabilityScheduler:
    """
    Default model: exponential forgetting curve R = exp(-Δt/S).

    An item becomes due when its predicted retrievability falls to r_target.
    """

    def __init__(
        self,
        r_target: float = R_TARGET,
        min_interval: timedelta = timedelta(minutes=MIN_INTERVAL_MINUTES),
        relearn_delay: timedelta = timedelta(minutes=RELEARN_DELAY_MINUTES),
    ):
        if not 0.0 < r_target < 1.0:
            raise ValueError(f"r_target must be in (0, 1), got {r_target}")
        self.r_target = r_target
        self.min_interval = min_interval
        self.relearn_delay = relearn_delay

    def next_state(
        self,
        state: Optional[StrengthState],
        rating: Rating,
        elapsed: timedelta,
        now: datetime,
    ) -> Tuple[StrengthState, datetime]:
        if state is None:
            state = StrengthState.new()
        rating = Rating.parse(rating)
        _validate(state)

        elapsed_days = max(0.0, days(elapsed))
        is_new = state.is_new
        retrievability = 1.0 if is_new else calculate_retrievability(state.stability, elapsed_days)

        stability, difficulty = ltm_updates.apply_ltm_update(
            stability=state.stability,
            difficulty=state.difficulty,
            retrievability=retrievability,
            rating=rating,
            is_new_item=is_new,
        )

        phase, lapses = _next_phase(state.phase, rating, state.lapses)

        if rating == Rating.AGAIN:
            interval = self.relearn_delay
        else:
            interval = max(
                self.min_interval,
                timedelta(days=interval_for_stability(stability, self.r_target)),
            )

        new_state = state.evolve(
            stability=stability,
            difficulty=difficulty,
            elapsed_days=int(elapsed_days),
            scheduled_days=int(days(interval)),
            reps=state.reps + 1,
            lapses=lapses,
            phase=phase,
        )
        _validate(new_state)

        logger.debug(
            "rating=%s R=%.3f S %.2f->%.2f D %.2f->%.2f phase %s->%s next in %s",
            rating.name, retrievability, state.stability, stability,
            state.difficulty, difficulty, state.phase.value, phase.value, interval,
        )
        return new_state, now + interval


def _next_phase(phase: LearningPhase, rating: Rating, lapses: int) -> Tuple[LearningPhase, int]:
    if rating == Rating.AGAIN:
        if phase == LearningPhase.REVIEW:
            return LearningPhase.RELEARNING, lapses + 1
        if phase == LearningPhase.RELEARNING:
            return LearningPhase.RELEARNING, lapses
        return LearningPhase.LEARNING, lapses
    if rating == Rating.HARD and phase == LearningPhase.NEW:
        return LearningPhase.LEARNING, lapses
    return LearningPhase.REVIEW, lapses


def _validate(state: StrengthState) -> None:
    """Reject states the update rules cannot work with."""
    if not isinstance(state.phase, LearningPhase):
        raise ModelError(f"unknown learning phase {state.phase!r}")
    if not math.isfinite(state.stability) or state.stability <= 0:
        raise ModelError(f"invalid stability {state.stability!r}")
    if not math.isfinite(state.difficulty) or not D_MIN <= state.difficulty <= D_MAX:
        raise ModelError(f"invalid difficulty {state.difficulty!r}")
    if state.reps < 0 or state.lapses < 0:
        raise ModelError(f"negative review counters (reps={state.reps}, lapses={state.lapses})")
