"""
Strength Updates - Stability and difficulty after a rating

Rules of thumb encoded here:
- A success long after the last review (low R) grows stability most
- A failure costs more stability when recall was expected (high R)
- Difficulty tracks how much effort an item keeps needing
"""

from __future__ import annotations

from recall.fsrs.constants import (
    ALPHA,
    BASE_GAIN,
    D_MAX,
    D_MIN,
    ETA,
    K,
    K_FAIL,
    S_MIN,
    U_RATING,
    Rating,
)


def update_stability_on_success(
    stability: float,
    retrievability: float,
    difficulty: float,
    rating: Rating,
    is_new_item: bool = False
) -> float:
    """
    Update stability after successful retrieval (Hard/Good/Easy).

    Formula:
        ΔS = k * S * base_gain(rating) * (1 - R) * f(D)
        S_new = S + ΔS

    Where:
        - (1 - R) rewards risky (well-spaced) success
        - f(D) = 1 / (1 + alpha * (D - 1)) reduces gains for difficult items

    First review: S_new = S_MIN * base_gain(rating) * 2, since (1 - R) = 0.

    Args:
        stability: Current stability (S)
        retrievability: Current retrievability (R)
        difficulty: Current difficulty (D)
        rating: User feedback (HARD, GOOD or EASY)
        is_new_item: True if this is the first review

    Returns:
        New stability value
    """
    if rating == Rating.AGAIN:
        raise ValueError("Use update_stability_on_failure for AGAIN feedback")

    base_gain = BASE_GAIN[rating]

    if is_new_item:
        return max(S_MIN, S_MIN * base_gain * 2.0)

    f_d = 1.0 / (1.0 + ALPHA * (difficulty - 1.0))
    delta_s = K * stability * base_gain * (1.0 - retrievability) * f_d

    return max(S_MIN, stability + delta_s)


def update_stability_on_failure(stability: float, retrievability: float) -> float:
    """Stability after AGAIN: max(S_min, S * (1 - k_fail * R))."""
    return max(S_MIN, stability * (1.0 - K_FAIL * retrievability))


def update_difficulty(difficulty: float, retrievability: float, rating: Rating) -> float:
    """
    Update difficulty based on retrieval outcome.

    Formula:
        D_new = clip(D + eta * surprise * u(rating), 1, 10)

    Where surprise = R on failure, (1 - R) on success. A brand new item
    (R = 1) still moves by u(rating) on success so the first rating counts.
    """
    if rating == Rating.AGAIN:
        surprise = retrievability
    else:
        surprise = 1.0 - retrievability

    delta_d = ETA * surprise * U_RATING[rating]
    return max(D_MIN, min(D_MAX, difficulty + delta_d))


def apply_ltm_update(
    stability: float,
    difficulty: float,
    retrievability: float,
    rating: Rating,
    is_new_item: bool = False
) -> tuple[float, float]:
    """
    Apply update rules to get new S and D.

    Returns:
        (new_stability, new_difficulty)
    """
    if rating == Rating.AGAIN:
        new_stability = update_stability_on_failure(stability, retrievability)
    else:
        new_stability = update_stability_on_success(
            stability, retrievability, difficulty, rating, is_new_item
        )

    if is_new_item:
        # R = 1 for a first review; treat the rating as fully informative
        new_difficulty = max(D_MIN, min(D_MAX, difficulty + ETA * U_RATING[rating]))
    else:
        new_difficulty = update_difficulty(difficulty, retrievability, rating)

    return new_stability, new_difficulty
