"""
Stability and Difficulty Updates

Implements the FSRS-6 update formulas for a single rating.

Key principles:
- First rating fixes initial stability and difficulty
- Successful recall grows stability, more so when recall was unlikely (low R)
- A lapse collapses stability, bounded by the short-term clamp
- Difficulty moves linearly toward 10 on failure and is pulled back toward
  the initial "Easy" difficulty by mean reversion
"""

from __future__ import annotations

import math
from typing import Sequence

from philia.fsrs.constants import D_MAX, D_MIN, S_MAX, S_MIN, Rating


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def init_stability(w: Sequence[float], rating: Rating) -> float:
    """
    Initial stability for a card's first graded answer.

    Formula: S0(G) = w[G-1]
    """
    return max(w[rating - 1], S_MIN)


def init_difficulty(w: Sequence[float], rating: Rating) -> float:
    """
    Initial difficulty for a card's first graded answer.

    Formula: D0(G) = w[4] - exp((G-1) * w[5]) + 1, clipped to [1, 10]
    """
    d = w[4] - math.exp((rating - 1) * w[5]) + 1
    return clamp(d, D_MIN, D_MAX)


def linear_damping(delta_d: float, difficulty: float) -> float:
    """Scale a difficulty change so it vanishes as D approaches 10."""
    return delta_d * (10 - difficulty) / 9


def mean_reversion(w: Sequence[float], init: float, current: float) -> float:
    """Blend: w[7] * init + (1 - w[7]) * current."""
    return w[7] * init + (1 - w[7]) * current


def next_difficulty(w: Sequence[float], difficulty: float, rating: Rating) -> float:
    """
    Update difficulty after a review.

    Formula:
        delta_d = -w[6] * (G - 3)
        D' = w[7] * D0(Easy) + (1 - w[7]) * (D + delta_d * (10 - D) / 9)

    Args:
        w: FSRS weights
        difficulty: Current difficulty
        rating: Answer rating

    Returns:
        New difficulty (clipped to [1, 10])
    """
    delta_d = -w[6] * (rating - 3)
    damped = difficulty + linear_damping(delta_d, difficulty)
    new_d = mean_reversion(w, init_difficulty(w, Rating.EASY), damped)
    return clamp(new_d, D_MIN, D_MAX)


def next_recall_stability(
    w: Sequence[float],
    difficulty: float,
    stability: float,
    retrievability: float,
    rating: Rating
) -> float:
    """
    Update stability after a successful recall (Hard/Good/Easy).

    Formula:
        S' = S * (1 + exp(w8) * (11 - D) * S^-w9 * (exp((1 - R) * w10) - 1)
                  * hard_penalty * easy_bonus)

    Where hard_penalty = w15 for Hard (else 1) and easy_bonus = w16 for Easy
    (else 1).

    Args:
        w: FSRS weights
        difficulty: Difficulty before the update
        stability: Current stability
        retrievability: Retrievability at review time
        rating: HARD, GOOD or EASY

    Returns:
        New stability clipped to [0.1, 36500]
    """
    hard_penalty = w[15] if rating == Rating.HARD else 1.0
    easy_bonus = w[16] if rating == Rating.EASY else 1.0

    new_s = stability * (
        1
        + math.exp(w[8])
        * (11 - difficulty)
        * math.pow(stability, -w[9])
        * (math.exp((1 - retrievability) * w[10]) - 1)
        * hard_penalty
        * easy_bonus
    )
    return clamp(new_s, S_MIN, S_MAX)


def next_forget_stability(
    w: Sequence[float],
    difficulty: float,
    stability: float,
    retrievability: float
) -> float:
    """
    Post-lapse stability.

    Formula: S'f = w11 * D^-w12 * ((S + 1)^w13 - 1) * exp((1 - R) * w14)
    """
    new_s = (
        w[11]
        * math.pow(difficulty, -w[12])
        * (math.pow(stability + 1, w[13]) - 1)
        * math.exp((1 - retrievability) * w[14])
    )
    return clamp(new_s, S_MIN, S_MAX)


def short_term_stability(w: Sequence[float], stability: float) -> float:
    """Upper bound on post-lapse stability: S / exp(w17 * w18)."""
    return stability / math.exp(w[17] * w[18])


def lapse_stability(
    w: Sequence[float],
    difficulty: float,
    stability: float,
    retrievability: float
) -> float:
    """
    Stability after an Again on a Review card.

    Takes the smaller of the forget stability and the short-term clamp, so a
    lapse can never leave the card more stable than it was.
    """
    s_forget = next_forget_stability(w, difficulty, stability, retrievability)
    s_short = short_term_stability(w, stability)
    return max(min(s_forget, s_short), S_MIN)
