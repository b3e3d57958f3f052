"""
Memory State - Retrievability and Elapsed Time

Derived quantities for the FSRS-6 power-law forgetting curve.

Key concepts:
- Stability (S): days until recall probability decays to 90%
- Difficulty (D): how hard the card is to stabilize (1-10 scale)
- Retrievability (R): probability of successful recall at time t
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Optional

SECONDS_PER_DAY = 86400.0


def forgetting_factor(decay: float) -> float:
    """
    Factor that pins R(S, S) to 0.9 for a given decay.

    Formula: factor = exp(ln(0.9) / decay) - 1

    Args:
        decay: Curve exponent, -w[20] (negative)

    Returns:
        Forgetting factor
    """
    return math.exp(math.log(0.9) / decay) - 1


def calculate_retrievability(
    stability: float,
    elapsed_days: float,
    decay: float,
    factor: float
) -> float:
    """
    Calculate retrievability using the power-law forgetting curve.

    Formula: R = (1 + factor * t / S) ^ decay

    Interpretation:
    - Immediately after review: R = 1.0
    - When t == S: R = 0.9
    - Stability of zero (never reviewed) yields R = 0 instead of NaN

    Args:
        stability: Current stability in days
        elapsed_days: Time since last review in days
        decay: Curve exponent, -w[20]
        factor: Value of forgetting_factor(decay)

    Returns:
        Retrievability between 0 and 1
    """
    if stability <= 0:
        return 0.0

    return math.pow(1 + factor * max(elapsed_days, 0.0) / stability, decay)


def elapsed_days_between(
    last_review: Optional[datetime],
    now: datetime
) -> float:
    """
    Fractional days from last review to now, clamped at zero.

    Args:
        last_review: Timestamp of last review, or None if never reviewed
        now: Current timestamp

    Returns:
        Days since last review (0 if never reviewed)
    """
    if last_review is None:
        return 0.0

    delta = now - last_review
    return max(0.0, delta.total_seconds() / SECONDS_PER_DAY)
