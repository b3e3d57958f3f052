"""
FSRS Constants and Parameters

All fixed parameters for the FSRS-6 scheduler in one place.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Final


# ---- Card States ----

class State(IntEnum):
    """Lifecycle phase of a card."""
    NEW = 0
    LEARNING = 1
    REVIEW = 2
    RELEARNING = 3


# ---- Ratings ----

class Rating(IntEnum):
    """Four-level grade for one answer."""
    AGAIN = 1   # Retrieval failed
    HARD = 2    # Retrieved with high effort
    GOOD = 3    # Retrieved normally
    EASY = 4    # Retrieved fluently


RATINGS: Final[tuple[Rating, ...]] = (Rating.AGAIN, Rating.HARD, Rating.GOOD, Rating.EASY)


# ---- Default FSRS-6 Weights (w0-w20) ----

DEFAULT_WEIGHTS: Final[tuple[float, ...]] = (
    0.212, 1.2931, 2.3065, 8.2956,   # Initial stability (0-3)
    6.4133, 0.8334,                  # Initial difficulty (4-5)
    3.0194, 0.001,                   # Difficulty transition (6-7)
    1.8722, 0.1666, 0.796,           # Recall stability (8-10)
    1.4835, 0.0614, 0.2629, 1.6483,  # Forget stability (11-14)
    0.6014, 1.8729,                  # Hard penalty / easy bonus (15-16)
    0.5425, 0.0912, 0.0658,          # Short-term (17-19)
    0.1542,                          # Decay (20)
)
WEIGHT_COUNT: Final[int] = 21


# ---- Global Bounds ----

S_MIN = 0.1        # Minimum stability (days)
S_MAX = 36500.0    # Maximum stability (days)
D_MIN = 1.0        # Minimum difficulty
D_MAX = 10.0       # Maximum difficulty

DEFAULT_REQUEST_RETENTION = 0.9
DEFAULT_MAXIMUM_INTERVAL = 36500

# Stability/difficulty are rounded before they leave the engine
PERSIST_DECIMALS = 8


# ---- Fuzz ----

FUZZ_MIN_INTERVAL = 2.5

# (start, end, factor) bands applied cumulatively
FUZZ_RANGES: Final[tuple[tuple[float, float, float], ...]] = (
    (2.5, 7.0, 0.15),
    (7.0, 20.0, 0.10),
    (20.0, float("inf"), 0.05),
)


# ---- Rating Derivation ----

# Answers at or under this latency count as "fast"
FAST_RESPONSE_THRESHOLD_MS = 5000


# ---- Learning Steps ----

# Used when a step string yields no valid token (minutes)
DEFAULT_STEPS: Final[tuple[float, ...]] = (0, 1, 10)

MINUTES_PER_HOUR = 60
MINUTES_PER_DAY = 1440


# ---- Optimizer ----

MIN_REVIEW_LOGS = 10
