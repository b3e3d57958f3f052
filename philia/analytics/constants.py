"""
Constants for deck statistics.
"""

from __future__ import annotations

from typing import Final


# Review cards at or above this stability count as mature
MATURE_STABILITY_DAYS: Final[float] = 21.0

DEFAULT_FORECAST_DAYS: Final[int] = 30

# (upper bound in percent, label), checked in order
HEALTH_THRESHOLDS: Final[list[tuple[float, str]]] = [
    (60.0, "Critical"),
    (70.0, "Poor"),
    (80.0, "Fair"),
    (90.0, "Healthy"),
]
HEALTH_TOP_LABEL: Final[str] = "Excellent"
NO_DATA_LABEL: Final[str] = "No Data"

REVIEW_LOG_COLUMNS: Final[list[str]] = [
    "card_id",
    "rating",
    "state",
    "review",
    "elapsed_days",
    "scheduled_days",
    "day",
]
