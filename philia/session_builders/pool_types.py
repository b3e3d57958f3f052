"""
Typed pool models shared across session builders.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from philia.fsrs.models import Card


@dataclass
class QueuePools:
    """
    Launch-scoped admission pools for a study session.

    Counts are measured against the start of the local day of `now`.
    """
    learning_due: list[Card] = field(default_factory=list)
    review_due: list[Card] = field(default_factory=list)
    new: list[Card] = field(default_factory=list)

    introduced_today: int = 0
    reviews_done_today: int = 0
    remaining_new_limit: int = 0
    remaining_review_slots: int = 0
