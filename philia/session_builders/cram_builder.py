"""
Cram Queue - Same-day re-drill

Cram sessions replay the cards studied today in random order. They never
touch scheduling state.
"""

from __future__ import annotations
import random
from datetime import datetime
from typing import Optional, Sequence

from philia.config import make_rng
from philia.fsrs.models import Card
from philia.session_builders.pool_utils import shuffled, start_of_day


def build_cram_queue(
    cards: Sequence[Card],
    now: datetime,
    rng: Optional[random.Random] = None
) -> list[Card]:
    """
    Cards last reviewed today (on or after midnight), shuffled.
    """
    if rng is None:
        rng = make_rng()

    day_start = start_of_day(now)
    studied = [
        c for c in cards
        if c.last_review is not None and c.last_review >= day_start
    ]
    return shuffled(studied, rng)
