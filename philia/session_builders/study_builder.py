"""
Study Queue - Three-Pool Session Creation

Creates the study queue for a deck from three pools:
1. Learning pool: Learning/Relearning cards that are due (never capped)
2. Review pool: Review cards that are due
3. New pool: Cards never studied

Session Logic:
- Reviews: oldest-due first, up to today's remaining review slots
- New: oldest-created first, up to today's remaining new card limit
- Each pool is shuffled, then the whole queue is sorted by due date
"""

from __future__ import annotations
import random
from datetime import datetime
from typing import TYPE_CHECKING, Optional, Sequence

import structlog

from philia.config import make_rng
from philia.fsrs.constants import State
from philia.fsrs.models import Card
from philia.session_builders.pool_types import QueuePools
from philia.session_builders.pool_utils import (
    count_introduced_today,
    count_reviews_done_today,
    shuffled,
    sort_by_due,
)

if TYPE_CHECKING:
    from philia.schemas import DeckSettings

logger = structlog.get_logger()


def build_queue_pools(
    cards: Sequence[Card],
    settings: DeckSettings,
    now: datetime
) -> QueuePools:
    """
    Partition a deck's cards and compute today's remaining limits.

    New cards keep the order they were supplied in, which is taken to be
    creation order.
    """
    learning_due = [
        c for c in cards
        if c.state in (State.LEARNING, State.RELEARNING) and c.due <= now
    ]
    review_due = [c for c in cards if c.state == State.REVIEW and c.due <= now]
    new = [c for c in cards if c.state == State.NEW]

    introduced_today = count_introduced_today(cards, now)
    reviews_done_today = count_reviews_done_today(cards, now)

    return QueuePools(
        learning_due=learning_due,
        review_due=review_due,
        new=new,
        introduced_today=introduced_today,
        reviews_done_today=reviews_done_today,
        remaining_new_limit=max(0, settings.new_cards_per_day - introduced_today),
        remaining_review_slots=max(
            0, settings.reviews_per_day - reviews_done_today - len(learning_due)
        ),
    )


def build_study_queue(
    cards: Sequence[Card],
    settings: DeckSettings,
    now: datetime,
    rng: Optional[random.Random] = None
) -> list[Card]:
    """
    Build the ordered study queue for a deck.

    Args:
        cards: All cards of the deck, in creation order
        settings: Deck settings (daily limits)
        now: Session start time
        rng: Random source for shuffles

    Returns:
        Admitted cards sorted ascending by due date
    """
    if rng is None:
        rng = make_rng()

    pools = build_queue_pools(cards, settings, now)

    learning_queue = shuffled(pools.learning_due, rng)

    oldest_reviews = sort_by_due(pools.review_due)[:pools.remaining_review_slots]
    review_queue = shuffled(oldest_reviews, rng)

    new_queue = shuffled(pools.new[:pools.remaining_new_limit], rng)

    queue = sort_by_due(learning_queue + review_queue + new_queue)

    logger.info(
        "queue_built",
        learning=len(learning_queue),
        review=len(review_queue),
        new=len(new_queue),
        introduced_today=pools.introduced_today,
        reviews_done_today=pools.reviews_done_today,
    )
    return queue
