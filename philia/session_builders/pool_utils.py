"""
Pool utilities for session builders.

These helpers provide shared, minimal primitives for partitioning cards and
counting today's activity without enforcing a single queue policy.
"""

from __future__ import annotations
import random
from datetime import datetime
from typing import Iterable, TypeVar

from philia.fsrs.constants import State
from philia.fsrs.models import Card


T = TypeVar("T")


def start_of_day(now: datetime) -> datetime:
    """Midnight of `now`'s day, in `now`'s timezone."""
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def shuffled(items: Iterable[T], rng: random.Random) -> list[T]:
    """
    Shuffled copy of items.
    """
    result = list(items)
    rng.shuffle(result)
    return result


def sort_by_due(cards: list[Card]) -> list[Card]:
    """Stable ascending sort by due date."""
    return sorted(cards, key=lambda c: c.due)


def requeue_card(queue: list[Card], card: Card) -> list[Card]:
    """
    Append an answered card and restore due order.

    Returns:
        New queue list; `queue` is not modified
    """
    return sort_by_due([*queue, card])


def _is_today(timestamp: datetime, day_start: datetime, now: datetime) -> bool:
    return day_start <= timestamp <= now


def count_introduced_today(cards: Iterable[Card], now: datetime) -> int:
    """
    Cards whose first-ever answer happened today.
    """
    day_start = start_of_day(now)
    return sum(
        1 for card in cards
        if card.review_logs and _is_today(card.review_logs[0].review, day_start, now)
    )


def count_reviews_done_today(cards: Iterable[Card], now: datetime) -> int:
    """
    Today's answers that left a card in Review or Relearning.

    A card's first-ever log is an introduction, not a review, and is skipped.
    """
    day_start = start_of_day(now)
    count = 0
    for card in cards:
        for log in card.review_logs[1:]:
            if log.state in (State.REVIEW, State.RELEARNING) and _is_today(log.review, day_start, now):
                count += 1
    return count
