"""
Shared fixtures for the scheduling core tests.

All tests run against a fixed, timezone-aware clock and seeded random
sources so fuzzed intervals and shuffles are reproducible.
"""

import random
from datetime import datetime, timedelta, timezone

import pytest

from philia.fsrs import DEFAULT_WEIGHTS, FSRS, Card, Rating, ReviewLog, State
from philia.schemas import default_deck_settings

NOW = datetime(2024, 5, 10, 12, 0, tzinfo=timezone.utc)


def make_card(
    card_id="card",
    state=State.NEW,
    s=0.0,
    d=0.0,
    due=None,
    last_review=None,
    step_index=None,
    lapses=0,
    review_logs=None,
):
    """Card factory; `reps` follows the number of logs."""
    logs = list(review_logs or [])
    return Card(
        id=card_id,
        due=due if due is not None else NOW,
        s=s,
        d=d,
        lapses=lapses,
        reps=len(logs),
        state=state,
        last_review=last_review,
        step_index=step_index,
        review_logs=logs,
    )


def make_log(review, rating=Rating.GOOD, state=State.REVIEW, scheduled_days=1.0):
    return ReviewLog(
        rating=rating,
        state=state,
        due=review + timedelta(days=scheduled_days),
        elapsed_days=0.0,
        scheduled_days=scheduled_days,
        review=review,
    )


def make_review_card(card_id="review", s=10.0, d=5.0, days_since_review=5, due=None):
    last_review = NOW - timedelta(days=days_since_review)
    return make_card(
        card_id=card_id,
        state=State.REVIEW,
        s=s,
        d=d,
        due=due if due is not None else NOW,
        last_review=last_review,
        step_index=0,
        review_logs=[make_log(last_review)],
    )


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def now():
    return NOW


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def settings():
    """Balanced preset: learning steps 1m 10m, relearning 10m."""
    return default_deck_settings()


@pytest.fixture
def engine():
    return FSRS(DEFAULT_WEIGHTS, rng=random.Random(7))
