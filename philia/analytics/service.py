"""
Service layer to assemble a deck's statistics page.
"""

from __future__ import annotations

from typing import Sequence

from philia.analytics.metrics import (
    DateLike,
    compute_due_forecast,
    compute_retention,
    compute_reviews_daily,
    compute_state_distribution,
    health_label,
)
from philia.analytics.queries import load_review_logs_df
from philia.analytics.types import DeckDashboardData
from philia.fsrs.models import Card


def build_deck_dashboard(
    cards: Sequence[Card],
    start: DateLike,
    end: DateLike,
    now: DateLike
) -> DeckDashboardData:
    """
    Build all KPI values and series needed by the statistics page for a deck.
    """
    logs_df = load_review_logs_df(cards)
    retention = compute_retention(logs_df, start, end)

    return DeckDashboardData(
        distribution=compute_state_distribution(cards),
        retention=retention,
        health=health_label(retention.rate, retention.total),
        reviews_daily=compute_reviews_daily(logs_df),
        due_forecast=compute_due_forecast(cards, now),
    )
