"""Analytics package for deck statistics."""

from philia.analytics.metrics import (
    compute_due_forecast,
    compute_retention,
    compute_reviews_daily,
    compute_state_distribution,
    health_label,
)
from philia.analytics.queries import load_review_logs_df
from philia.analytics.service import build_deck_dashboard
from philia.analytics.types import DeckDashboardData, RetentionSummary, StateDistribution

__all__ = [
    "build_deck_dashboard",
    "compute_due_forecast",
    "compute_retention",
    "compute_reviews_daily",
    "compute_state_distribution",
    "health_label",
    "load_review_logs_df",
    "DeckDashboardData",
    "RetentionSummary",
    "StateDistribution",
]
