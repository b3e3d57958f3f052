"""
Types for deck statistics.
"""

from __future__ import annotations

from dataclasses import dataclass

import pandas as pd


@dataclass(frozen=True)
class StateDistribution:
    """Snapshot of where a deck's cards are in their lifecycle."""
    new: int
    learning: int
    young: int
    mature: int

    @property
    def total(self) -> int:
        return self.new + self.learning + self.young + self.mature


@dataclass(frozen=True)
class RetentionSummary:
    total: int
    passed: int
    rate: float  # percent, 0 when there are no reviews


@dataclass(frozen=True)
class DeckDashboardData:
    """
    Precomputed metrics and series for one deck's statistics page.
    """
    distribution: StateDistribution
    retention: RetentionSummary
    health: str
    reviews_daily: pd.Series
    due_forecast: pd.Series
