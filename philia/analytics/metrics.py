"""
Metric computations for deck statistics.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Union

import pandas as pd

from philia.analytics.constants import (
    DEFAULT_FORECAST_DAYS,
    HEALTH_THRESHOLDS,
    HEALTH_TOP_LABEL,
    MATURE_STABILITY_DAYS,
    NO_DATA_LABEL,
)
from philia.analytics.types import RetentionSummary, StateDistribution
from philia.fsrs.constants import Rating, State
from philia.fsrs.models import Card

DateLike = Union[date, datetime, pd.Timestamp]


def _utc_day(value: DateLike) -> pd.Timestamp:
    ts = pd.Timestamp(value)
    if ts.tzinfo is None:
        ts = ts.tz_localize("UTC")
    return ts.tz_convert("UTC").normalize()


def compute_state_distribution(cards: Iterable[Card]) -> StateDistribution:
    """
    Count new, learning (incl. relearning), young and mature cards.
    """
    new = learning = young = mature = 0
    for card in cards:
        if card.state == State.NEW:
            new += 1
        elif card.state in (State.LEARNING, State.RELEARNING):
            learning += 1
        elif card.s < MATURE_STABILITY_DAYS:
            young += 1
        else:
            mature += 1
    return StateDistribution(new=new, learning=learning, young=young, mature=mature)


def compute_retention(
    logs_df: pd.DataFrame,
    start: DateLike,
    end: DateLike
) -> RetentionSummary:
    """
    Share of answers that were not AGAIN between start and end (UTC days).

    `end` covers its whole day.
    """
    if logs_df.empty:
        return RetentionSummary(total=0, passed=0, rate=0.0)

    window_start = _utc_day(start)
    window_end = _utc_day(end) + pd.Timedelta(days=1)
    mask = (logs_df["review"] >= window_start) & (logs_df["review"] < window_end)
    scoped = logs_df.loc[mask]

    total = int(len(scoped))
    passed = int((scoped["rating"] != int(Rating.AGAIN)).sum())
    rate = passed / total * 100 if total else 0.0
    return RetentionSummary(total=total, passed=passed, rate=float(rate))


def health_label(rate: float, total: int) -> str:
    """
    Label a retention rate (percent) for display.
    """
    if total == 0:
        return NO_DATA_LABEL
    for upper, label in HEALTH_THRESHOLDS:
        if rate < upper:
            return label
    return HEALTH_TOP_LABEL


def compute_reviews_daily(logs_df: pd.DataFrame) -> pd.Series:
    """
    Answers per UTC day over the dense span of the logs.
    """
    if logs_df.empty:
        return pd.Series(dtype="int64")

    day_index = pd.date_range(
        start=logs_df["day"].min(), end=logs_df["day"].max(), freq="D"
    )
    counts = logs_df.groupby("day").size()
    return counts.reindex(day_index, fill_value=0).astype("int64")


def compute_due_forecast(
    cards: Iterable[Card],
    now: DateLike,
    days: int = DEFAULT_FORECAST_DAYS
) -> pd.Series:
    """
    Review cards coming due on each of the next `days` UTC days.

    Overdue cards are counted on the first day; cards due after the window
    are left out.
    """
    if days <= 0:
        return pd.Series(dtype="int64")

    day_index = pd.date_range(start=_utc_day(now), periods=days, freq="D")

    due_days = [
        max(_utc_day(card.due), day_index[0])
        for card in cards
        if card.state == State.REVIEW
    ]
    if not due_days:
        return pd.Series(0, index=day_index, dtype="int64")

    counts = pd.Series(due_days).value_counts()
    return counts.reindex(day_index, fill_value=0).astype("int64")
