"""
Data-loading helpers for statistics.
"""

from __future__ import annotations

from typing import Iterable

import pandas as pd

from philia.analytics.constants import REVIEW_LOG_COLUMNS
from philia.fsrs.models import Card


def load_review_logs_df(cards: Iterable[Card]) -> pd.DataFrame:
    """
    Flatten the review logs of cards into a dataframe (one row per answer).
    """
    rows = [
        {
            "card_id": card.id,
            "rating": int(log.rating),
            "state": int(log.state),
            "review": log.review,
            "elapsed_days": log.elapsed_days,
            "scheduled_days": log.scheduled_days,
        }
        for card in cards
        for log in card.review_logs
    ]
    if not rows:
        return pd.DataFrame(columns=REVIEW_LOG_COLUMNS)

    df = pd.DataFrame(rows)
    df["review"] = pd.to_datetime(df["review"], utc=True, errors="coerce")
    df = df.dropna(subset=["review"])
    df["day"] = df["review"].dt.floor("D")
    df = df.sort_values("review").reset_index(drop=True)
    return df[REVIEW_LOG_COLUMNS]
