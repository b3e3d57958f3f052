"""
Scheduler - FSRS-6 Memory Model

Pure scheduling math (no persistence, no step handling).

Main workflow:
1. Compute elapsed days and current retrievability
2. For every rating, apply the state-appropriate update rules
3. Size the interval for Review outcomes and apply fuzz
4. Return one candidate per rating

Learning/relearning step intervals are owned by the answer controller in
philia.fsrs.scheduling; this engine returns interval 0 for those states.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Optional, Sequence

from philia.config import make_rng
from philia.errors import ConfigError
from philia.fsrs import memory_state, review_updates
from philia.fsrs.constants import (
    DEFAULT_MAXIMUM_INTERVAL,
    DEFAULT_REQUEST_RETENTION,
    FUZZ_MIN_INTERVAL,
    FUZZ_RANGES,
    PERSIST_DECIMALS,
    RATINGS,
    WEIGHT_COUNT,
    Rating,
    State,
)
from philia.fsrs.models import Card

if TYPE_CHECKING:
    from philia.schemas import FsrsParameters


@dataclass(frozen=True)
class SchedulingCandidate:
    """Card scheduling fields that would result from one rating."""
    state: State
    due: datetime
    s: float
    d: float
    reps: int
    lapses: int
    last_review: datetime
    elapsed_days: float
    scheduled_days: int


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class FSRS:
    """
    FSRS-6 scheduler (21 weights).

    Derived at construction:
    - decay = -w[20]
    - factor = exp(ln(0.9) / decay) - 1
    - interval_modifier = (request_retention^(1/decay) - 1) / factor

    The random source used for interval fuzz is injectable so schedules can
    be reproduced in tests.
    """

    def __init__(
        self,
        w: Sequence[float],
        request_retention: float = DEFAULT_REQUEST_RETENTION,
        maximum_interval: int = DEFAULT_MAXIMUM_INTERVAL,
        rng: Optional[random.Random] = None,
    ):
        if len(w) != WEIGHT_COUNT:
            raise ConfigError(
                f"FSRS-6 expects {WEIGHT_COUNT} weights, got {len(w)}"
            )

        self.w = tuple(float(x) for x in w)
        self.request_retention = request_retention
        self.maximum_interval = maximum_interval
        self.rng = rng or make_rng()

        self.decay = -self.w[20]
        self.factor = memory_state.forgetting_factor(self.decay)
        self.interval_modifier = (
            math.pow(self.request_retention, 1 / self.decay) - 1
        ) / self.factor

    @classmethod
    def from_parameters(
        cls,
        params: FsrsParameters,
        rng: Optional[random.Random] = None,
    ) -> FSRS:
        """Build a scheduler from a deck's FSRS parameter block."""
        return cls(
            params.w,
            request_retention=params.request_retention,
            maximum_interval=params.maximum_interval,
            rng=rng,
        )

    def retrievability(self, card: Card, now: datetime) -> float:
        """
        Current recall probability for a card (0 for New or unstable cards).
        """
        if card.state == State.NEW or card.s <= 0:
            return 0.0

        elapsed = memory_state.elapsed_days_between(card.last_review, now)
        return memory_state.calculate_retrievability(card.s, elapsed, self.decay, self.factor)

    def schedule(self, card: Card, now: datetime) -> dict[Rating, SchedulingCandidate]:
        """
        Preview the outcome of every rating for a card.

        Args:
            card: Card to schedule (not modified)
            now: Review timestamp

        Returns:
            Dictionary mapping each rating to its SchedulingCandidate
        """
        if card.state == State.NEW:
            elapsed_days = 0.0
        else:
            elapsed_days = memory_state.elapsed_days_between(card.last_review, now)

        retrievability = self.retrievability(card, now)

        return {
            rating: self._candidate(card, rating, retrievability, elapsed_days, now)
            for rating in RATINGS
        }

    def next_interval(self, stability: float) -> int:
        """
        Interval in days that brings R down to request_retention.

        Formula: I = S * interval_modifier, rounded and clipped to
        [1, maximum_interval]
        """
        interval = round_half_up(stability * self.interval_modifier)
        return min(max(1, interval), self.maximum_interval)

    def apply_fuzz(self, interval: int, elapsed_days: float) -> int:
        """
        Spread an interval over a small band to avoid review clustering.

        Intervals under 2.5 days are returned unchanged. Otherwise the band
        half-width grows by 15% of the part of the interval in [2.5, 7), 10%
        of the part in [7, 20) and 5% beyond 20 days, starting from 1 day.

        Args:
            interval: Unfuzzed interval in days
            elapsed_days: Days since the previous review

        Returns:
            Fuzzed interval in days, within [1, maximum_interval]
        """
        if interval < FUZZ_MIN_INTERVAL:
            return interval

        delta = 1.0
        for start, end, factor in FUZZ_RANGES:
            delta += factor * max(min(interval, end) - start, 0.0)

        min_ivl = max(2, round_half_up(interval - delta))
        max_ivl = min(round_half_up(interval + delta), self.maximum_interval)

        if interval > elapsed_days:
            min_ivl = max(min_ivl, int(math.floor(elapsed_days)) + 1)
        min_ivl = min(min_ivl, max_ivl)

        return self.rng.randint(min_ivl, max_ivl)

    def _candidate(
        self,
        card: Card,
        rating: Rating,
        retrievability: float,
        elapsed_days: float,
        now: datetime
    ) -> SchedulingCandidate:
        w = self.w
        next_s = card.s
        next_d = card.d
        lapses = card.lapses

        if card.state == State.NEW:
            next_state = State.LEARNING if rating == Rating.AGAIN else State.REVIEW
            next_s = review_updates.init_stability(w, rating)
            next_d = review_updates.init_difficulty(w, rating)

        elif card.state == State.REVIEW:
            next_d = review_updates.next_difficulty(w, card.d, rating)
            if rating == Rating.AGAIN:
                next_state = State.RELEARNING
                next_s = review_updates.lapse_stability(w, card.d, card.s, retrievability)
                lapses += 1
            else:
                next_state = State.REVIEW
                next_s = review_updates.next_recall_stability(
                    w, card.d, card.s, retrievability, rating
                )

        else:
            # Learning/Relearning: steps own these states, S and D pass through
            next_state = State.RELEARNING if rating == Rating.AGAIN else State.REVIEW

        if next_state == State.REVIEW:
            interval = self.apply_fuzz(self.next_interval(next_s), elapsed_days)
        else:
            interval = 0

        return SchedulingCandidate(
            state=next_state,
            due=now + timedelta(days=interval),
            s=round(next_s, PERSIST_DECIMALS),
            d=round(next_d, PERSIST_DECIMALS),
            reps=card.reps + 1,
            lapses=lapses,
            last_review=now,
            elapsed_days=elapsed_days,
            scheduled_days=interval,
        )
