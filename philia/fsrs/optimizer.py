"""
Optimizer - Weight fitting collaborator

Fitting FSRS weights to review history happens outside the core. This module
defines the async contract and the flow that feeds it:

1. Flatten every card's review logs
2. Reject decks with fewer than MIN_REVIEW_LOGS logs (optimizer not called)
3. Await the optimizer off the calling thread
4. Validate the returned 21 weights and build new DeckSettings
"""

from __future__ import annotations

import asyncio
import math
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Callable, Iterable, Optional, Protocol, Sequence

import structlog

from philia.errors import InsufficientDataError, OptimizationError
from philia.fsrs.constants import MIN_REVIEW_LOGS, WEIGHT_COUNT
from philia.fsrs.models import Card, ReviewLog

if TYPE_CHECKING:
    from philia.schemas import DeckSettings

logger = structlog.get_logger()


class WeightOptimizer(Protocol):
    """Anything that can fit a weight vector to review logs."""

    async def optimize(self, review_logs: Sequence[ReviewLog]) -> Sequence[float]:
        ...


class ThreadedOptimizer:
    """Runs a blocking fit function in a worker thread."""

    def __init__(self, fit: Callable[[Sequence[ReviewLog]], Sequence[float]]):
        self.fit = fit

    async def optimize(self, review_logs: Sequence[ReviewLog]) -> Sequence[float]:
        return await asyncio.to_thread(self.fit, list(review_logs))


def collect_review_logs(cards: Iterable[Card]) -> list[ReviewLog]:
    """All review logs of all cards, in card then review order."""
    return [log for card in cards for log in card.review_logs]


def _validate_weights(weights: Sequence[float]) -> list[float]:
    try:
        values = [float(x) for x in weights]
    except (TypeError, ValueError) as exc:
        raise OptimizationError(f"Optimizer returned non-numeric weights: {exc}") from exc

    if len(values) != WEIGHT_COUNT:
        raise OptimizationError(
            f"Optimizer returned {len(values)} weights, expected {WEIGHT_COUNT}"
        )
    if not all(math.isfinite(x) for x in values):
        raise OptimizationError("Optimizer returned non-finite weights")
    return values


async def optimize_deck_settings(
    settings: DeckSettings,
    cards: Iterable[Card],
    optimizer: WeightOptimizer,
    now: Optional[datetime] = None,
) -> DeckSettings:
    """
    Fit new weights for a deck.

    Args:
        settings: Current deck settings (not modified)
        cards: Cards of the deck
        optimizer: Async weight fitter
        now: Timestamp recorded as last_optimized (defaults to now, UTC)

    Returns:
        Copy of settings with new weights and last_optimized set

    Raises:
        InsufficientDataError: Fewer than MIN_REVIEW_LOGS review logs
        OptimizationError: Optimizer failed or returned a malformed vector
    """
    if now is None:
        now = datetime.now(timezone.utc)

    logs = collect_review_logs(cards)
    if len(logs) < MIN_REVIEW_LOGS:
        logger.warning(
            "optimization_rejected", found=len(logs), required=MIN_REVIEW_LOGS
        )
        raise InsufficientDataError(found=len(logs), required=MIN_REVIEW_LOGS)

    logger.info("optimization_started", review_logs=len(logs))
    try:
        raw_weights = await optimizer.optimize(logs)
    except (InsufficientDataError, OptimizationError):
        raise
    except Exception as exc:
        raise OptimizationError(f"Optimizer failed: {exc}") from exc

    weights = _validate_weights(raw_weights)

    params = settings.fsrs_parameters.model_copy(update={"w": weights})
    updated = settings.model_copy(
        update={"fsrs_parameters": params, "last_optimized": now},
        deep=True,
    )
    logger.info("optimization_finished", review_logs=len(logs))
    return updated
