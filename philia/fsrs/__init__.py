"""
FSRS - Free Spaced Repetition Scheduler

Scheduling core for the flashcard system.

This package implements FSRS-6 with:
- Power-law forgetting curve: R = (1 + factor * t / S) ^ decay
- 21 trainable weights (optimized externally)
- Learning/relearning step lists in front of the memory model
- Interval fuzz to spread reviews

Quick start:
    from philia import fsrs
    from philia.schemas import default_deck_settings

    settings = default_deck_settings()
    card = fsrs.Card.new("card-1")

    # Apply one answer (pure: returns a new card)
    card, requeue = fsrs.answer_from_response(card, True, 3200, settings, now)
"""

# Answer controller
from philia.fsrs.scheduling import (
    AnswerOutcome,
    answer_card,
    answer_from_response,
    derive_rating,
)

# Memory model
from philia.fsrs.scheduler import FSRS, SchedulingCandidate, round_half_up

# Records
from philia.fsrs.models import Card, Deck, ReviewLog

# Step lists
from philia.fsrs.learning_steps import parse_steps, steps_for

# Constants and parameters
from philia.fsrs.constants import (
    DEFAULT_STEPS,
    DEFAULT_WEIGHTS,
    D_MAX,
    D_MIN,
    FAST_RESPONSE_THRESHOLD_MS,
    MIN_REVIEW_LOGS,
    RATINGS,
    S_MAX,
    S_MIN,
    Rating,
    State,
)

# Memory state (for advanced usage)
from philia.fsrs.memory_state import calculate_retrievability, elapsed_days_between

# Optimizer contract
from philia.fsrs.optimizer import (
    ThreadedOptimizer,
    WeightOptimizer,
    collect_review_logs,
    optimize_deck_settings,
)


__all__ = [
    # Answer controller
    "AnswerOutcome",
    "answer_card",
    "answer_from_response",
    "derive_rating",

    # Memory model
    "FSRS",
    "SchedulingCandidate",
    "round_half_up",

    # Records
    "Card",
    "Deck",
    "ReviewLog",

    # Step lists
    "parse_steps",
    "steps_for",

    # Constants
    "DEFAULT_STEPS",
    "DEFAULT_WEIGHTS",
    "D_MAX",
    "D_MIN",
    "FAST_RESPONSE_THRESHOLD_MS",
    "MIN_REVIEW_LOGS",
    "RATINGS",
    "S_MAX",
    "S_MIN",
    "Rating",
    "State",

    # Memory state
    "calculate_retrievability",
    "elapsed_days_between",

    # Optimizer
    "ThreadedOptimizer",
    "WeightOptimizer",
    "collect_review_logs",
    "optimize_deck_settings",
]
