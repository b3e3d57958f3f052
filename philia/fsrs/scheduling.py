"""
Scheduling - Step & Transition Controller

Applies one answer to a card and decides whether it goes back into the
active queue.

Main workflow:
1. Derive a Rating from correctness and response latency (or take one)
2. New/Learning/Relearning cards walk the deck's step list
3. Cards that run out of steps (or answer Easy) graduate through the
   FSRS memory model
4. Review cards go straight to the memory model
5. Append exactly one ReviewLog and return a new Card

Cards are never mutated; every answer produces a fresh Card.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import TYPE_CHECKING, NamedTuple, Optional

import structlog

from philia.fsrs import memory_state
from philia.fsrs.constants import FAST_RESPONSE_THRESHOLD_MS, RATINGS, Rating, State
from philia.fsrs.learning_steps import steps_for
from philia.fsrs.models import Card, ReviewLog
from philia.fsrs.scheduler import FSRS, SchedulingCandidate

if TYPE_CHECKING:
    from philia.schemas import DeckSettings

logger = structlog.get_logger()


class AnswerOutcome(NamedTuple):
    """Updated card plus whether it must be reinserted into the session queue."""
    card: Card
    requeue: bool


def derive_rating(correct: bool, response_millis: float) -> Rating:
    """
    Map correctness and latency to a four-level rating.

    Rules:
    - correct and fast   -> EASY
    - correct and slow   -> GOOD
    - incorrect and fast -> HARD
    - incorrect and slow -> AGAIN

    "Fast" means at or under FAST_RESPONSE_THRESHOLD_MS.
    """
    fast = response_millis <= FAST_RESPONSE_THRESHOLD_MS
    if correct:
        return Rating.EASY if fast else Rating.GOOD
    return Rating.HARD if fast else Rating.AGAIN


def _validate_rating(rating) -> Rating:
    if isinstance(rating, bool) or rating not in RATINGS:
        raise ValueError(f"Invalid rating: {rating!r}")
    return Rating(rating)


def answer_card(
    card: Card,
    rating: Rating,
    settings: DeckSettings,
    now: datetime,
    fsrs: Optional[FSRS] = None,
) -> AnswerOutcome:
    """
    Apply a rating to a card.

    Args:
        card: Card being answered (not modified)
        rating: Answer rating
        settings: Deck settings (steps and FSRS parameters)
        now: Answer timestamp
        fsrs: Scheduler to use (built from settings when omitted)

    Returns:
        AnswerOutcome with the updated card and the requeue flag

    Raises:
        ValueError: If rating is not one of AGAIN/HARD/GOOD/EASY
    """
    rating = _validate_rating(rating)
    if fsrs is None:
        fsrs = FSRS.from_parameters(settings.fsrs_parameters)

    if not card.is_learning_phase:
        updated = _review(card, rating, fsrs, now)
    else:
        updated = _step(card, rating, settings, fsrs, now)

    requeue = (
        updated.state in (State.LEARNING, State.RELEARNING)
        or rating in (Rating.AGAIN, Rating.HARD)
    )

    logger.info(
        "card_answered",
        card_id=card.id,
        rating=rating.name,
        state_before=card.state.name,
        state_after=updated.state.name,
        due=updated.due.isoformat(),
        requeue=requeue,
    )
    return AnswerOutcome(updated, requeue)


def answer_from_response(
    card: Card,
    correct: bool,
    response_millis: float,
    settings: DeckSettings,
    now: datetime,
    fsrs: Optional[FSRS] = None,
) -> AnswerOutcome:
    """Derive the rating from the response, then apply it."""
    rating = derive_rating(correct, response_millis)
    return answer_card(card, rating, settings, now, fsrs=fsrs)


def _step(
    card: Card,
    rating: Rating,
    settings: DeckSettings,
    fsrs: FSRS,
    now: datetime,
) -> Card:
    steps = steps_for(card.state, settings)

    if rating == Rating.AGAIN:
        return _step_to(card, rating, steps, 0, now)

    if rating == Rating.EASY:
        return _graduate(card, Rating.EASY, fsrs, now)

    # Hard/Good advance one step; New cards start before the first step
    current = -1 if card.state == State.NEW else (card.step_index or 0)
    next_index = current + 1
    if next_index >= len(steps):
        return _graduate(card, Rating.GOOD, fsrs, now)

    return _step_to(card, rating, steps, next_index, now)


def _step_to(
    card: Card,
    rating: Rating,
    steps: list[float],
    index: int,
    now: datetime,
) -> Card:
    next_state = State.LEARNING if card.state == State.NEW else card.state
    due = now + timedelta(minutes=steps[index])

    log = ReviewLog(
        rating=rating,
        state=next_state,
        due=due,
        elapsed_days=0,
        scheduled_days=0,
        review=now,
    )
    return card.with_review(
        log,
        state=next_state,
        due=due,
        step_index=index,
        reps=card.reps + 1,
        last_review=now,
    )


def _graduate(card: Card, rating: Rating, fsrs: FSRS, now: datetime) -> Card:
    # Relearning cards keep their memory state, everything else starts fresh
    as_state = State.REVIEW if card.state == State.RELEARNING else State.NEW
    candidate = fsrs.schedule(card.with_state(as_state), now)[rating]

    logger.info(
        "card_graduated",
        card_id=card.id,
        from_state=card.state.name,
        rating=rating.name,
        scheduled_days=candidate.scheduled_days,
    )
    return _adopt(card, rating, candidate, now, step_index=0)


def _review(card: Card, rating: Rating, fsrs: FSRS, now: datetime) -> Card:
    candidate = fsrs.schedule(card, now)[rating]
    step_index = 0 if rating == Rating.AGAIN else card.step_index
    return _adopt(card, rating, candidate, now, step_index=step_index)


def _adopt(
    card: Card,
    rating: Rating,
    candidate: SchedulingCandidate,
    now: datetime,
    step_index: Optional[int],
) -> Card:
    log = ReviewLog(
        rating=rating,
        state=candidate.state,
        due=candidate.due,
        elapsed_days=memory_state.elapsed_days_between(card.last_review, now),
        scheduled_days=candidate.scheduled_days,
        review=now,
    )
    return card.with_review(
        log,
        state=candidate.state,
        due=candidate.due,
        s=candidate.s,
        d=candidate.d,
        reps=card.reps + 1,
        lapses=candidate.lapses,
        last_review=candidate.last_review,
        step_index=step_index,
    )
