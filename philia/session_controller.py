"""
Session Controller - Study and cram sessions

A StudySession owns one ordered queue and a history stack:
1. The head of the queue is the card being shown
2. Answering applies the transition controller to the head
3. Requeued cards go back in due order
4. Undo restores the queue snapshot and hands the previous card back

The core never advances time: when the head is due in the future the caller
shows a waiting state until `next_due`.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Callable, Optional, Sequence

import structlog

from philia.config import make_rng
from philia.fsrs.constants import Rating
from philia.fsrs.models import Card
from philia.fsrs.scheduler import FSRS
from philia.fsrs.scheduling import AnswerOutcome, answer_card, derive_rating
from philia.session_builders import build_cram_queue, build_study_queue, requeue_card

if TYPE_CHECKING:
    from philia.schemas import DeckSettings

logger = structlog.get_logger()

CardCallback = Callable[[Card], None]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class HistoryEntry:
    """Queue as it was before an answer, plus the card that was answered."""
    queue_snapshot: tuple[Card, ...]
    previous_card: Card


class StudySession:
    """
    One study run over a deck.

    `on_card_updated` receives every card the session changes (after an
    answer, and the restored card after an undo) so the caller can persist it.
    """

    def __init__(
        self,
        cards: Sequence[Card],
        settings: DeckSettings,
        now: Optional[datetime] = None,
        rng: Optional[random.Random] = None,
        fsrs: Optional[FSRS] = None,
        on_card_updated: Optional[CardCallback] = None,
    ):
        self.settings = settings
        self.rng = rng or make_rng()
        self.fsrs = fsrs or FSRS.from_parameters(settings.fsrs_parameters, rng=self.rng)
        self.on_card_updated = on_card_updated

        self.queue: list[Card] = []
        self.history: list[HistoryEntry] = []
        self.restart(cards, now=now)

    @property
    def head(self) -> Optional[Card]:
        return self.queue[0] if self.queue else None

    @property
    def remaining(self) -> int:
        return len(self.queue)

    @property
    def is_complete(self) -> bool:
        return not self.queue

    @property
    def next_due(self) -> Optional[datetime]:
        """Due date of the head card, None when the session is complete."""
        return self.queue[0].due if self.queue else None

    def is_waiting(self, now: Optional[datetime] = None) -> bool:
        """True when the head card exists but is not due yet."""
        if self.is_complete:
            return False
        if now is None:
            now = _utcnow()
        return self.queue[0].due > now

    def answer(
        self,
        correct: bool,
        response_millis: float,
        now: Optional[datetime] = None
    ) -> AnswerOutcome:
        """Answer the head card from correctness and response latency."""
        return self.answer_rating(derive_rating(correct, response_millis), now=now)

    def answer_rating(self, rating: Rating, now: Optional[datetime] = None) -> AnswerOutcome:
        """
        Answer the head card with an explicit rating.

        Args:
            rating: Answer rating
            now: Answer timestamp (defaults to now, UTC)

        Returns:
            AnswerOutcome for the head card

        Raises:
            IndexError: If the session is complete
            ValueError: If rating is invalid
        """
        if self.is_complete:
            raise IndexError("No card left to answer")
        if now is None:
            now = _utcnow()

        card = self.queue[0]
        outcome = answer_card(card, rating, self.settings, now, fsrs=self.fsrs)

        self.history.append(HistoryEntry(tuple(self.queue), card))
        rest = self.queue[1:]
        self.queue = requeue_card(rest, outcome.card) if outcome.requeue else rest

        self._notify(outcome.card)
        return outcome

    def undo(self) -> Optional[Card]:
        """
        Revert the last answer.

        Returns:
            The card as it was before the answer, or None if nothing to undo
        """
        if not self.history:
            return None

        entry = self.history.pop()
        self.queue = list(entry.queue_snapshot)
        self._notify(entry.previous_card)

        logger.info("undo_applied", card_id=entry.previous_card.id, remaining=len(self.queue))
        return entry.previous_card

    def restart(self, cards: Sequence[Card], now: Optional[datetime] = None) -> None:
        """Start a new session over `cards`; the undo history is discarded."""
        if now is None:
            now = _utcnow()
        self.history = []
        self.queue = build_study_queue(cards, self.settings, now, rng=self.rng)

    def _notify(self, card: Card) -> None:
        if self.on_card_updated is not None:
            self.on_card_updated(card)


class CramSession:
    """
    Re-drill of today's cards.

    Correct answers remove the head, incorrect ones move it to the tail.
    Cards are never modified.
    """

    def __init__(
        self,
        cards: Sequence[Card],
        now: Optional[datetime] = None,
        rng: Optional[random.Random] = None,
    ):
        if now is None:
            now = _utcnow()
        self.queue: list[Card] = build_cram_queue(cards, now, rng=rng)

    @property
    def head(self) -> Optional[Card]:
        return self.queue[0] if self.queue else None

    @property
    def remaining(self) -> int:
        return len(self.queue)

    @property
    def is_complete(self) -> bool:
        return not self.queue

    def answer(self, correct: bool) -> None:
        if self.is_complete:
            raise IndexError("No card left to answer")

        card = self.queue.pop(0)
        if not correct:
            self.queue.append(card)
