"""
Card, ReviewLog and Deck records.

These are the records the surrounding application hands to the scheduling
core and persists afterwards. The core never mutates a Card in place; every
transition returns a new Card with an extended review log.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Optional

from philia.fsrs.constants import Rating, State

if TYPE_CHECKING:
    from philia.schemas import DeckSettings


@dataclass(frozen=True)
class ReviewLog:
    """
    Immutable record of one answer.

    `state` is the state the card was left in, `due` the resulting due date.
    """
    rating: Rating
    state: State
    due: datetime
    elapsed_days: float
    scheduled_days: float
    review: datetime


@dataclass
class Card:
    """
    Scheduling state for a single flashcard.

    `template_id` and `field_values` are opaque to the scheduler.
    """
    id: str
    due: datetime
    template_id: str = ""
    field_values: dict[str, Any] = field(default_factory=dict)

    s: float = 0.0  # Stability, in days
    d: float = 0.0  # Difficulty, range 1-10
    lapses: int = 0
    reps: int = 0
    state: State = State.NEW

    last_review: Optional[datetime] = None
    step_index: Optional[int] = None  # Position in the learning/relearning step list
    review_logs: list[ReviewLog] = field(default_factory=list)

    @classmethod
    def new(
        cls,
        card_id: str,
        template_id: str = "",
        field_values: Optional[dict[str, Any]] = None,
        now: Optional[datetime] = None,
    ) -> Card:
        """
        Create a card that has never been studied.

        Args:
            card_id: Card identifier
            template_id: Template the card renders with
            field_values: Field id -> value payload
            now: Creation time (defaults to now, UTC)

        Returns:
            New Card in state NEW with s=d=0 and no history
        """
        if now is None:
            now = datetime.now(timezone.utc)

        return cls(
            id=card_id,
            due=now,
            template_id=template_id,
            field_values=dict(field_values or {}),
        )

    @property
    def is_learning_phase(self) -> bool:
        """True while the card is governed by manual steps rather than FSRS."""
        return self.state in (State.NEW, State.LEARNING, State.RELEARNING)

    def with_state(self, state: State) -> Card:
        """Copy of the card in a different state, history untouched."""
        return replace(self, state=state)

    def with_review(self, log: ReviewLog, **changes: Any) -> Card:
        """
        Return a copy with `changes` applied and `log` appended to the history.
        """
        return replace(self, review_logs=[*self.review_logs, log], **changes)


@dataclass
class Deck:
    """A named collection of cards sharing one set of settings."""
    id: str
    name: str
    settings: DeckSettings
    description: str = ""
    cards: list[Card] = field(default_factory=list)
