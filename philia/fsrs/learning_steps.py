"""
Learning Steps - Step list parsing

Turns a deck's step string ("1m 10m 1d") into a list of delays in minutes.

Parsing rules:
- Tokens are separated by whitespace
- Suffix m = minutes, h = hours, d = days, no suffix = minutes
- Malformed or non-positive tokens are dropped
- A 0-minute step is always prepended (immediate re-show)
- If nothing valid was parsed, DEFAULT_STEPS is used
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Optional

from philia.fsrs.constants import (
    DEFAULT_STEPS,
    MINUTES_PER_DAY,
    MINUTES_PER_HOUR,
    State,
)

if TYPE_CHECKING:
    from philia.schemas import DeckSettings


_UNIT_MINUTES = {
    "m": 1,
    "h": MINUTES_PER_HOUR,
    "d": MINUTES_PER_DAY,
}


def _parse_token(token: str) -> Optional[float]:
    unit = 1
    number = token
    suffix = token[-1:].lower()
    if suffix in _UNIT_MINUTES:
        unit = _UNIT_MINUTES[suffix]
        number = token[:-1]

    try:
        value = float(number)
    except ValueError:
        return None

    if not math.isfinite(value) or value <= 0:
        return None
    return value * unit


def parse_steps(text: Optional[str]) -> list[float]:
    """
    Parse a step string into delays in minutes.

    Args:
        text: Whitespace-separated duration tokens

    Returns:
        Step delays in minutes, starting with the implicit 0 step
    """
    steps = []
    for token in (text or "").split():
        minutes = _parse_token(token)
        if minutes is not None:
            steps.append(minutes)

    if not steps:
        return list(DEFAULT_STEPS)

    return [0, *steps]


def steps_for(state: State, settings: DeckSettings) -> list[float]:
    """Relearning steps for Relearning cards, learning steps for the rest."""
    if state == State.RELEARNING:
        return parse_steps(settings.relearning_steps)
    return parse_steps(settings.learning_steps)
