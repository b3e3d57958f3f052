"""
Pydantic models for deck settings.

Settings are persisted verbatim with camelCase keys (newCardsPerDay,
fsrsParameters, ...); Python code uses the snake_case field names.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from philia.fsrs.constants import (
    DEFAULT_MAXIMUM_INTERVAL,
    DEFAULT_REQUEST_RETENTION,
    DEFAULT_WEIGHTS,
)


# Configuration
DEFAULT_NEW_CARDS_PER_DAY = 20
DEFAULT_REVIEWS_PER_DAY = 200


class DeckPreset(str, Enum):
    """Named bundles of step lists and target retention."""
    FORGETFUL = "Forgetful"              # Short steps, higher retention
    EASY_TO_REMEMBER = "EasyToRemember"  # Long steps, lower retention
    BALANCED = "Balanced"                # General-purpose default
    EXAM_PREP = "ExamPrep"               # Many short steps, 30 day cap
    CUSTOM = "Custom"                    # User-edited, never overwritten


class FsrsParameters(BaseModel):
    """Memory model parameters for one deck."""
    model_config = ConfigDict(populate_by_name=True)

    request_retention: float = Field(
        default=DEFAULT_REQUEST_RETENTION,
        ge=0.7,
        le=0.99,
        alias="requestRetention",
        description="Target recall probability at the due date",
    )
    maximum_interval: int = Field(
        default=DEFAULT_MAXIMUM_INTERVAL,
        gt=0,
        alias="maximumInterval",
        description="Longest interval in days",
    )
    w: list[float] = Field(
        default_factory=lambda: list(DEFAULT_WEIGHTS),
        description="FSRS-6 weight vector (21 values)",
    )


class DeckSettings(BaseModel):
    """Per-deck study limits, step lists and FSRS parameters."""
    model_config = ConfigDict(populate_by_name=True)

    preset: DeckPreset = DeckPreset.BALANCED
    new_cards_per_day: int = Field(
        default=DEFAULT_NEW_CARDS_PER_DAY, ge=0, alias="newCardsPerDay"
    )
    reviews_per_day: int = Field(
        default=DEFAULT_REVIEWS_PER_DAY, ge=0, alias="reviewsPerDay"
    )
    learning_steps: str = Field(default="1m 10m", alias="learningSteps")
    relearning_steps: str = Field(default="10m", alias="relearningSteps")
    fsrs_parameters: FsrsParameters = Field(
        default_factory=FsrsParameters, alias="fsrsParameters"
    )
    last_optimized: Optional[datetime] = Field(default=None, alias="lastOptimized")

    def to_record(self) -> dict[str, Any]:
        """Serialize with the persisted camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


# ---- Presets ----

PRESET_CONFIGS: dict[DeckPreset, dict[str, Any]] = {
    DeckPreset.FORGETFUL: {
        "learning_steps": "1m 5m 20m",
        "relearning_steps": "5m 20m",
        "fsrs_parameters": {"request_retention": 0.92},
    },
    DeckPreset.EASY_TO_REMEMBER: {
        "learning_steps": "10m 1d",
        "relearning_steps": "10m",
        "fsrs_parameters": {"request_retention": 0.85},
    },
    DeckPreset.BALANCED: {
        "learning_steps": "1m 10m",
        "relearning_steps": "10m",
        "fsrs_parameters": {"request_retention": 0.9},
    },
    DeckPreset.EXAM_PREP: {
        "learning_steps": "1m 10m 30m 1h 3h 12h",
        "relearning_steps": "1m 10m",
        "fsrs_parameters": {"request_retention": 0.93, "maximum_interval": 30},
    },
}


def default_deck_settings() -> DeckSettings:
    """Settings for a freshly created deck (Balanced preset)."""
    return settings_for_preset(DeckPreset.BALANCED)


def settings_for_preset(
    preset: DeckPreset,
    base: Optional[DeckSettings] = None,
) -> DeckSettings:
    """
    Apply a preset on top of existing settings.

    Daily limits and last_optimized are kept from `base`. A preset replaces
    the whole FSRS parameter block, so optimized weights fall back to the
    defaults. CUSTOM only relabels `base`.

    Args:
        preset: Preset to apply
        base: Settings to start from (defaults when omitted)

    Returns:
        New DeckSettings; `base` is not modified
    """
    if base is None:
        base = DeckSettings()

    if preset == DeckPreset.CUSTOM:
        return base.model_copy(update={"preset": preset}, deep=True)

    config = PRESET_CONFIGS[preset]
    return base.model_copy(
        update={
            "preset": preset,
            "learning_steps": config["learning_steps"],
            "relearning_steps": config["relearning_steps"],
            "fsrs_parameters": FsrsParameters(**config["fsrs_parameters"]),
        },
        deep=True,
    )
