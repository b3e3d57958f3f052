"""
Deck settings and preset tests.
"""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from philia.fsrs import DEFAULT_WEIGHTS, FSRS, parse_steps
from philia.schemas import (
    PRESET_CONFIGS,
    DeckPreset,
    DeckSettings,
    FsrsParameters,
    default_deck_settings,
    settings_for_preset,
)


class TestDefaults:

    def test_default_deck_settings(self):
        settings = default_deck_settings()
        assert settings.preset == DeckPreset.BALANCED
        assert settings.new_cards_per_day == 20
        assert settings.reviews_per_day == 200
        assert settings.learning_steps == "1m 10m"
        assert settings.relearning_steps == "10m"
        assert settings.fsrs_parameters.request_retention == 0.9
        assert settings.fsrs_parameters.maximum_interval == 36500
        assert settings.fsrs_parameters.w == list(DEFAULT_WEIGHTS)
        assert settings.last_optimized is None

    def test_weight_lists_are_independent(self):
        first = FsrsParameters()
        second = FsrsParameters()
        first.w[0] = 99.0
        assert second.w[0] == DEFAULT_WEIGHTS[0]


class TestCamelCaseRecords:

    def test_validate_from_persisted_keys(self):
        settings = DeckSettings.model_validate({
            "preset": "Custom",
            "newCardsPerDay": 5,
            "reviewsPerDay": 50,
            "learningSteps": "2m",
            "relearningSteps": "3m",
            "fsrsParameters": {"requestRetention": 0.8, "maximumInterval": 100, "w": list(DEFAULT_WEIGHTS)},
            "lastOptimized": "2024-05-01T08:00:00+00:00",
        })
        assert settings.preset == DeckPreset.CUSTOM
        assert settings.new_cards_per_day == 5
        assert settings.fsrs_parameters.maximum_interval == 100
        assert settings.last_optimized == datetime(2024, 5, 1, 8, tzinfo=timezone.utc)

    def test_to_record_uses_aliases(self):
        record = default_deck_settings().to_record()
        assert set(record) == {
            "preset", "newCardsPerDay", "reviewsPerDay", "learningSteps",
            "relearningSteps", "fsrsParameters", "lastOptimized",
        }
        assert record["preset"] == "Balanced"

    @pytest.mark.parametrize("params", [
        {"requestRetention": 0.5},
        {"requestRetention": 1.0},
        {"maximumInterval": 0},
    ])
    def test_out_of_range_parameters_rejected(self, params):
        with pytest.raises(ValidationError):
            FsrsParameters.model_validate(params)

    def test_negative_limits_rejected(self):
        with pytest.raises(ValidationError):
            DeckSettings(new_cards_per_day=-1)


class TestPresets:

    @pytest.mark.parametrize("preset,learning,relearning,retention", [
        (DeckPreset.FORGETFUL, "1m 5m 20m", "5m 20m", 0.92),
        (DeckPreset.EASY_TO_REMEMBER, "10m 1d", "10m", 0.85),
        (DeckPreset.BALANCED, "1m 10m", "10m", 0.90),
        (DeckPreset.EXAM_PREP, "1m 10m 30m 1h 3h 12h", "1m 10m", 0.93),
    ])
    def test_preset_values(self, preset, learning, relearning, retention):
        settings = settings_for_preset(preset)
        assert settings.preset == preset
        assert settings.learning_steps == learning
        assert settings.relearning_steps == relearning
        assert settings.fsrs_parameters.request_retention == retention

    def test_exam_prep_caps_interval(self):
        settings = settings_for_preset(DeckPreset.EXAM_PREP)
        assert settings.fsrs_parameters.maximum_interval == 30
        assert FSRS.from_parameters(settings.fsrs_parameters).maximum_interval == 30
        assert parse_steps(settings.learning_steps) == [0, 1, 10, 30, 60, 180, 720]

    def test_every_preset_but_custom_is_configured(self):
        assert set(PRESET_CONFIGS) == set(DeckPreset) - {DeckPreset.CUSTOM}

    def test_preset_keeps_limits_and_does_not_modify_base(self):
        base = DeckSettings(new_cards_per_day=7, learning_steps="3m")
        settings = settings_for_preset(DeckPreset.FORGETFUL, base)
        assert settings.new_cards_per_day == 7
        assert settings.learning_steps == "1m 5m 20m"
        assert base.learning_steps == "3m"
        assert base.preset == DeckPreset.BALANCED

    def test_custom_keeps_base_settings(self):
        base = DeckSettings(learning_steps="3m 7m", fsrs_parameters=FsrsParameters(request_retention=0.8))
        settings = settings_for_preset(DeckPreset.CUSTOM, base)
        assert settings.preset == DeckPreset.CUSTOM
        assert settings.learning_steps == "3m 7m"
        assert settings.fsrs_parameters.request_retention == 0.8
