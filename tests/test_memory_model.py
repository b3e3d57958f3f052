"""
Memory Model Tests

Covers the FSRS-6 engine in isolation:
- Initial stability/difficulty for new cards
- Recall and lapse updates for review cards
- Retrievability curve
- Interval sizing, clipping and fuzz
"""

import math
import random
from datetime import timedelta

import pytest

from conftest import make_card, make_review_card
from philia.errors import ConfigError
from philia.fsrs import DEFAULT_WEIGHTS, FSRS, RATINGS, Rating, State, round_half_up
from philia.fsrs import review_updates
from philia.schemas import FsrsParameters

W = DEFAULT_WEIGHTS


class TestConstruction:

    def test_wrong_weight_count_is_config_error(self):
        with pytest.raises(ConfigError):
            FSRS(W[:20])

    def test_config_error_is_value_error(self):
        with pytest.raises(ValueError):
            FSRS(list(W) + [0.1])

    def test_default_retention_gives_unit_interval_modifier(self, engine):
        assert engine.interval_modifier == pytest.approx(1.0)
        assert engine.decay == pytest.approx(-0.1542)

    def test_from_parameters(self):
        params = FsrsParameters(request_retention=0.85, maximum_interval=30)
        engine = FSRS.from_parameters(params)
        assert engine.request_retention == 0.85
        assert engine.maximum_interval == 30
        assert engine.w == tuple(W)


class TestNewCard:

    def test_good_sets_initial_stability_and_difficulty(self, engine, now):
        result = engine.schedule(make_card(), now)[Rating.GOOD]

        expected_d = min(max(W[4] - math.exp(2 * W[5]) + 1, 1.0), 10.0)
        assert result.state == State.REVIEW
        assert result.s == pytest.approx(2.3065)
        assert result.d == pytest.approx(expected_d, abs=1e-8)
        assert result.reps == 1
        assert result.last_review == now

    def test_good_interval_below_fuzz_range(self, engine, now):
        result = engine.schedule(make_card(), now)[Rating.GOOD]
        assert result.scheduled_days == 2
        assert result.due == now + timedelta(days=2)

    def test_again_goes_to_learning(self, engine, now):
        result = engine.schedule(make_card(), now)[Rating.AGAIN]
        assert result.state == State.LEARNING
        assert result.s == pytest.approx(W[0])
        assert result.scheduled_days == 0
        assert result.due == now

    def test_initial_difficulty_orders_by_rating(self, engine, now):
        results = engine.schedule(make_card(), now)
        assert results[Rating.AGAIN].d > results[Rating.HARD].d > results[Rating.GOOD].d

    def test_retrievability_is_zero(self, engine, now):
        assert engine.retrievability(make_card(), now) == 0.0


class TestReviewCard:

    def test_again_lapses_to_relearning(self, engine, now):
        card = make_review_card(s=10.0, d=5.0, days_since_review=5)
        result = engine.schedule(card, now)[Rating.AGAIN]

        factor = math.exp(math.log(0.9) / -W[20]) - 1
        r = math.pow(1 + factor * 5 / 10.0, -W[20])
        s_forget = W[11] * math.pow(5.0, -W[12]) * (math.pow(11.0, W[13]) - 1) * math.exp((1 - r) * W[14])
        s_short = 10.0 / math.exp(W[17] * W[18])

        assert result.state == State.RELEARNING
        assert result.lapses == card.lapses + 1
        assert result.s == pytest.approx(min(s_forget, s_short), abs=1e-8)
        assert result.s < card.s
        assert result.scheduled_days == 0

    def test_recall_grows_stability(self, engine, now):
        card = make_review_card(s=10.0, d=5.0, days_since_review=10)
        results = engine.schedule(card, now)

        for rating in (Rating.HARD, Rating.GOOD, Rating.EASY):
            assert results[rating].state == State.REVIEW
            assert results[rating].s > card.s
        assert results[Rating.HARD].s < results[Rating.GOOD].s < results[Rating.EASY].s

    def test_difficulty_moves_with_rating(self, engine, now):
        card = make_review_card(s=10.0, d=5.0)
        results = engine.schedule(card, now)
        assert results[Rating.AGAIN].d > card.d
        assert results[Rating.EASY].d < card.d

    def test_schedule_does_not_modify_card(self, engine, now):
        card = make_review_card()
        before = (card.s, card.d, card.reps, card.state, len(card.review_logs))
        engine.schedule(card, now)
        assert (card.s, card.d, card.reps, card.state, len(card.review_logs)) == before

    def test_elapsed_days_recorded(self, engine, now):
        card = make_review_card(days_since_review=3)
        result = engine.schedule(card, now)[Rating.GOOD]
        assert result.elapsed_days == pytest.approx(3.0)

    @pytest.mark.parametrize("s,d,days", [
        (0.1, 1.0, 0),
        (0.1, 10.0, 400),
        (36500.0, 1.0, 1),
        (36500.0, 10.0, 100000),
        (3.0, 7.5, 2),
    ])
    def test_bounds_hold_for_every_rating(self, engine, now, s, d, days):
        card = make_review_card(s=s, d=d, days_since_review=days)
        for rating, result in engine.schedule(card, now).items():
            assert 1.0 <= result.d <= 10.0, rating
            assert 0.1 <= result.s <= 36500.0, rating
            if result.state == State.REVIEW:
                assert 1 <= result.scheduled_days <= engine.maximum_interval


class TestRetrievability:

    def test_equals_retention_target_at_stability(self, engine, now):
        card = make_review_card(s=10.0, days_since_review=10)
        assert engine.retrievability(card, now) == pytest.approx(0.9)

    def test_one_right_after_review(self, engine, now):
        card = make_review_card(s=10.0, days_since_review=0)
        assert engine.retrievability(card, now) == pytest.approx(1.0)

    def test_zero_stability_is_zero(self, engine, now):
        card = make_review_card(s=0.0)
        assert engine.retrievability(card, now) == 0.0

    def test_decreases_over_time(self, engine, now):
        earlier = engine.retrievability(make_review_card(days_since_review=2), now)
        later = engine.retrievability(make_review_card(days_since_review=20), now)
        assert later < earlier


class TestIntervals:

    def test_round_half_up(self):
        assert round_half_up(0.5) == 1
        assert round_half_up(2.5) == 3
        assert round_half_up(2.4999) == 2

    def test_interval_clipped_to_maximum(self, now):
        engine = FSRS(W, maximum_interval=30, rng=random.Random(1))
        card = make_review_card(s=5000.0, d=3.0, days_since_review=4000)
        for rating in (Rating.HARD, Rating.GOOD, Rating.EASY):
            result = engine.schedule(card, now)[rating]
            assert 1 <= result.scheduled_days <= 30

    def test_interval_at_least_one_day(self, engine):
        assert engine.next_interval(0.1) == 1

    def test_short_intervals_are_not_fuzzed(self, engine):
        assert engine.apply_fuzz(1, 0) == 1
        assert engine.apply_fuzz(2, 0) == 2

    def test_fuzz_stays_in_band(self):
        # delta = 1 + 0.15 * 4.5 + 0.10 * 3 = 1.975 -> [8, 12]
        engine = FSRS(W, rng=random.Random(3))
        values = {engine.apply_fuzz(10, 0) for _ in range(200)}
        assert values <= set(range(8, 13))
        assert len(values) > 1

    def test_fuzz_minimum_raised_past_elapsed(self):
        engine = FSRS(W, rng=random.Random(3))
        values = {engine.apply_fuzz(10, 9.5) for _ in range(100)}
        assert min(values) >= 10

    def test_fuzz_capped_by_maximum_interval(self):
        engine = FSRS(W, maximum_interval=11, rng=random.Random(3))
        values = {engine.apply_fuzz(10, 0) for _ in range(100)}
        assert max(values) <= 11

    def test_fuzz_is_reproducible_with_seed(self, now):
        card = make_review_card(s=30.0, days_since_review=30)
        first = FSRS(W, rng=random.Random(11)).schedule(card, now)
        second = FSRS(W, rng=random.Random(11)).schedule(card, now)
        assert {r: c.scheduled_days for r, c in first.items()} == {
            r: c.scheduled_days for r, c in second.items()
        }


class TestUpdateFormulas:

    def test_lapse_stability_never_exceeds_short_term_clamp(self):
        for s in (0.5, 5.0, 50.0, 500.0):
            assert review_updates.lapse_stability(W, 5.0, s, 0.5) <= max(
                review_updates.short_term_stability(W, s), 0.1
            )

    def test_difficulty_clamped(self):
        assert review_updates.next_difficulty(W, 10.0, Rating.AGAIN) <= 10.0
        assert review_updates.next_difficulty(W, 1.0, Rating.EASY) >= 1.0

    def test_all_ratings_covered(self, engine, now):
        assert set(engine.schedule(make_card(), now)) == set(RATINGS)
