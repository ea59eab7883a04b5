from datetime import datetime, timedelta, timezone

import pytest

from brightcards.fsrs.memory_state import (
    MemoryState,
    calculate_retrievability,
    get_elapsed_days,
    initialize_new_card,
    is_same_day_review,
    next_interval,
)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


class TestRetrievability:
    def test_full_recall_right_after_review(self):
        assert calculate_retrievability(5.0, 0.0) == 1.0

    def test_ninety_percent_at_stability(self):
        assert calculate_retrievability(7.0, 7.0) == pytest.approx(0.9)

    def test_decreases_with_time(self):
        values = [calculate_retrievability(4.0, t) for t in (0, 1, 4, 16, 64)]
        assert values == sorted(values, reverse=True)
        assert all(0 < v <= 1 for v in values)

    @pytest.mark.parametrize("stability", [0.0, -2.0])
    def test_non_positive_stability_gives_zero(self, stability):
        assert calculate_retrievability(stability, 3.0) == 0.0


class TestNextInterval:
    def test_default_retention_interval_is_stability(self):
        assert next_interval(10.0) == 10
        assert next_interval(3.173) == 3

    def test_at_least_one_day(self):
        assert next_interval(0.2) == 1

    def test_custom_retention(self):
        # 0.8 ** -2 - 1 == 0.5625; 10 / (19 / 81) * 0.5625 ~= 23.98
        assert next_interval(10.0, 0.8) == 24


class TestElapsedDays:
    def test_uses_timestamp(self):
        last = NOW - timedelta(days=2, hours=12)
        assert get_elapsed_days(last, stability=40.0, now=NOW) == pytest.approx(2.5)

    def test_timestamp_preferred_over_approximation(self):
        last = NOW - timedelta(hours=6)
        assert get_elapsed_days(last, stability=10.0, now=NOW) == pytest.approx(0.25)

    def test_falls_back_to_stability_when_unknown(self):
        assert get_elapsed_days(None, stability=10.0, now=NOW) == pytest.approx(9.0)

    def test_future_timestamp_clamped_to_zero(self):
        assert get_elapsed_days(NOW + timedelta(days=1), stability=3.0, now=NOW) == 0.0

    def test_naive_timestamp_treated_as_utc(self):
        naive = datetime(2026, 2, 28, 12, 0)
        assert get_elapsed_days(naive, stability=3.0, now=NOW) == pytest.approx(1.0)


def test_same_day_threshold():
    assert is_same_day_review(0.99)
    assert not is_same_day_review(1.0)


def test_new_card_is_unseen_and_due():
    card = initialize_new_card(NOW)
    assert card.is_unseen
    assert card.last_reviewed_at is None
    assert card.due_at == NOW


def test_graded_card_is_not_unseen():
    assert not MemoryState(difficulty=5.0, stability=3.0).is_unseen
