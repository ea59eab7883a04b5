from datetime import timedelta

import pytest

from brightcards.fsrs import (
    Grade,
    InvalidGrade,
    MemoryState,
    initial_grade,
    initialize_new_card,
    process_review,
    subsequent_grade,
)


def test_first_review_uses_initial_grading(t0):
    card, event = process_review(initialize_new_card(t0), "normal", t0)

    expected = initial_grade(Grade.GOOD)
    assert card.stability == expected.stability
    assert card.difficulty == expected.difficulty
    assert card.last_reviewed_at == t0
    assert card.due_at == t0 + timedelta(days=3)
    assert event["is_first_review"] is True
    assert event["stability_before"] is None
    assert event["retrievability_before"] is None
    assert event["interval_days"] == 3


def test_first_again_is_due_immediately(t0):
    card, event = process_review(initialize_new_card(t0), Grade.AGAIN, t0)
    assert event["interval_days"] == 0
    assert card.due_at == t0


def test_second_review_uses_elapsed_time(t0):
    first, _ = process_review(initialize_new_card(t0), Grade.GOOD, t0)
    later = t0 + timedelta(days=4)
    second, event = process_review(first, Grade.GOOD, later)

    expected = subsequent_grade(Grade.GOOD, first.difficulty, first.stability, 4.0)
    assert second.stability == pytest.approx(expected.stability)
    assert second.difficulty == pytest.approx(expected.difficulty)
    assert event["elapsed_days"] == pytest.approx(4.0)
    assert event["is_first_review"] is False
    assert event["is_same_day"] is False
    assert event["stability_before"] == first.stability
    assert second.due_at == later + timedelta(days=expected.next_interval_days)


def test_same_day_review(t0):
    first, _ = process_review(initialize_new_card(t0), Grade.HARD, t0)
    second, event = process_review(first, Grade.EASY, t0 + timedelta(hours=2))
    assert event["is_same_day"] is True
    assert second.difficulty == first.difficulty


def test_missing_timestamp_falls_back_to_stability(t0):
    legacy = MemoryState(difficulty=5.0, stability=10.0, last_reviewed_at=None)
    _, event = process_review(legacy, Grade.GOOD, t0)
    assert event["elapsed_days"] == pytest.approx(9.0)


def test_input_state_is_not_modified(t0):
    card = MemoryState(difficulty=5.0, stability=10.0, last_reviewed_at=t0 - timedelta(days=10))
    process_review(card, Grade.AGAIN, t0)
    assert card == MemoryState(difficulty=5.0, stability=10.0, last_reviewed_at=t0 - timedelta(days=10))


def test_invalid_grade_raises(t0):
    with pytest.raises(InvalidGrade):
        process_review(initialize_new_card(t0), "perfect", t0)
