"""
Scheduler - FSRS Algorithm Logic

Pure FSRS scheduling and state updates (no database calls).

Two entry points, keyed on whether the card has been graded before:
- initial_grade: first grading of an unseen card
- subsequent_grade: every later grading

process_review wraps both for callers holding a MemoryState:
1. Validate the grade
2. Pick first or subsequent grading from the sentinel state
3. Compute elapsed days from the stored timestamp
4. Return the new state + event data dict

Database I/O is handled by the database module.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple, Union
import math

from brightcards.fsrs import memory_state, ltm_updates, stm_updates
from brightcards.fsrs.constants import Grade, GRADE_LABELS
from brightcards.fsrs.errors import InvalidGrade, InvalidInputState
from brightcards.fsrs.parameters import SchedulerParameters, DEFAULT_PARAMETERS
from brightcards.logging_config import get_logger

logger = get_logger(__name__)

GradeLike = Union[Grade, int, str]


@dataclass(frozen=True)
class InitialGradeResult:
    stability: float
    difficulty: float


@dataclass(frozen=True)
class SubsequentGradeResult:
    next_interval_days: int
    difficulty: float
    stability: float


def parse_grade(grade: GradeLike) -> Grade:
    """
    Normalise a grade to the Grade enum.

    Accepts Grade members, integers 1-4 and the UI labels
    ("again", "hard", "normal"/"good", "easy"), case-insensitive.

    Raises:
        InvalidGrade: for anything else
    """
    if isinstance(grade, Grade):
        return grade
    if isinstance(grade, bool):
        raise InvalidGrade(grade)
    if isinstance(grade, int):
        try:
            return Grade(grade)
        except ValueError:
            raise InvalidGrade(grade) from None
    if isinstance(grade, str):
        label = grade.strip().lower()
        if label in GRADE_LABELS:
            return GRADE_LABELS[label]
        if label.isdigit():
            return parse_grade(int(label))
    raise InvalidGrade(grade)


def initial_grade(
    grade: GradeLike,
    params: SchedulerParameters = DEFAULT_PARAMETERS
) -> InitialGradeResult:
    """
    First grading of a card that has never been reviewed.

    Args:
        grade: First grade given to the card
        params: Scheduler parameters

    Returns:
        InitialGradeResult(stability, difficulty)
    """
    grade = parse_grade(grade)
    result = InitialGradeResult(
        stability=ltm_updates.initial_stability(grade, params),
        difficulty=ltm_updates.initial_difficulty(grade, params)
    )
    logger.debug("Initial grade %s -> S=%.4f D=%.4f", grade.name, result.stability, result.difficulty)
    return result


def subsequent_grade(
    grade: GradeLike,
    difficulty: float,
    stability: float,
    elapsed_days: float,
    params: SchedulerParameters = DEFAULT_PARAMETERS
) -> SubsequentGradeResult:
    """
    Grade a card that already has a memory state.

    Steps:
    1. Retrievability from elapsed time and stability
    2. Same-day (< 1 day): short-term stability update, difficulty unchanged
    3. Otherwise: difficulty update, then lapse or recall stability update
    4. Interval sized to the retention target; Again re-queues immediately (0)

    Args:
        grade: Review grade
        difficulty: Current difficulty (1-10)
        stability: Current stability, must be > 0
        elapsed_days: Days since last review (negative treated as 0)
        params: Scheduler parameters

    Returns:
        SubsequentGradeResult(next_interval_days, difficulty, stability)

    Raises:
        InvalidGrade: grade is not Again/Hard/Good/Easy
        InvalidInputState: stability <= 0 or non-finite inputs
    """
    grade = parse_grade(grade)

    if not math.isfinite(stability) or stability <= 0:
        raise InvalidInputState(f"Stability must be positive, got {stability!r}")
    if not math.isfinite(difficulty):
        raise InvalidInputState(f"Difficulty must be finite, got {difficulty!r}")
    if not math.isfinite(elapsed_days):
        raise InvalidInputState(f"Elapsed days must be finite, got {elapsed_days!r}")

    elapsed_days = max(0.0, elapsed_days)
    difficulty = ltm_updates.clamp_difficulty(difficulty)

    if memory_state.is_same_day_review(elapsed_days):
        new_difficulty = difficulty
        new_stability = stm_updates.stability_short_term(stability, grade, params)
    else:
        retrievability = memory_state.calculate_retrievability(stability, elapsed_days)
        new_difficulty = ltm_updates.next_difficulty(difficulty, grade, params)
        if grade == Grade.AGAIN:
            new_stability = ltm_updates.stability_after_failure(
                difficulty, stability, retrievability, params
            )
        else:
            new_stability = ltm_updates.stability_after_success(
                stability, retrievability, grade, params
            )

    if grade == Grade.AGAIN:
        interval = 0
    else:
        interval = memory_state.next_interval(new_stability, params.desired_retention)

    logger.debug(
        "Subsequent grade %s (t=%.3f): S %.4f -> %.4f, D %.4f -> %.4f, interval %d",
        grade.name, elapsed_days, stability, new_stability, difficulty, new_difficulty, interval
    )
    return SubsequentGradeResult(
        next_interval_days=interval,
        difficulty=new_difficulty,
        stability=new_stability
    )


def process_review(
    card: memory_state.MemoryState,
    grade: GradeLike,
    timestamp: Optional[datetime] = None,
    params: SchedulerParameters = DEFAULT_PARAMETERS
) -> Tuple[memory_state.MemoryState, dict]:
    """
    Process a review and return the updated state + event data.

    No database calls, and the input state is not modified.
    Caller is responsible for:
    1. Loading the card state
    2. Saving the returned state
    3. Persisting the event

    Args:
        card: Current MemoryState (may be the unseen sentinel)
        grade: Review grade
        timestamp: Review timestamp (defaults to now, UTC)
        params: Scheduler parameters

    Returns:
        Tuple of (new_state, event_data_dict)
    """
    grade = parse_grade(grade)

    if timestamp is None:
        timestamp = datetime.now(timezone.utc)

    is_first = card.is_unseen

    if is_first:
        initial = initial_grade(grade, params)
        new_stability = initial.stability
        new_difficulty = initial.difficulty
        if grade == Grade.AGAIN:
            interval = 0
        else:
            interval = memory_state.next_interval(new_stability, params.desired_retention)
        elapsed_days = None
        retrievability_before = None
        same_day = False
    else:
        elapsed_days = memory_state.get_elapsed_days(card.last_reviewed_at, card.stability, timestamp)
        retrievability_before = memory_state.calculate_retrievability(card.stability, elapsed_days)
        result = subsequent_grade(grade, card.difficulty, card.stability, elapsed_days, params)
        new_stability = result.stability
        new_difficulty = result.difficulty
        interval = result.next_interval_days
        same_day = memory_state.is_same_day_review(elapsed_days)

    new_card = memory_state.MemoryState(
        difficulty=new_difficulty,
        stability=new_stability,
        last_reviewed_at=timestamp,
        due_at=timestamp + timedelta(days=interval)
    )

    event_data = {
        'timestamp': timestamp,
        'grade': grade,
        'is_first_review': is_first,
        'is_same_day': same_day,
        'elapsed_days': elapsed_days,
        'stability_before': None if is_first else card.stability,
        'difficulty_before': None if is_first else card.difficulty,
        'retrievability_before': retrievability_before,
        'stability_after': new_card.stability,
        'difficulty_after': new_card.difficulty,
        'interval_days': interval,
        'due_at': new_card.due_at,
    }

    return new_card, event_data
