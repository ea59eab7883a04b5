"""
FSRS - Free Spaced Repetition Scheduler

Scheduling engine for Brightcards flashcards.

This package implements the 19-weight FSRS-5 model with:
- First grading: initial stability/difficulty from the first grade
- Spaced reviews: difficulty damping + mean reversion, lapse and recall
  stability updates driven by retrievability
- Same-day reviews: short-term stability update, difficulty unchanged
- Power forgetting curve: R = (1 + 19/81 * t / S) ^ -0.5

Quick start:
    from brightcards import fsrs

    # Pure scheduling
    first = fsrs.initial_grade(fsrs.Grade.GOOD)
    later = fsrs.subsequent_grade(fsrs.Grade.GOOD, first.difficulty, first.stability, 3.2)

    # Card-level review (no DB calls)
    card, event_data = fsrs.process_review(card, "normal")
"""

# Core scheduler API (algorithm logic)
from brightcards.fsrs.scheduler import (
    InitialGradeResult,
    SubsequentGradeResult,
    initial_grade,
    subsequent_grade,
    process_review,
    parse_grade,
)

# Database API
from brightcards.fsrs.database import (
    Database,
    load_memory_state,
    save_memory_state,
    log_review_event,
    get_due_cards,
    get_recent_events,
)

# Constants and parameters
from brightcards.fsrs.constants import (
    Grade,
    GRADE_LABELS,
    DECAY,
    FACTOR,
    R_TARGET,
    S_MIN,
    D_MIN,
    D_MAX,
    DEFAULT_WEIGHTS,
)
from brightcards.fsrs.parameters import (
    SchedulerParameters,
    DEFAULT_PARAMETERS,
    build_parameters,
)

# Errors
from brightcards.fsrs.errors import (
    SchedulerError,
    InvalidGrade,
    InvalidInputState,
)

# Memory state and formula building blocks (for advanced usage)
from brightcards.fsrs.memory_state import (
    MemoryState,
    initialize_new_card,
    calculate_retrievability,
    next_interval,
    get_elapsed_days,
    is_same_day_review,
)
from brightcards.fsrs.ltm_updates import (
    initial_difficulty,
    initial_stability,
    next_difficulty,
    stability_after_failure,
    stability_after_success,
)
from brightcards.fsrs.stm_updates import stability_short_term


__all__ = [
    # Core algorithm
    "InitialGradeResult",
    "SubsequentGradeResult",
    "initial_grade",
    "subsequent_grade",
    "process_review",
    "parse_grade",

    # Database operations
    "Database",
    "load_memory_state",
    "save_memory_state",
    "log_review_event",
    "get_due_cards",
    "get_recent_events",

    # Enums and constants
    "Grade",
    "GRADE_LABELS",
    "DECAY",
    "FACTOR",
    "R_TARGET",
    "S_MIN",
    "D_MIN",
    "D_MAX",
    "DEFAULT_WEIGHTS",

    # Parameters
    "SchedulerParameters",
    "DEFAULT_PARAMETERS",
    "build_parameters",

    # Errors
    "SchedulerError",
    "InvalidGrade",
    "InvalidInputState",

    # Memory state
    "MemoryState",
    "initialize_new_card",
    "calculate_retrievability",
    "next_interval",
    "get_elapsed_days",
    "is_same_day_review",

    # Formula building blocks
    "initial_difficulty",
    "initial_stability",
    "next_difficulty",
    "stability_after_failure",
    "stability_after_success",
    "stability_short_term",
]
