"""
Memory State - FSRS Card State and Retrievability

Defines the memory state variables and derived quantities for FSRS.

Key concepts:
- Stability (S): Days until recall probability decays to 90%
- Difficulty (D): How hard the card is to learn (1-10 scale)
- Retrievability (R): Probability of successful recall at time t
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional
import math

from brightcards.fsrs.constants import (
    DECAY,
    FACTOR,
    R_TARGET,
    ELAPSED_FALLBACK_RATIO,
    SAME_DAY_THRESHOLD,
)


@dataclass(frozen=True)
class MemoryState:
    """
    Memory state for a single card.

    difficulty == stability == 0 is the "unseen" sentinel: the card has
    never been graded and must go through first grading.
    """
    difficulty: float = 0.0
    stability: float = 0.0
    last_reviewed_at: Optional[datetime] = None
    due_at: Optional[datetime] = None

    @property
    def is_unseen(self) -> bool:
        return self.difficulty == 0 and self.stability == 0


def initialize_new_card(now: Optional[datetime] = None) -> MemoryState:
    """
    State for a card that has never been reviewed (due immediately).

    Args:
        now: Creation timestamp (defaults to now, UTC)

    Returns:
        Sentinel MemoryState
    """
    if now is None:
        now = datetime.now(timezone.utc)
    return MemoryState(difficulty=0.0, stability=0.0, last_reviewed_at=None, due_at=now)


def calculate_retrievability(stability: float, elapsed_days: float) -> float:
    """
    Calculate retrievability using the FSRS power forgetting curve.

    Formula: R = (1 + FACTOR * t / S) ^ DECAY

    Interpretation:
    - Immediately after review: R = 1.0
    - At t = S: R = 0.9
    - Non-positive stability has no meaningful curve and yields R = 0

    Args:
        stability: Current stability in days
        elapsed_days: Time since last review in days

    Returns:
        Retrievability between 0 and 1
    """
    if stability <= 0:
        return 0.0
    elapsed_days = max(0.0, elapsed_days)
    return (1.0 + FACTOR * elapsed_days / stability) ** DECAY


def next_interval(stability: float, desired_retention: float = R_TARGET) -> int:
    """
    Days until retrievability decays to the retention target (at least 1).

    Formula: I = round(max(1, S / FACTOR * (R_target ^ (1 / DECAY) - 1)))
    """
    raw = stability / FACTOR * (desired_retention ** (1.0 / DECAY) - 1.0)
    return int(round(max(1.0, raw)))


def get_elapsed_days(
    last_reviewed_at: Optional[datetime],
    stability: float,
    now: Optional[datetime] = None
) -> float:
    """
    Fractional days since the last review.

    The stored timestamp is always preferred. Only when it is missing is
    elapsed time approximated as S * 0.9.

    Args:
        last_reviewed_at: Timestamp of last review, or None if unknown
        stability: Current stability, used only for the fallback
        now: Current timestamp (defaults to now, UTC)

    Returns:
        Elapsed days, never negative
    """
    if last_reviewed_at is None:
        return max(0.0, stability * ELAPSED_FALLBACK_RATIO)

    if now is None:
        now = datetime.now(timezone.utc)

    delta = as_utc(now) - as_utc(last_reviewed_at)
    return max(0.0, delta.total_seconds() / 86400.0)


def is_same_day_review(elapsed_days: float) -> bool:
    """Reviews less than one day apart use the short-term stability update."""
    return elapsed_days < SAME_DAY_THRESHOLD


def as_utc(timestamp: datetime) -> datetime:
    """Normalise a timestamp to aware UTC."""
    # Naive timestamps come back from SQLite; they were stored as UTC
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(timezone.utc)
