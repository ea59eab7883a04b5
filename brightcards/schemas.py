"""
Pydantic models returned by the deck and card repositories.

Read-only views of the ORM rows, safe to hand to the UI after the
session that loaded them is closed.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class DeckOut(BaseModel):
    """A deck with summary counts."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str = ""
    purpose: str = ""
    card_count: int = 0
    last_reviewed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class FlashcardOut(BaseModel):
    """A flashcard with its current memory state."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    deck_id: int
    front: str
    back: str
    card_type: str = "standard"
    fsrs_difficulty: float = Field(0.0, description="0 until first graded, then 1-10")
    fsrs_stability: float = Field(0.0, description="Days until recall drops to 90%")
    last_reviewed_at: Optional[datetime] = None
    due_at: datetime
    created_at: datetime
    updated_at: datetime


class ReviewOutcome(BaseModel):
    """Result of grading one card."""
    card_id: int
    grade: int
    next_interval_days: int
    due_at: datetime
    difficulty: float
    stability: float
    is_first_review: bool
    is_same_day: bool
