"""
SQLAlchemy ORM Models for Brightcards

Defines Deck, Flashcard and ReviewEvent models.
Flashcard rows carry the card's FSRS memory state; ReviewEvent is an
append-only log of every grading.
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


def _utcnow():
    return datetime.now(timezone.utc)


class Deck(Base):
    """A named collection of flashcards."""
    __tablename__ = 'decks'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    purpose = Column(Text, nullable=False, default="")

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    cards = relationship("Flashcard", back_populates="deck", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Deck(id={self.id}, name={self.name!r})>"


class Flashcard(Base):
    """
    A single flashcard and its persistent memory state.

    fsrs_difficulty == fsrs_stability == 0 marks a card that has never been graded.
    """
    __tablename__ = 'flashcards'

    id = Column(Integer, primary_key=True, autoincrement=True)
    deck_id = Column(Integer, ForeignKey('decks.id', ondelete='CASCADE'), nullable=False, index=True)

    front = Column(Text, nullable=False)
    back = Column(Text, nullable=False)
    card_type = Column(String(50), nullable=False, default="standard")

    # Memory state
    fsrs_difficulty = Column(Float, nullable=False, default=0.0)
    fsrs_stability = Column(Float, nullable=False, default=0.0)
    last_reviewed_at = Column(DateTime(timezone=True), nullable=True)
    due_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    deck = relationship("Deck", back_populates="cards")
    events = relationship("ReviewEvent", back_populates="card", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Flashcard(id={self.id}, deck_id={self.deck_id})>"


class ReviewEvent(Base):
    """
    Log entry for a single grading of a card.

    Captures state before/after the review and the scheduled interval.
    """
    __tablename__ = 'review_events'

    id = Column(Integer, primary_key=True, autoincrement=True)
    card_id = Column(Integer, ForeignKey('flashcards.id', ondelete='CASCADE'), nullable=False, index=True)

    timestamp = Column(DateTime(timezone=True), nullable=False)
    grade = Column(Integer, nullable=False)  # 1=AGAIN, 2=HARD, 3=GOOD, 4=EASY

    # State before review (NULL on first review)
    stability_before = Column(Float, nullable=True)
    difficulty_before = Column(Float, nullable=True)
    retrievability_before = Column(Float, nullable=True)
    elapsed_days = Column(Float, nullable=True)

    # State after review
    stability_after = Column(Float, nullable=False)
    difficulty_after = Column(Float, nullable=False)
    interval_days = Column(Integer, nullable=False)

    is_first_review = Column(Boolean, nullable=False, default=False)
    is_same_day = Column(Boolean, nullable=False, default=False)

    card = relationship("Flashcard", back_populates="events")

    def __repr__(self):
        return f"<ReviewEvent(id={self.id}, card_id={self.card_id}, grade={self.grade})>"
