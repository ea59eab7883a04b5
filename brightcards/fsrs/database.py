"""
Database - FSRS Database I/O Operations

Handles database operations for card memory state and review events.
Uses SQLAlchemy ORM; any SQLAlchemy URL works (SQLite by default, Postgres
in deployment).

This module handles ONLY database I/O.
Algorithm logic is handled by the scheduler module.
"""

from __future__ import annotations
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, Optional

from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from brightcards.fsrs.memory_state import MemoryState, as_utc
from brightcards.fsrs.models import Base, Flashcard, ReviewEvent
from brightcards.logging_config import get_logger

logger = get_logger(__name__)


def create_db_engine(db_url: str) -> Engine:
    """
    Create a SQLAlchemy engine for the given URL.

    In-memory SQLite shares one connection so every session sees the same
    database; other backends get a connection pool.
    """
    if db_url in ("sqlite://", "sqlite:///:memory:"):
        return create_engine(
            db_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=False
        )
    if db_url.startswith("sqlite"):
        return create_engine(db_url, echo=False)
    return create_engine(
        db_url,
        pool_size=5,           # Keep 5 connections open
        max_overflow=10,       # Allow up to 10 extra connections
        pool_pre_ping=True,    # Verify connections before use
        echo=False
    )


class Database:
    """
    Owns the engine and session factory for one database.

    Built once by the application and passed to the repositories and the
    review service.
    """

    def __init__(self, db_url: str):
        self.db_url = db_url
        self.engine = create_db_engine(db_url)
        self._session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Session that commits on success and rolls back on any error."""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def init_db(self):
        """
        Initialize database schema if tables don't exist.

        Safe to call multiple times - only creates missing tables.
        """
        existing_tables = set(inspect(self.engine).get_table_names())
        missing = {table.name for table in Base.metadata.sorted_tables} - existing_tables
        if missing:
            Base.metadata.create_all(self.engine)
            logger.info("Created tables: %s", ", ".join(sorted(missing)))

    def reset_db(self):
        """
        DANGEROUS: Delete all data and recreate tables.

        Only use this for testing or when you want to start fresh.
        All review history will be lost!
        """
        Base.metadata.drop_all(self.engine)
        logger.warning("All tables dropped for %s", self.engine.url.render_as_string(hide_password=True))
        self.init_db()


# ---- Card state I/O (session-scoped) ----

def load_memory_state(session: Session, card_id: int) -> Optional[MemoryState]:
    """
    Load a card's memory state.

    Args:
        session: Open session
        card_id: Flashcard id

    Returns:
        MemoryState if the card exists, None otherwise
    """
    card = session.get(Flashcard, card_id)
    if card is None:
        return None
    return memory_state_from_row(card)


def memory_state_from_row(card: Flashcard) -> MemoryState:
    """Build a MemoryState from a Flashcard row."""
    return MemoryState(
        difficulty=card.fsrs_difficulty,
        stability=card.fsrs_stability,
        last_reviewed_at=as_utc(card.last_reviewed_at) if card.last_reviewed_at else None,
        due_at=as_utc(card.due_at) if card.due_at else None
    )


def save_memory_state(session: Session, card_id: int, state: MemoryState) -> Flashcard:
    """
    Write a memory state onto an existing card.

    Raises:
        LookupError: if the card does not exist
    """
    card = session.get(Flashcard, card_id)
    if card is None:
        raise LookupError(f"Flashcard {card_id} not found")

    card.fsrs_difficulty = state.difficulty
    card.fsrs_stability = state.stability
    card.last_reviewed_at = as_utc(state.last_reviewed_at) if state.last_reviewed_at else None
    if state.due_at is not None:
        card.due_at = as_utc(state.due_at)
    return card


def log_review_event(session: Session, card_id: int, event: dict) -> ReviewEvent:
    """
    Append a review event.

    Args:
        session: Open session
        card_id: Flashcard id
        event: Event dict as returned by scheduler.process_review

    Returns:
        The pending ReviewEvent row
    """
    review_event = ReviewEvent(
        card_id=card_id,
        timestamp=as_utc(event['timestamp']),
        grade=int(event['grade']),
        stability_before=event.get('stability_before'),
        difficulty_before=event.get('difficulty_before'),
        retrievability_before=event.get('retrievability_before'),
        elapsed_days=event.get('elapsed_days'),
        stability_after=event['stability_after'],
        difficulty_after=event['difficulty_after'],
        interval_days=event['interval_days'],
        is_first_review=bool(event.get('is_first_review')),
        is_same_day=bool(event.get('is_same_day'))
    )
    session.add(review_event)
    return review_event


def get_due_cards(
    session: Session,
    deck_id: Optional[int] = None,
    now: Optional[datetime] = None
) -> list[Flashcard]:
    """
    Cards whose due time has passed, most overdue first.

    Args:
        session: Open session
        deck_id: Restrict to one deck (all decks if None)
        now: Reference time (defaults to now, UTC)

    Returns:
        List of Flashcard rows
    """
    if now is None:
        now = datetime.now(timezone.utc)

    query = session.query(Flashcard).filter(Flashcard.due_at <= as_utc(now))
    if deck_id is not None:
        query = query.filter(Flashcard.deck_id == deck_id)
    return query.order_by(Flashcard.due_at.asc(), Flashcard.id.asc()).all()


def get_recent_events(
    session: Session,
    card_id: Optional[int] = None,
    limit: int = 10
) -> list[dict]:
    """
    Get recent review events.

    Args:
        session: Open session
        card_id: Restrict to one card (all cards if None)
        limit: Maximum number of events to return

    Returns:
        List of recent events (newest first)
    """
    query = session.query(ReviewEvent)
    if card_id is not None:
        query = query.filter(ReviewEvent.card_id == card_id)
    events = query.order_by(ReviewEvent.timestamp.desc(), ReviewEvent.id.desc()).limit(limit).all()

    return [
        {
            "id": event.id,
            "card_id": event.card_id,
            "timestamp": as_utc(event.timestamp),
            "grade": event.grade,
            "stability_before": event.stability_before,
            "difficulty_before": event.difficulty_before,
            "retrievability_before": event.retrievability_before,
            "elapsed_days": event.elapsed_days,
            "stability_after": event.stability_after,
            "difficulty_after": event.difficulty_after,
            "interval_days": event.interval_days,
            "is_first_review": event.is_first_review,
            "is_same_day": event.is_same_day,
        }
        for event in events
    ]
