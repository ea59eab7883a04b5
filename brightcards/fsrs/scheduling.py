"""
Scheduling - Review Management

Ties together the scheduler and the database: the entry point the card UI
calls when a learner grades a card.

Main workflow:
1. Learner grades a card ("again" / "hard" / "normal" / "easy")
2. Grade is validated before anything is read or written
3. Card state is loaded and graded (first or subsequent path)
4. New state, due time and review event are saved in one transaction
"""

from __future__ import annotations
from datetime import datetime, timezone
from typing import Optional

from brightcards.deck_repo import CardNotFound, CardRepository
from brightcards.fsrs import database, scheduler
from brightcards.fsrs.database import Database
from brightcards.fsrs.models import Flashcard
from brightcards.fsrs.parameters import SchedulerParameters, DEFAULT_PARAMETERS
from brightcards.logging_config import get_logger
from brightcards.schemas import FlashcardOut, ReviewOutcome

logger = get_logger(__name__)


class ReviewService:
    """Grades cards and persists the resulting schedule."""

    def __init__(self, db: Database, params: SchedulerParameters = DEFAULT_PARAMETERS):
        self.db = db
        self.params = params
        self.cards = CardRepository(db)

    def review_card(
        self,
        card_id: int,
        grade: scheduler.GradeLike,
        timestamp: Optional[datetime] = None,
        deck_id: Optional[int] = None
    ) -> ReviewOutcome:
        """
        Grade a card and reschedule it.

        Args:
            card_id: Flashcard id
            grade: Grade enum, 1-4, or UI label
            timestamp: Review timestamp (defaults to now, UTC)
            deck_id: If given, the card must belong to this deck

        Returns:
            ReviewOutcome with the new state and due time

        Raises:
            InvalidGrade: before any database access
            CardNotFound: no such card (in that deck)
        """
        parsed = scheduler.parse_grade(grade)

        if timestamp is None:
            timestamp = datetime.now(timezone.utc)

        with self.db.session() as session:
            card_row = session.get(Flashcard, card_id)
            if card_row is None or (deck_id is not None and card_row.deck_id != deck_id):
                raise CardNotFound(f"Flashcard {card_id} not found")

            state = database.memory_state_from_row(card_row)
            new_state, event = scheduler.process_review(state, parsed, timestamp, self.params)

            database.save_memory_state(session, card_id, new_state)
            database.log_review_event(session, card_id, event)

        logger.info(
            "Reviewed card %d as %s: interval %d day(s), S=%.3f D=%.3f",
            card_id, parsed.name, event['interval_days'], new_state.stability, new_state.difficulty
        )

        return ReviewOutcome(
            card_id=card_id,
            grade=int(parsed),
            next_interval_days=event['interval_days'],
            due_at=new_state.due_at,
            difficulty=new_state.difficulty,
            stability=new_state.stability,
            is_first_review=event['is_first_review'],
            is_same_day=event['is_same_day']
        )

    def review_deck_due(self, deck_id: int, now: Optional[datetime] = None) -> list[FlashcardOut]:
        """The review queue for a deck: cards due at `now`, most overdue first."""
        return self.cards.get_due_cards(deck_id=deck_id, now=now)
