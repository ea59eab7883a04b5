"""
Repository for decks and flashcards.

CRUD for decks and cards on top of the FSRS database. New cards start in
the unseen state (difficulty == stability == 0) and are due immediately.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from brightcards.fsrs import database
from brightcards.fsrs.database import Database
from brightcards.fsrs.memory_state import as_utc
from brightcards.fsrs.models import Deck, Flashcard
from brightcards.logging_config import get_logger
from brightcards.schemas import DeckOut, FlashcardOut

logger = get_logger(__name__)


class DeckNotFound(LookupError):
    """No deck with the requested id."""


class CardNotFound(LookupError):
    """No flashcard with the requested id (in the requested deck)."""


# ---- Helpers ----

def _get_deck(session: Session, deck_id: int) -> Deck:
    deck = session.get(Deck, deck_id)
    if deck is None:
        raise DeckNotFound(f"Deck {deck_id} not found")
    return deck


def _get_card(session: Session, card_id: int, deck_id: Optional[int] = None) -> Flashcard:
    card = session.get(Flashcard, card_id)
    if card is None or (deck_id is not None and card.deck_id != deck_id):
        raise CardNotFound(f"Flashcard {card_id} not found")
    return card


def _card_out(card: Flashcard) -> FlashcardOut:
    out = FlashcardOut.model_validate(card)
    return out.model_copy(update={
        "due_at": as_utc(card.due_at),
        "last_reviewed_at": as_utc(card.last_reviewed_at) if card.last_reviewed_at else None,
        "created_at": as_utc(card.created_at),
        "updated_at": as_utc(card.updated_at),
    })


# ---- Decks ----

class DeckRepository:
    """Create, read, update and delete decks."""

    def __init__(self, db: Database):
        self.db = db

    def _deck_out(self, session: Session, deck: Deck) -> DeckOut:
        card_count, last_reviewed = session.query(
            func.count(Flashcard.id),
            func.max(Flashcard.last_reviewed_at)
        ).filter(Flashcard.deck_id == deck.id).one()
        return DeckOut(
            id=deck.id,
            name=deck.name,
            description=deck.description,
            purpose=deck.purpose,
            card_count=card_count,
            last_reviewed_at=as_utc(last_reviewed) if last_reviewed else None,
            created_at=as_utc(deck.created_at),
            updated_at=as_utc(deck.updated_at)
        )

    def create_deck(self, name: str, description: str = "", purpose: str = "") -> DeckOut:
        """Create a new empty deck."""
        if not name or not name.strip():
            raise ValueError("Deck name must not be empty")

        with self.db.session() as session:
            deck = Deck(name=name.strip(), description=description, purpose=purpose)
            session.add(deck)
            session.flush()
            logger.info("Created deck %d (%s)", deck.id, deck.name)
            return self._deck_out(session, deck)

    def get_deck(self, deck_id: int) -> DeckOut:
        """Get a deck by id (raises DeckNotFound)."""
        with self.db.session() as session:
            return self._deck_out(session, _get_deck(session, deck_id))

    def get_all_decks(self) -> list[DeckOut]:
        """All decks ordered by name."""
        with self.db.session() as session:
            decks = session.query(Deck).order_by(Deck.name.asc(), Deck.id.asc()).all()
            return [self._deck_out(session, deck) for deck in decks]

    def update_deck(
        self,
        deck_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
        purpose: Optional[str] = None
    ) -> DeckOut:
        """Update deck fields; None leaves a field unchanged."""
        with self.db.session() as session:
            deck = _get_deck(session, deck_id)
            if name is not None:
                if not name.strip():
                    raise ValueError("Deck name must not be empty")
                deck.name = name.strip()
            if description is not None:
                deck.description = description
            if purpose is not None:
                deck.purpose = purpose
            session.flush()
            return self._deck_out(session, deck)

    def delete_deck(self, deck_id: int) -> None:
        """Delete a deck and all of its cards and review history."""
        with self.db.session() as session:
            deck = _get_deck(session, deck_id)
            session.delete(deck)
            logger.info("Deleted deck %d", deck_id)


# ---- Flashcards ----

class CardRepository:
    """Create, read, update and delete flashcards; query due cards."""

    def __init__(self, db: Database):
        self.db = db

    def create_card(
        self,
        deck_id: int,
        front: str,
        back: str,
        card_type: str = "standard",
        now: Optional[datetime] = None
    ) -> FlashcardOut:
        """Create an unseen card, due immediately."""
        if now is None:
            now = datetime.now(timezone.utc)

        with self.db.session() as session:
            _get_deck(session, deck_id)
            card = Flashcard(
                deck_id=deck_id,
                front=front,
                back=back,
                card_type=card_type,
                fsrs_difficulty=0.0,
                fsrs_stability=0.0,
                last_reviewed_at=None,
                due_at=as_utc(now)
            )
            session.add(card)
            session.flush()
            logger.info("Created card %d in deck %d", card.id, deck_id)
            return _card_out(card)

    def get_card(self, card_id: int, deck_id: Optional[int] = None) -> FlashcardOut:
        """Get a card by id, optionally checking it belongs to deck_id."""
        with self.db.session() as session:
            return _card_out(_get_card(session, card_id, deck_id))

    def get_all_cards(self, deck_id: int) -> list[FlashcardOut]:
        """All cards in a deck, oldest first."""
        with self.db.session() as session:
            _get_deck(session, deck_id)
            cards = session.query(Flashcard).filter(
                Flashcard.deck_id == deck_id
            ).order_by(Flashcard.id.asc()).all()
            return [_card_out(card) for card in cards]

    def update_card(
        self,
        card_id: int,
        front: Optional[str] = None,
        back: Optional[str] = None,
        card_type: Optional[str] = None
    ) -> FlashcardOut:
        """Edit card content. Memory state is only changed by reviews."""
        with self.db.session() as session:
            card = _get_card(session, card_id)
            if front is not None:
                card.front = front
            if back is not None:
                card.back = back
            if card_type is not None:
                card.card_type = card_type
            session.flush()
            return _card_out(card)

    def delete_card(self, card_id: int, deck_id: Optional[int] = None) -> FlashcardOut:
        """Delete a card and its review history; returns the deleted card."""
        with self.db.session() as session:
            card = _get_card(session, card_id, deck_id)
            deleted = _card_out(card)
            session.delete(card)
            logger.info("Deleted card %d", card_id)
            return deleted

    def get_due_cards(
        self,
        deck_id: Optional[int] = None,
        now: Optional[datetime] = None
    ) -> list[FlashcardOut]:
        """Cards due at `now`, most overdue first."""
        with self.db.session() as session:
            if deck_id is not None:
                _get_deck(session, deck_id)
            return [_card_out(card) for card in database.get_due_cards(session, deck_id, now)]

    def get_recent_events(self, card_id: Optional[int] = None, limit: int = 10) -> list[dict]:
        """Recent review events, newest first."""
        with self.db.session() as session:
            return database.get_recent_events(session, card_id, limit)
