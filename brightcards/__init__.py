"""
Brightcards - flashcards scheduled with FSRS.

    from brightcards import config, DeckRepository, CardRepository, ReviewService

    db = config.open_database()
    deck = DeckRepository(db).create_deck("Spanish")
    card = CardRepository(db).create_card(deck.id, "perro", "dog")
    outcome = ReviewService(db, config.get_scheduler_parameters()).review_card(card.id, "normal")
"""

from brightcards.fsrs.database import Database
from brightcards.deck_repo import CardNotFound, CardRepository, DeckNotFound, DeckRepository
from brightcards.fsrs.scheduling import ReviewService

__all__ = [
    "Database",
    "DeckRepository",
    "CardRepository",
    "DeckNotFound",
    "CardNotFound",
    "ReviewService",
]
