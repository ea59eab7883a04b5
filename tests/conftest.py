from datetime import datetime, timezone

import pytest

from brightcards import CardRepository, DeckRepository, ReviewService
from brightcards.fsrs.database import Database


@pytest.fixture
def t0():
    return datetime(2026, 1, 5, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def db(tmp_path):
    database = Database(f"sqlite:///{tmp_path / 'test_brightcards.db'}")
    database.init_db()
    yield database
    database.engine.dispose()


@pytest.fixture
def decks(db):
    return DeckRepository(db)


@pytest.fixture
def cards(db):
    return CardRepository(db)


@pytest.fixture
def reviews(db):
    return ReviewService(db)


@pytest.fixture
def deck(decks):
    return decks.create_deck("Spanish", "Core vocabulary", "Travel")
