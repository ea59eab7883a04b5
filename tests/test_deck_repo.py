from datetime import timedelta

import pytest

from brightcards import CardNotFound, DeckNotFound


class TestDecks:
    def test_create_and_get(self, decks, deck):
        fetched = decks.get_deck(deck.id)
        assert fetched.name == "Spanish"
        assert fetched.description == "Core vocabulary"
        assert fetched.purpose == "Travel"
        assert fetched.card_count == 0
        assert fetched.last_reviewed_at is None

    def test_empty_name_rejected(self, decks):
        with pytest.raises(ValueError):
            decks.create_deck("   ")

    def test_get_all(self, decks, deck):
        decks.create_deck("Anatomy")
        assert [d.name for d in decks.get_all_decks()] == ["Anatomy", "Spanish"]

    def test_update(self, decks, deck):
        updated = decks.update_deck(deck.id, name="Spanish A2", purpose="Exam")
        assert updated.name == "Spanish A2"
        assert updated.purpose == "Exam"
        assert updated.description == "Core vocabulary"

    def test_delete_removes_cards(self, decks, cards, deck):
        card = cards.create_card(deck.id, "perro", "dog")
        decks.delete_deck(deck.id)
        with pytest.raises(DeckNotFound):
            decks.get_deck(deck.id)
        with pytest.raises(CardNotFound):
            cards.get_card(card.id)

    def test_missing_deck(self, decks):
        with pytest.raises(DeckNotFound):
            decks.get_deck(999)

    def test_card_count(self, decks, cards, deck):
        cards.create_card(deck.id, "perro", "dog")
        cards.create_card(deck.id, "gato", "cat")
        assert decks.get_deck(deck.id).card_count == 2


class TestCards:
    def test_new_card_is_unseen_and_due(self, cards, deck, t0):
        card = cards.create_card(deck.id, "perro", "dog", now=t0)
        assert card.fsrs_difficulty == 0.0
        assert card.fsrs_stability == 0.0
        assert card.last_reviewed_at is None
        assert card.due_at == t0
        assert card.card_type == "standard"

    def test_create_in_missing_deck(self, cards):
        with pytest.raises(DeckNotFound):
            cards.create_card(42, "front", "back")

    def test_get_checks_deck(self, decks, cards, deck):
        other = decks.create_deck("Other")
        card = cards.create_card(deck.id, "perro", "dog")
        assert cards.get_card(card.id, deck.id).front == "perro"
        with pytest.raises(CardNotFound):
            cards.get_card(card.id, other.id)

    def test_update_content_only(self, cards, deck):
        card = cards.create_card(deck.id, "perro", "dog")
        updated = cards.update_card(card.id, front="el perro", back="the dog")
        assert updated.front == "el perro"
        assert updated.back == "the dog"
        assert updated.fsrs_stability == 0.0

    def test_delete(self, cards, deck):
        card = cards.create_card(deck.id, "perro", "dog")
        deleted = cards.delete_card(card.id, deck.id)
        assert deleted.id == card.id
        assert cards.get_all_cards(deck.id) == []

    def test_due_cards_ordering(self, cards, deck, t0):
        late = cards.create_card(deck.id, "b", "B", now=t0)
        early = cards.create_card(deck.id, "a", "A", now=t0 - timedelta(days=2))
        cards.create_card(deck.id, "c", "C", now=t0 + timedelta(days=1))
        due = cards.get_due_cards(deck.id, now=t0)
        assert [c.id for c in due] == [early.id, late.id]


def test_timestamps_are_utc_aware(decks, cards, reviews, deck, t0):
    card = cards.create_card(deck.id, "perro", "dog", now=t0)
    reviews.review_card(card.id, "normal", timestamp=t0)

    fetched_deck = decks.get_deck(deck.id)
    fetched_card = cards.get_card(card.id)
    for value in (fetched_deck.created_at, fetched_deck.updated_at,
                  fetched_card.created_at, fetched_card.updated_at):
        assert value.tzinfo is not None
        assert value.utcoffset() == timedelta(0)

    # Review and creation timestamps can be subtracted from each other
    assert isinstance(fetched_card.due_at - fetched_card.created_at, timedelta)
    assert isinstance(fetched_deck.last_reviewed_at - fetched_deck.created_at, timedelta)
