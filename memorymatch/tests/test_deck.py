"""
Tests for deck construction and integrity checks.
"""

from collections import Counter

import pytest

from ..engine_core.deck import ImageRef, create_cards, create_deck, validate_deck
from ..engine_core.errors import DeckIntegrityError
from ..engine_core.state import Card


class TestCreateDeck:
    """Tests for building unshuffled decks."""

    @pytest.mark.parametrize("pairs", range(2, 13))
    def test_two_cards_per_image(self, pairs):
        """Every image id appears exactly twice."""
        cards = create_cards(pairs)

        assert len(cards) == 2 * pairs
        counts = Counter(c.image_id for c in cards)
        assert set(counts) == set(range(1, pairs + 1))
        assert all(n == 2 for n in counts.values())

    def test_card_ids_follow_image_order(self):
        """The k-th image gets card ids 2k-1 and 2k."""
        cards = create_deck([ImageRef(7), ImageRef(3), ImageRef(9)])

        assert [(c.id, c.image_id) for c in cards] == [
            (1, 7), (2, 7),
            (3, 3), (4, 3),
            (5, 9), (6, 9),
        ]

    def test_accepts_bare_ids(self):
        cards = create_deck([10, 20])
        assert [c.image_id for c in cards] == [10, 10, 20, 20]

    def test_cards_start_face_down(self):
        """New cards are neither revealed nor matched."""
        for card in create_cards(4):
            assert not card.is_revealed
            assert not card.is_matched

    def test_empty_input(self):
        assert create_deck([]) == []


class TestValidateDeck:
    """Tests for validate_deck()."""

    def test_valid_deck_passes(self):
        validate_deck(create_cards(6))

    def test_missing_partner(self):
        """An image with one card is rejected."""
        cards = create_cards(2)[:-1]
        with pytest.raises(DeckIntegrityError):
            validate_deck(cards)

    def test_duplicate_card_ids(self):
        cards = [Card(id=1, image_id=1), Card(id=1, image_id=1)]
        with pytest.raises(DeckIntegrityError):
            validate_deck(cards)

    def test_hidden_match_rejected(self):
        """Matched cards must be face-up."""
        cards = [
            Card(id=1, image_id=1, is_revealed=False, is_matched=True),
            Card(id=2, image_id=1, is_revealed=True, is_matched=True),
        ]
        with pytest.raises(DeckIntegrityError):
            validate_deck(cards)
