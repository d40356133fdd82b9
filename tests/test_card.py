"""Tests for cards, hands and the deck."""

import numpy as np
import pytest

from poker_equity.utils.card import Card, Deck, Hand, full_deck, parse_cards
from poker_equity.utils.constants import Rank, Suit


class TestCard:
    def test_from_str(self) -> None:
        card = Card.from_str("Td")
        assert card.rank == Rank.TEN
        assert card.suit == Suit.DIAMONDS
        assert str(card) == "Td"

    def test_invalid_length(self) -> None:
        with pytest.raises(ValueError, match="2 characters"):
            Card.from_str("10h")

    def test_invalid_rank(self) -> None:
        with pytest.raises(ValueError, match="Invalid rank"):
            Card.from_str("Xh")

    def test_invalid_suit(self) -> None:
        with pytest.raises(ValueError, match="Invalid suit"):
            Card.from_str("Ax")

    def test_ordering_is_total(self) -> None:
        assert Card.from_str("Ah") != Card.from_str("As")
        assert sorted([Card.from_str("As"), Card.from_str("Ah")])[0] == Card.from_str("Ah")
        assert Card.from_str("2c") < Card.from_str("3h")

    def test_parse_cards(self) -> None:
        assert parse_cards("Ah Kd") == parse_cards("AhKd")
        with pytest.raises(ValueError, match="odd length"):
            parse_cards("AhK")

    def test_full_deck(self) -> None:
        deck = full_deck()
        assert len(deck) == 52
        assert len(set(deck)) == 52


class TestHand:
    def test_order_independent(self) -> None:
        assert Hand.from_str("AhKh") == Hand.from_str("KhAh")
        assert hash(Hand.from_str("AhKh")) == hash(Hand.from_str("Kh Ah"))
        assert str(Hand.from_str("KhAh")) == "AhKh"

    def test_same_card_twice_raises(self) -> None:
        with pytest.raises(ValueError, match="two different cards"):
            Hand.from_str("AhAh")

    def test_needs_two_cards(self) -> None:
        with pytest.raises(ValueError, match="exactly 2 cards"):
            Hand.from_str("AhKhQh")

    def test_shares_card(self) -> None:
        assert Hand.from_str("AhKh").shares_card(Hand.from_str("AhQd"))
        assert not Hand.from_str("AhKh").shares_card(Hand.from_str("AsKs"))


class TestDeck:
    def test_new_deck_has_52_cards(self) -> None:
        assert Deck().remaining == 52

    def test_shuffle_is_reproducible(self) -> None:
        a = Deck(np.random.default_rng(7))
        b = Deck(np.random.default_rng(7))
        assert a.cards == b.cards
        assert a.cards != Deck().cards

    def test_pop_and_pop_hand(self) -> None:
        deck = Deck(np.random.default_rng(1))
        deck.pop(Card.from_str("2c"))
        deck.pop_hand(Hand.from_str("AhKh"))
        assert deck.remaining == 49
        assert Card.from_str("Ah") not in deck

    def test_pop_missing_card_raises(self) -> None:
        deck = Deck()
        deck.pop(Card.from_str("2c"))
        with pytest.raises(ValueError, match="not in deck"):
            deck.pop(Card.from_str("2c"))

    def test_deal(self) -> None:
        deck = Deck(np.random.default_rng(3))
        top = deck.cards[:5]
        assert tuple(deck.deal(5)) == top
        assert deck.remaining == 47

    def test_deal_too_many_raises(self) -> None:
        with pytest.raises(ValueError, match="Cannot deal"):
            Deck().deal(53)
