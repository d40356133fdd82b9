"""Card, Hand and Deck classes for equity simulations."""

from __future__ import annotations

from dataclasses import dataclass
from functools import total_ordering
from typing import Iterator

import numpy as np

from poker_equity.utils.constants import RANK_VALUES, SUIT_ORDER, Rank, Suit


@total_ordering
@dataclass(frozen=True)
class Card:
    """Represents a single playing card."""

    rank: Rank
    suit: Suit

    @classmethod
    def from_str(cls, s: str) -> Card:
        """Create a Card from a 2-character string like 'Ah' or 'Td'.

        Args:
            s: A 2-character string where the first char is the rank
               and the second is the suit.

        Returns:
            A new Card instance.

        Raises:
            ValueError: If the string is not exactly 2 characters or
                       contains invalid rank/suit characters.
        """
        if len(s) != 2:
            raise ValueError(f"Card string must be 2 characters, got '{s}'")
        try:
            rank = Rank(s[0].upper())
        except ValueError:
            raise ValueError(f"Invalid rank character: '{s[0]}'")
        try:
            suit = Suit(s[1].lower())
        except ValueError:
            raise ValueError(f"Invalid suit character: '{s[1]}'")
        return cls(rank=rank, suit=suit)

    @property
    def value(self) -> int:
        """Numeric value of the card's rank (2-14)."""
        return RANK_VALUES[self.rank]

    @property
    def sort_key(self) -> tuple[int, int]:
        """Rank first, then suit; gives every card a distinct position."""
        return self.value, SUIT_ORDER[self.suit]

    def __str__(self) -> str:
        return f"{self.rank.value}{self.suit.value}"

    def __repr__(self) -> str:
        return f"Card('{self}')"

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Card):
            return NotImplemented
        return self.sort_key < other.sort_key


def parse_cards(s: str) -> list[Card]:
    """Parse cards written as 'Ah Kd' or packed as 'AhKd'."""
    packed = "".join(s.replace(",", " ").split())
    if len(packed) % 2:
        raise ValueError(f"Invalid card string: '{s}' (odd length)")
    return [Card.from_str(packed[i:i + 2]) for i in range(0, len(packed), 2)]


_FULL_DECK: tuple[Card, ...] = tuple(Card(rank=r, suit=s) for s in Suit for r in Rank)


def full_deck() -> list[Card]:
    """Return all 52 cards in a fixed order."""
    return list(_FULL_DECK)


@dataclass(frozen=True)
class Hand:
    """Two specific hole cards (e.g. AhKh).

    The higher card is always stored first so that AhKh and KhAh
    compare and hash equal.
    """

    card1: Card
    card2: Card

    def __post_init__(self) -> None:
        if self.card1 == self.card2:
            raise ValueError(f"A hand needs two different cards, got {self.card1} twice")
        if self.card1 < self.card2:
            high, low = self.card2, self.card1
            object.__setattr__(self, "card1", high)
            object.__setattr__(self, "card2", low)

    @classmethod
    def from_str(cls, s: str) -> Hand:
        """Create a Hand from a string like 'AhKh' or 'Ah Kh'."""
        cards = parse_cards(s)
        if len(cards) != 2:
            raise ValueError(f"Need exactly 2 cards for a hand, got {len(cards)} in '{s}'")
        return cls(cards[0], cards[1])

    @property
    def cards(self) -> frozenset[Card]:
        return frozenset((self.card1, self.card2))

    def shares_card(self, other: Hand) -> bool:
        """Whether the two hands have at least one card in common."""
        return not self.cards.isdisjoint(other.cards)

    def __iter__(self) -> Iterator[Card]:
        yield self.card1
        yield self.card2

    def __str__(self) -> str:
        return f"{self.card1}{self.card2}"

    def __repr__(self) -> str:
        return f"Hand('{self}')"


class Deck:
    """Standard 52-card deck, shuffled from a caller-owned generator.

    A deck belongs to exactly one simulated trial. Known cards are popped
    out of it before the remaining cards are dealt to the board.
    """

    def __init__(self, rng: np.random.Generator | None = None) -> None:
        self._cards: list[Card] = full_deck()
        if rng is not None:
            self.shuffle(rng)

    def shuffle(self, rng: np.random.Generator) -> Deck:
        """Shuffle the remaining cards in the deck. Returns self for chaining."""
        order = rng.permutation(len(self._cards))
        self._cards = [self._cards[i] for i in order]
        return self

    def pop(self, card: Card) -> Card:
        """Remove a specific card from the deck.

        Raises:
            ValueError: If the card is not in the deck.
        """
        try:
            self._cards.remove(card)
        except ValueError:
            raise ValueError(f"Card {card} not in deck") from None
        return card

    def pop_hand(self, hand: Hand) -> None:
        """Remove both cards of a hand from the deck."""
        for card in hand:
            self.pop(card)

    def deal(self, n: int = 1) -> list[Card]:
        """Deal n cards from the top of the deck.

        Args:
            n: Number of cards to deal.

        Returns:
            List of dealt cards.

        Raises:
            ValueError: If not enough cards remain.
        """
        if n > len(self._cards):
            raise ValueError(
                f"Cannot deal {n} cards, only {len(self._cards)} remaining"
            )
        dealt = self._cards[:n]
        self._cards = self._cards[n:]
        return dealt

    @property
    def remaining(self) -> int:
        """Number of cards remaining in the deck."""
        return len(self._cards)

    @property
    def cards(self) -> tuple[Card, ...]:
        return tuple(self._cards)

    def __contains__(self, card: object) -> bool:
        return card in self._cards

    def __len__(self) -> int:
        return len(self._cards)
