"""Community board model.

A Board holds the 0-5 community cards that are fixed for a calculation.
Simulations forward it to the river by dealing the missing cards from a
trial's shuffled deck; the original board is never modified.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from poker_equity.utils.card import Card, Deck, parse_cards
from poker_equity.utils.constants import STREET_CARD_COUNTS, Street

MAX_BOARD_CARDS = STREET_CARD_COUNTS[Street.RIVER]


@dataclass(frozen=True)
class Board:
    """Shared community cards (0-5)."""

    cards: tuple[Card, ...] = ()

    def __post_init__(self) -> None:
        cards = tuple(self.cards)
        if len(cards) > MAX_BOARD_CARDS:
            raise ValueError(
                f"A board holds at most {MAX_BOARD_CARDS} cards, got {len(cards)}"
            )
        if len(set(cards)) != len(cards):
            raise ValueError(f"Duplicate card on board: {' '.join(map(str, cards))}")
        object.__setattr__(self, "cards", cards)

    @classmethod
    def from_str(cls, s: str) -> Board:
        """Create a Board from a string like 'Kc 7d 2s' (empty for preflop)."""
        return cls(tuple(parse_cards(s)))

    @property
    def street(self) -> Street:
        """The latest street whose community cards are all on the board."""
        reached = Street.PREFLOP
        for street, count in STREET_CARD_COUNTS.items():
            if len(self.cards) >= count:
                reached = street
        return reached

    @property
    def is_complete(self) -> bool:
        return len(self.cards) == MAX_BOARD_CARDS

    def forward(self, deck: Deck, street: Street = Street.RIVER) -> Board:
        """Deal cards from deck until the board reaches the given street.

        Args:
            deck: Shuffled deck with every known card already removed.
            street: Target street (defaults to the river).

        Returns:
            A new Board holding the original cards plus the dealt ones.

        Raises:
            ValueError: If the board is already past the target street.
        """
        missing = STREET_CARD_COUNTS[street] - len(self.cards)
        if missing < 0:
            raise ValueError(
                f"Board {self} already has more cards than the {street.name.lower()}"
            )
        if missing == 0:
            return self
        return Board(self.cards + tuple(deck.deal(missing)))

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __len__(self) -> int:
        return len(self.cards)

    def __str__(self) -> str:
        return " ".join(str(c) for c in self.cards) or "(empty)"
