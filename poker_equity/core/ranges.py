"""Weighted hand ranges.

Hand notation:
  - "AA"   → pocket pair (all suit combos)
  - "AKs"  → suited (4 combos)
  - "AKo"  → offsuit (12 combos)
  - "AK"   → both suited and offsuit (16 combos)
  - "JJ+"  → JJ, QQ, KK, AA
  - "ATs+" → ATs, AJs, AQs, AKs
  - "A5s-A2s" → A5s, A4s, A3s, A2s
  - "AsKs" → one specific hand

Every hand in a range carries a positive weight. Sampling draws a hand
with probability proportional to its weight.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from functools import cached_property
from itertools import combinations
from typing import Iterable

import numpy as np

from poker_equity.utils.card import Card, Hand
from poker_equity.utils.constants import Rank, Suit

# Ranks ordered high to low for range expansion
_RANKS_DESCENDING: list[Rank] = [
    Rank.ACE, Rank.KING, Rank.QUEEN, Rank.JACK, Rank.TEN,
    Rank.NINE, Rank.EIGHT, Rank.SEVEN, Rank.SIX, Rank.FIVE,
    Rank.FOUR, Rank.THREE, Rank.TWO,
]

_RANK_INDEX: dict[Rank, int] = {r: i for i, r in enumerate(_RANKS_DESCENDING)}

_SUIT_CHARS = frozenset(s.value for s in Suit)


class HandType(StrEnum):
    PAIR = "pair"
    SUITED = "suited"
    OFFSUIT = "offsuit"


@dataclass(frozen=True)
class HandNotation:
    """A hand in standard poker notation (e.g. AKs, JJ, T9o)."""

    rank1: Rank
    rank2: Rank
    hand_type: HandType

    @classmethod
    def from_str(cls, s: str) -> HandNotation:
        """Parse notation like 'AKs', 'JJ', 'T9o'.

        Raises:
            ValueError: If notation is invalid.
        """
        if len(s) < 2 or len(s) > 3:
            raise ValueError(f"Invalid hand notation: '{s}'")

        r1 = Rank(s[0])
        r2 = Rank(s[1])

        if r1 == r2:
            if len(s) == 3:
                raise ValueError(f"Pairs take no suit indicator: '{s}'")
            return cls(rank1=r1, rank2=r2, hand_type=HandType.PAIR)

        # Ensure rank1 is the higher rank
        if _RANK_INDEX[r1] > _RANK_INDEX[r2]:
            r1, r2 = r2, r1

        if len(s) == 3:
            if s[2] == "s":
                return cls(rank1=r1, rank2=r2, hand_type=HandType.SUITED)
            elif s[2] == "o":
                return cls(rank1=r1, rank2=r2, hand_type=HandType.OFFSUIT)
            else:
                raise ValueError(f"Invalid suit indicator: '{s[2]}'")

        # 2-char non-pair is expanded to suited + offsuit by expand_notation
        return cls(rank1=r1, rank2=r2, hand_type=HandType.OFFSUIT)

    def to_hands(self) -> list[Hand]:
        """Expand this notation into all specific card combinations."""
        suits = list(Suit)

        if self.hand_type == HandType.PAIR:
            return [
                Hand(Card(self.rank1, s1), Card(self.rank2, s2))
                for s1, s2 in combinations(suits, 2)
            ]

        if self.hand_type == HandType.SUITED:
            return [Hand(Card(self.rank1, s), Card(self.rank2, s)) for s in suits]

        return [
            Hand(Card(self.rank1, s1), Card(self.rank2, s2))
            for s1 in suits
            for s2 in suits
            if s1 != s2
        ]

    def __str__(self) -> str:
        r = f"{self.rank1.value}{self.rank2.value}"
        if self.hand_type == HandType.PAIR:
            return r
        if self.hand_type == HandType.SUITED:
            return r + "s"
        return r + "o"


def expand_notation(notation: str) -> list[HandNotation]:
    """Expand range notation into a list of HandNotation objects.

    Supports:
      - Single hands: "AKs", "JJ", "T9o"
      - Plus notation: "JJ+" → JJ,QQ,KK,AA
      - Plus on non-pairs: "ATs+" → ATs,AJs,AQs,AKs
      - Dash ranges: "JJ-88" → JJ,TT,99,88
      - Dash on non-pairs: "A5s-A2s" → A5s,A4s,A3s,A2s
    """
    notation = notation.strip()

    if "-" in notation:
        parts = notation.split("-")
        if len(parts) != 2:
            raise ValueError(f"Invalid range notation: '{notation}'")
        return _expand_dash_range(parts[0].strip(), parts[1].strip())

    if notation.endswith("+"):
        return _expand_plus(notation[:-1])

    if len(notation) < 2:
        raise ValueError(f"Invalid hand notation: '{notation}'")

    r1 = Rank(notation[0])
    r2 = Rank(notation[1])

    if len(notation) == 2 and r1 != r2:
        # "AK" means both AKs and AKo
        if _RANK_INDEX[r1] > _RANK_INDEX[r2]:
            r1, r2 = r2, r1
        return [
            HandNotation(r1, r2, HandType.SUITED),
            HandNotation(r1, r2, HandType.OFFSUIT),
        ]

    return [HandNotation.from_str(notation)]


def _expand_plus(base: str) -> list[HandNotation]:
    """Expand 'JJ+' or 'ATs+' style notation."""
    hand = HandNotation.from_str(base)

    if hand.hand_type == HandType.PAIR:
        idx = _RANK_INDEX[hand.rank1]
        return [
            HandNotation(_RANKS_DESCENDING[i], _RANKS_DESCENDING[i], HandType.PAIR)
            for i in range(idx + 1)
        ]

    # ATs+ → ATs, AJs, AQs, AKs (gap narrows toward rank1)
    high = hand.rank1
    low_idx = _RANK_INDEX[hand.rank2]
    high_idx = _RANK_INDEX[high]
    return [
        HandNotation(high, _RANKS_DESCENDING[i], hand.hand_type)
        for i in range(high_idx + 1, low_idx + 1)
    ]


def _expand_dash_range(start: str, end: str) -> list[HandNotation]:
    """Expand 'JJ-88' or 'A5s-A2s' style notation."""
    h_start = HandNotation.from_str(start)
    h_end = HandNotation.from_str(end)

    if h_start.hand_type == HandType.PAIR and h_end.hand_type == HandType.PAIR:
        lo, hi = sorted([_RANK_INDEX[h_start.rank1], _RANK_INDEX[h_end.rank1]])
        return [
            HandNotation(_RANKS_DESCENDING[i], _RANKS_DESCENDING[i], HandType.PAIR)
            for i in range(lo, hi + 1)
        ]

    if h_start.rank1 != h_end.rank1:
        raise ValueError(
            f"Non-pair dash ranges must share the high card: '{start}-{end}'"
        )
    if h_start.hand_type != h_end.hand_type:
        raise ValueError(
            f"Dash range endpoints must have same type (s/o): '{start}-{end}'"
        )

    lo, hi = sorted([_RANK_INDEX[h_start.rank2], _RANK_INDEX[h_end.rank2]])
    return [
        HandNotation(h_start.rank1, _RANKS_DESCENDING[i], h_start.hand_type)
        for i in range(lo, hi + 1)
    ]


def _is_specific_hand(part: str) -> bool:
    return len(part) == 4 and part[1] in _SUIT_CHARS and part[3] in _SUIT_CHARS


def _expand_part(part: str) -> list[Hand]:
    if _is_specific_hand(part):
        return [Hand.from_str(part)]
    hands: list[Hand] = []
    for notation in expand_notation(part):
        hands.extend(notation.to_hands())
    return hands


def _hand_key(hand: Hand) -> tuple[tuple[int, int], tuple[int, int]]:
    return hand.card1.sort_key, hand.card2.sort_key


@dataclass(frozen=True)
class Range:
    """An immutable, weighted collection of specific hands.

    Ranges are built by chaining add()/remove(), each of which returns a
    new Range:

        Range().add("JJ+,AKs").add("AQs", weight=0.5)

    Entries are kept sorted, so two ranges holding the same hands with
    the same weights compare and hash equal.
    """

    entries: tuple[tuple[Hand, float], ...] = ()

    @classmethod
    def parse(cls, notation: str, weight: float = 1.0) -> Range:
        """Build a Range from a comma-separated notation string."""
        return cls().add(notation, weight)

    @classmethod
    def of(cls, *hands: Hand, weight: float = 1.0) -> Range:
        """Build a Range from specific hands."""
        return cls().with_hands(hands, weight)

    def add(self, notation: str, weight: float = 1.0) -> Range:
        """Add hands using range notation, replacing existing weights.

        Args:
            notation: Comma-separated range notation.
                Examples: "AA,KK", "ATs+", "JJ-88", "AsKs,AhKh"
            weight: Relative sampling weight for the added hands.
        """
        hands: list[Hand] = []
        for part in notation.split(","):
            part = part.strip()
            if part:
                hands.extend(_expand_part(part))
        return self.with_hands(hands, weight)

    def with_hands(self, hands: Iterable[Hand], weight: float = 1.0) -> Range:
        """Return a copy of this range with the given hands set to weight."""
        if not weight > 0:
            raise ValueError(f"Range weights must be positive, got {weight}")
        merged = dict(self.entries)
        for hand in hands:
            merged[hand] = float(weight)
        return Range._from_mapping(merged)

    def remove(self, notation: str) -> Range:
        """Remove hands using range notation."""
        removed: set[Hand] = set()
        for part in notation.split(","):
            part = part.strip()
            if part:
                removed.update(_expand_part(part))
        return Range._from_mapping(
            {h: w for h, w in self.entries if h not in removed}
        )

    def without_cards(self, cards: Iterable[Card]) -> Range:
        """Drop every hand that holds one of the given cards."""
        blocked = frozenset(cards)
        return Range._from_mapping(
            {h: w for h, w in self.entries if h.cards.isdisjoint(blocked)}
        )

    @staticmethod
    def _from_mapping(weights: dict[Hand, float]) -> Range:
        return Range(tuple(sorted(weights.items(), key=lambda kv: _hand_key(kv[0]), reverse=True)))

    def all(self) -> tuple[Hand, ...]:
        """Every hand this range can produce."""
        return tuple(h for h, _ in self.entries)

    def weight(self, hand: Hand) -> float:
        """Weight of a hand in this range (0.0 when absent)."""
        return dict(self.entries).get(hand, 0.0)

    @cached_property
    def _cumulative_weights(self) -> np.ndarray:
        return np.cumsum([w for _, w in self.entries])

    def sample(self, rng: np.random.Generator) -> Hand:
        """Draw one hand, respecting the range's weighting.

        Raises:
            ValueError: If the range is empty.
        """
        if not self.entries:
            raise ValueError("Cannot sample from an empty range")
        cumulative = self._cumulative_weights
        idx = int(np.searchsorted(cumulative, rng.random() * cumulative[-1], side="right"))
        return self.entries[min(idx, len(self.entries) - 1)][0]

    @property
    def combo_count(self) -> int:
        """Total number of specific card combinations in this range."""
        return len(self.entries)

    def __contains__(self, item: object) -> bool:
        return isinstance(item, Hand) and any(h == item for h, _ in self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __str__(self) -> str:
        return ",".join(
            str(h) if w == 1.0 else f"{h}:{w:g}" for h, w in self.entries
        )

    def __repr__(self) -> str:
        preview = ",".join(str(h) for h in self.all()[:4])
        more = "..." if len(self.entries) > 4 else ""
        return f"Range({preview}{more} [{self.combo_count} combos])"
