"""Texas Hold'em hand evaluation engine.

HandEvaluator scores the best 5-card hand from 5-7 cards. The equity
engine consumes evaluators through the Evaluator protocol, which returns
a single integer per hand where numerically smaller means stronger.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Protocol, runtime_checkable

from poker_equity.utils.card import Card, Hand
from poker_equity.utils.constants import HandRanking

if TYPE_CHECKING:
    from poker_equity.core.board import Board

# Each tie-break value fits in 4 bits (2-14), so a ranking plus five
# values packs into 6 hex digits.
_VALUE_BASE = 16
_TIEBREAK_SLOTS = 5
_SCORE_CEILING = _VALUE_BASE ** (_TIEBREAK_SLOTS + 1)


@dataclass(frozen=True, order=True)
class HandResult:
    """Result of evaluating a poker hand.

    Results compare by ranking first, then by the tie-break values in
    order. Higher results are stronger hands; equal results split.
    """

    ranking: HandRanking
    values: tuple[int, ...]

    @property
    def score(self) -> int:
        """Pack ranking and tie-break values into one comparable integer."""
        score = int(self.ranking)
        for i in range(_TIEBREAK_SLOTS):
            score = score * _VALUE_BASE + (self.values[i] if i < len(self.values) else 0)
        return score

    def __str__(self) -> str:
        return f"{self.ranking.name} {self.values}"


class HandEvaluator:
    """Evaluates poker hands and determines the best 5-card combination."""

    @staticmethod
    def evaluate(cards: Iterable[Card]) -> HandResult:
        """Evaluate the best 5-card hand from a list of cards.

        Args:
            cards: 5 to 7 cards (hole cards + community cards).

        Returns:
            HandResult with the best hand ranking and its tie-break values.

        Raises:
            ValueError: If fewer than 5 cards are provided.
        """
        cards = list(cards)
        if len(cards) < 5:
            raise ValueError(f"Need at least 5 cards, got {len(cards)}")

        values = sorted((c.value for c in cards), reverse=True)

        suit_counts = Counter(c.suit for c in cards)
        flush_suit, flush_count = suit_counts.most_common(1)[0]
        flush_values: list[int] = []
        if flush_count >= 5:
            flush_values = sorted(
                (c.value for c in cards if c.suit == flush_suit), reverse=True
            )
            straight_flush_high = HandEvaluator._straight_high(flush_values)
            if straight_flush_high == 14:
                return HandResult(HandRanking.ROYAL_FLUSH, (14,))
            if straight_flush_high is not None:
                return HandResult(HandRanking.STRAIGHT_FLUSH, (straight_flush_high,))

        rank_counts = Counter(values)
        # Largest groups first, higher rank breaks ties between equal groups
        groups = sorted(rank_counts.items(), key=lambda kv: (kv[1], kv[0]), reverse=True)
        top_value, top_count = groups[0]

        if top_count == 4:
            kicker = max(v for v in values if v != top_value)
            return HandResult(HandRanking.FOUR_OF_A_KIND, (top_value, kicker))

        if top_count == 3:
            pairs = [v for v, c in groups[1:] if c >= 2]
            if pairs:
                return HandResult(HandRanking.FULL_HOUSE, (top_value, max(pairs)))

        if flush_values:
            return HandResult(HandRanking.FLUSH, tuple(flush_values[:5]))

        straight_high = HandEvaluator._straight_high(values)
        if straight_high is not None:
            return HandResult(HandRanking.STRAIGHT, (straight_high,))

        if top_count == 3:
            kickers = [v for v in values if v != top_value][:2]
            return HandResult(HandRanking.THREE_OF_A_KIND, (top_value, *kickers))

        pairs = [v for v, c in groups if c == 2]
        if len(pairs) >= 2:
            high_pair, low_pair = pairs[0], pairs[1]
            kicker = max(v for v in values if v not in (high_pair, low_pair))
            return HandResult(HandRanking.TWO_PAIR, (high_pair, low_pair, kicker))

        if pairs:
            kickers = [v for v in values if v != pairs[0]][:3]
            return HandResult(HandRanking.ONE_PAIR, (pairs[0], *kickers))

        return HandResult(HandRanking.HIGH_CARD, tuple(values[:5]))

    @staticmethod
    def _straight_high(values: list[int]) -> int | None:
        """Return the high card value of the best straight, or None.

        Handles the A-2-3-4-5 (wheel) straight as a special case.
        """
        distinct = set(values)
        for high in range(14, 5, -1):
            if all(high - i in distinct for i in range(5)):
                return high

        # Wheel: A-2-3-4-5
        if {14, 5, 4, 3, 2} <= distinct:
            return 5

        return None


@runtime_checkable
class Evaluator(Protocol):
    """Interface that any hand-strength evaluator must implement.

    rank() must impose a strict total order on hands for a given board:
    numerically smaller is stronger and equal ranks are exact ties.

    Evaluators that cannot be pickled (local classes, closures) still
    work, but their calculations run in the calling process.
    """

    def rank(self, hand: Hand, board: Board) -> int:
        ...


class DefaultEvaluator:
    """Evaluator backed by HandEvaluator."""

    def rank(self, hand: Hand, board: Board) -> int:
        result = HandEvaluator.evaluate([*hand, *board])
        return _SCORE_CEILING - result.score

    def __repr__(self) -> str:
        return "DefaultEvaluator()"
