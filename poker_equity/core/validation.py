"""Up-front feasibility checks for equity calculations.

These run once per calculation, before any trial, and raise
InfeasibleInputError when the participants can never be dealt together.

The range-vs-range check is a heuristic: it only catches a pair of
ranges whose hands all share one card. Ranges that pass it pairwise can
still be impossible to deal together (three ranges over four cards, for
example); the sampler's attempt budget covers that case.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable
from itertools import combinations
from typing import Iterable, Sequence

from poker_equity.core.board import Board
from poker_equity.core.errors import InfeasibleInputError
from poker_equity.core.ranges import Range
from poker_equity.utils.card import Card, Hand

logger = logging.getLogger("poker_equity.core.validation")


def _label(index: int, participant: object) -> str:
    return f"#{index + 1} {participant!r}"


def ensure_unique(participants: Sequence[Hashable]) -> None:
    """Reject a participant listed more than once.

    Results are keyed by participant, so a repeat would silently merge
    two seats into one.
    """
    seen: dict[Hashable, int] = {}
    for i, participant in enumerate(participants):
        if participant in seen:
            raise InfeasibleInputError(
                f"Participant {_label(i, participant)} duplicates "
                f"{_label(seen[participant], participant)}"
            )
        seen[participant] = i


def validate_hands(
    hands: Sequence[Hand],
    board: Board,
    dead_cards: Iterable[Card] = (),
) -> None:
    """Check that fixed hands can be dealt alongside each other and the board.

    Raises:
        InfeasibleInputError: If a hand is repeated, two hands share a
            card, or a hand holds a board or dead card.
    """
    ensure_unique(hands)
    board_cards = frozenset(board.cards)
    dead = frozenset(dead_cards)

    for (i, a), (j, b) in combinations(enumerate(hands), 2):
        if a.shares_card(b):
            shared = " ".join(sorted(map(str, a.cards & b.cards)))
            raise InfeasibleInputError(
                f"Hands {_label(i, a)} and {_label(j, b)} share {shared}"
            )

    for i, hand in enumerate(hands):
        if not hand.cards.isdisjoint(board_cards):
            raise InfeasibleInputError(
                f"Hand {_label(i, hand)} holds a card on the board {board}"
            )
        if not hand.cards.isdisjoint(dead):
            raise InfeasibleInputError(f"Hand {_label(i, hand)} holds a dead card")

    logger.debug("Validated %d fixed hands against board %s", len(hands), board)


def validate_ranges(
    ranges: Sequence[Range],
    board: Board,
    dead_cards: Iterable[Card] = (),
) -> None:
    """Check that ranges can be dealt against each other and the board.

    1. Every range must hold at least one hand.
    2. For each pair of ranges, no single card may appear in every hand
       of both (range-vs-range overlap).
    3. Every range needs a hand that avoids the board and dead cards
       (range-vs-board overlap).

    Raises:
        InfeasibleInputError: Naming the offending range(s).
    """
    ensure_unique(ranges)
    for i, r in enumerate(ranges):
        if not r.all():
            raise InfeasibleInputError(f"Range {_label(i, r)} is empty")

    for (i, a), (j, b) in combinations(enumerate(ranges), 2):
        common = frozenset.intersection(*(h.cards for h in (*a.all(), *b.all())))
        if common:
            shared = " ".join(sorted(map(str, common)))
            raise InfeasibleInputError(
                f"Range-vs-range overlap: every hand in ranges {_label(i, a)} "
                f"and {_label(j, b)} holds {shared}"
            )

    blocked = frozenset(board.cards) | frozenset(dead_cards)
    for i, r in enumerate(ranges):
        if not any(h.cards.isdisjoint(blocked) for h in r.all()):
            raise InfeasibleInputError(
                f"Range-vs-board overlap: every hand in range {_label(i, r)} "
                f"holds a card on the board {board} or a dead card"
            )

    logger.debug("Validated %d ranges against board %s", len(ranges), board)
