"""Per-trial hand sampling for range-vs-range equity."""

from __future__ import annotations

from typing import Iterable, Sequence

import numpy as np

from poker_equity.core.errors import SamplingExhaustedError
from poker_equity.core.ranges import Range
from poker_equity.utils.card import Card, Hand


def sample_hands(
    ranges: Sequence[Range],
    blocked: Iterable[Card],
    rng: np.random.Generator,
    max_attempts: int,
) -> tuple[Hand, ...]:
    """Draw one hand per range so that no two hands share a card.

    Each range draws in turn from its own weighting. A draw that collides
    with a blocked card (board or dead) or an already accepted hand is
    rejected, and the partial assignment is discarded so the next attempt
    starts over from the first range.

    Args:
        ranges: One range per participant.
        blocked: Board and dead cards.
        rng: The trial's random generator.
        max_attempts: Rejections allowed before giving up.

    Returns:
        Hands aligned with ranges.

    Raises:
        SamplingExhaustedError: If max_attempts draws were rejected.
    """
    blocked = frozenset(blocked)
    rejected = 0
    while True:
        used = set(blocked)
        chosen: list[Hand] = []
        for r in ranges:
            hand = r.sample(rng)
            if not used.isdisjoint(hand.cards):
                break
            used.update(hand.cards)
            chosen.append(hand)
        else:
            return tuple(chosen)

        rejected += 1
        if rejected >= max_attempts:
            raise SamplingExhaustedError(
                f"No card-disjoint deal found after {rejected} attempts for ranges "
                f"{', '.join(repr(r) for r in ranges)}; the ranges may be impossible "
                f"to deal together"
            )
