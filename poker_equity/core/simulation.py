"""Monte Carlo trials: deal a river, rank every hand, score the showdown.

run_batch() is the unit of parallel work. It owns its random generator,
its decks and its counts, and only plain picklable values cross the
process boundary.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from poker_equity.core.config import CalculationConfig
from poker_equity.core.equity import EquityTally, Outcome
from poker_equity.core.ranges import Range
from poker_equity.core.sampler import sample_hands
from poker_equity.utils.card import Deck, Hand
from poker_equity.utils.constants import Street


def classify(ranks: Sequence[int]) -> tuple[Outcome, ...]:
    """Turn showdown ranks (lower is stronger) into per-hand outcomes.

    A single best rank wins and everyone else loses. When several hands
    share the best rank they all split and everyone else loses.
    """
    best = min(ranks)
    winners = sum(1 for r in ranks if r == best)
    top = Outcome.WIN if winners == 1 else Outcome.SPLIT
    return tuple(top if r == best else Outcome.LOSE for r in ranks)


def simulate_trial(
    hands: Sequence[Hand],
    config: CalculationConfig,
    rng: np.random.Generator,
) -> tuple[Outcome, ...]:
    """Run one trial for hands that are already card-disjoint.

    Args:
        hands: The participants' hands for this trial.
        config: Board, dead cards and evaluator to use.
        rng: Generator used to shuffle this trial's deck.

    Returns:
        One Outcome per hand, in the same order.
    """
    deck = Deck(rng)
    for hand in hands:
        deck.pop_hand(hand)
    for card in config.dead_cards:
        deck.pop(card)
    for card in config.board:
        deck.pop(card)

    river = config.board.forward(deck, Street.RIVER)
    ranks = [config.evaluator.rank(hand, river) for hand in hands]
    return classify(ranks)


def run_batch(
    participants: Sequence[Hand] | Sequence[Range],
    config: CalculationConfig,
    seed: np.random.SeedSequence,
    trials: int,
) -> np.ndarray:
    """Run a block of trials and return their outcome counts.

    Range participants get a fresh card-disjoint hand per trial from the
    sampler; fixed hands are used as they are.

    Returns:
        Counts of shape (participants, 3), columns ordered as Outcome.
    """
    rng = np.random.default_rng(seed)
    tally = EquityTally(len(participants))

    if isinstance(participants[0], Range):
        blocked = config.blocked_cards
        ranges = [r.without_cards(blocked) for r in participants]
        for _ in range(trials):
            hands = sample_hands(ranges, blocked, rng, config.max_sampling_attempts)
            tally.record(simulate_trial(hands, config, rng))
    else:
        for _ in range(trials):
            tally.record(simulate_trial(participants, config, rng))

    return tally.counts
