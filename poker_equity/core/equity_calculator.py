"""Monte Carlo equity calculator for Texas Hold'em.

Calculates how often each of several hands, or each of several ranges,
wins, loses or splits by the river, by running simulated runouts of the
remaining community cards.

Trials are split into fixed-size batches that run across worker
processes. Each batch draws from its own child of one master
SeedSequence, so identical inputs give identical results no matter how
many workers run them.
"""

from __future__ import annotations

import hashlib
import logging
import pickle
import time
from concurrent.futures import ProcessPoolExecutor
from typing import Sequence, TypeVar

import numpy as np

from poker_equity.core.board import Board
from poker_equity.core.config import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_EVALUATOR,
    DEFAULT_MAX_SAMPLING_ATTEMPTS,
    DEFAULT_SAMPLE_SIZE,
    CalculationConfig,
)
from poker_equity.core.equity import Equity, EquityTally
from poker_equity.core.hand_evaluator import Evaluator
from poker_equity.core.ranges import Range
from poker_equity.core.simulation import run_batch
from poker_equity.core.validation import validate_hands, validate_ranges
from poker_equity.utils.card import Card, Hand

logger = logging.getLogger("poker_equity.core.equity")

P = TypeVar("P", Hand, Range)


def derive_seed(
    participants: Sequence[Hand] | Sequence[Range],
    config: CalculationConfig,
) -> int:
    """Stable 64-bit seed from the participants, in order, plus the board
    and dead cards.

    Uses BLAKE2 rather than hash(), which is salted per process.
    """
    parts = [str(p) for p in participants]
    parts.append(str(config.board))
    parts.append(" ".join(sorted(str(c) for c in config.dead_cards)))
    digest = hashlib.blake2b("|".join(parts).encode(), digest_size=8).digest()
    return int.from_bytes(digest, "big")


def is_picklable(config: CalculationConfig) -> bool:
    """Whether config can be sent to a worker process."""
    try:
        pickle.dumps(config)
    except (pickle.PicklingError, AttributeError, TypeError):
        return False
    return True


def plan_batches(sample_size: int, batch_size: int) -> list[int]:
    """Split sample_size trials into batches of at most batch_size."""
    full, rest = divmod(sample_size, batch_size)
    return [batch_size] * full + ([rest] if rest else [])


class EquityCalculator:
    """Monte Carlo equity calculator."""

    def __init__(self, config: CalculationConfig | None = None) -> None:
        self.config = config or CalculationConfig()

    def calculate(
        self, *participants: Hand | Range
    ) -> dict[Hand, Equity] | dict[Range, Equity]:
        """Calculate equity for all hands or all ranges.

        Raises:
            ValueError: If no participants are given.
            TypeError: If hands and ranges are mixed, or a participant is
                neither.
        """
        if not participants:
            raise ValueError("Need at least one hand or range")
        if all(isinstance(p, Hand) for p in participants):
            return self.calculate_hands(*participants)
        if all(isinstance(p, Range) for p in participants):
            return self.calculate_ranges(*participants)
        kinds = sorted({type(p).__name__ for p in participants})
        raise TypeError(
            f"Participants must be all Hand or all Range, got {', '.join(kinds)}"
        )

    def calculate_hands(self, *hands: Hand) -> dict[Hand, Equity]:
        """Calculate equity of fixed hands against each other.

        Args:
            hands: Two-card hands, at least one.

        Returns:
            Each hand mapped to its Equity.

        Raises:
            InfeasibleInputError: If hands repeat, share cards, or hold a
                board or dead card.
        """
        if not hands:
            raise ValueError("Need at least one hand")
        validate_hands(hands, self.config.board, self.config.dead_cards)
        return self._run(hands)

    def calculate_ranges(self, *ranges: Range) -> dict[Range, Equity]:
        """Calculate equity of ranges against each other.

        For each trial one hand is drawn from every range (no two sharing
        a card, none holding a board or dead card), then a random board
        runout is generated.

        Args:
            ranges: Weighted ranges, at least one.

        Returns:
            Each range mapped to its Equity.

        Raises:
            InfeasibleInputError: If the ranges fail validation.
            SamplingExhaustedError: If a trial finds no disjoint deal.
        """
        if not ranges:
            raise ValueError("Need at least one range")
        validate_ranges(ranges, self.config.board, self.config.dead_cards)
        return self._run(ranges)

    def _run(self, participants: Sequence[P]) -> dict[P, Equity]:
        config = self.config
        seed = config.seed
        if seed is None:
            seed = derive_seed(participants, config)
        batches = plan_batches(config.sample_size, config.batch_size)
        streams = np.random.SeedSequence(seed).spawn(len(batches))
        workers = min(config.workers, len(batches))
        if workers > 1 and not is_picklable(config):
            logger.warning(
                "Evaluator %r cannot be sent to worker processes; "
                "running %d batches inline",
                config.evaluator, len(batches),
            )
            workers = 1

        logger.info(
            "Equity calculation: %d participants, %d samples, board %s, "
            "%d dead cards, %d batches on %d worker(s), seed %d",
            len(participants), config.sample_size, config.board,
            len(config.dead_cards), len(batches), workers, seed,
        )
        start = time.perf_counter()

        tally = EquityTally(len(participants))
        if workers <= 1:
            for stream, trials in zip(streams, batches):
                tally.merge(run_batch(participants, config, stream, trials))
        else:
            with ProcessPoolExecutor(max_workers=workers) as executor:
                futures = [
                    executor.submit(run_batch, participants, config, stream, trials)
                    for stream, trials in zip(streams, batches)
                ]
                for future in futures:
                    tally.merge(future.result())

        equities = tally.finalize(config.sample_size)
        logger.info(
            "Equity calculation finished in %.2fs", time.perf_counter() - start
        )
        return dict(zip(participants, equities))


class EquityCalculationBuilder:
    """Fluent builder for CalculationConfig.

    Each use_* method returns the builder for chaining. build() produces
    an immutable config; calculate() is a shortcut that builds one and
    runs an EquityCalculator with it.

        equities = (
            EquityCalculationBuilder()
            .use_board(Board.from_str("Kc 7d 2s"))
            .use_sample_size(10_000)
            .calculate(Hand.from_str("AhAd"), Hand.from_str("KsQs"))
        )
    """

    def __init__(self) -> None:
        self._sample_size = DEFAULT_SAMPLE_SIZE
        self._evaluator: Evaluator = DEFAULT_EVALUATOR
        self._board = Board()
        self._dead: list[Card] = []
        self._max_workers: int | None = None
        self._batch_size = DEFAULT_BATCH_SIZE
        self._max_sampling_attempts = DEFAULT_MAX_SAMPLING_ATTEMPTS
        self._seed: int | None = None

    def use_sample_size(self, sample_size: int) -> EquityCalculationBuilder:
        """Set the number of trials to simulate."""
        self._sample_size = sample_size
        return self

    def use_evaluator(self, evaluator: Evaluator) -> EquityCalculationBuilder:
        """Set the evaluator used to rank hands at showdown."""
        self._evaluator = evaluator
        return self

    def use_dead_cards(self, *cards: Card) -> EquityCalculationBuilder:
        """Remove cards from the deck. Repeated calls add to the dead cards."""
        self._dead.extend(cards)
        return self

    def use_board(self, board: Board) -> EquityCalculationBuilder:
        """Set the fixed community cards."""
        self._board = board
        return self

    def use_max_workers(self, max_workers: int | None) -> EquityCalculationBuilder:
        self._max_workers = max_workers
        return self

    def use_batch_size(self, batch_size: int) -> EquityCalculationBuilder:
        self._batch_size = batch_size
        return self

    def use_max_sampling_attempts(self, attempts: int) -> EquityCalculationBuilder:
        self._max_sampling_attempts = attempts
        return self

    def use_seed(self, seed: int | None) -> EquityCalculationBuilder:
        self._seed = seed
        return self

    def build(self) -> CalculationConfig:
        return CalculationConfig(
            sample_size=self._sample_size,
            evaluator=self._evaluator,
            board=self._board,
            dead_cards=tuple(self._dead),
            max_workers=self._max_workers,
            batch_size=self._batch_size,
            max_sampling_attempts=self._max_sampling_attempts,
            seed=self._seed,
        )

    def calculate(
        self, *participants: Hand | Range
    ) -> dict[Hand, Equity] | dict[Range, Equity]:
        return EquityCalculator(self.build()).calculate(*participants)
