"""Equity results and the trial accumulator behind them.

EquityTally counts WIN/LOSE/SPLIT outcomes per participant while trials
run. Once every trial is in, finalize() divides the counts by the sample
size exactly once and hands back read-only Equity values.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Sequence

import numpy as np


class Outcome(IntEnum):
    """Per-participant result of one trial. Values index tally columns."""

    WIN = 0
    LOSE = 1
    SPLIT = 2


@dataclass(frozen=True)
class Equity:
    """How often a hand or range wins, loses or splits, as decimals."""

    win: float
    lose: float
    split: float
    samples: int

    @property
    def win_pct(self) -> float:
        return self.win * 100

    @property
    def lose_pct(self) -> float:
        return self.lose * 100

    @property
    def split_pct(self) -> float:
        return self.split * 100

    def __str__(self) -> str:
        return f"[win={self.win} lose={self.lose} split={self.split}]"


class EquityTally:
    """Mutable outcome counts for one calculation.

    Rows are participants in input order; columns follow Outcome. Worker
    batches each fill their own tally and the parent merges the counts,
    so no two threads of execution ever touch the same array.
    """

    def __init__(self, participants: int) -> None:
        if participants < 1:
            raise ValueError(f"Need at least one participant, got {participants}")
        self._counts = np.zeros((participants, len(Outcome)), dtype=np.int64)
        self._finalized = False

    @property
    def participants(self) -> int:
        return self._counts.shape[0]

    @property
    def counts(self) -> np.ndarray:
        """Copy of the raw counts, shape (participants, 3)."""
        return self._counts.copy()

    @property
    def trials(self) -> int:
        """Number of trials recorded so far."""
        return int(self._counts[0].sum())

    @property
    def finalized(self) -> bool:
        return self._finalized

    def _ensure_open(self) -> None:
        if self._finalized:
            raise RuntimeError("Equity tally is already finalized")

    def record(self, outcomes: Sequence[Outcome]) -> None:
        """Add one trial: exactly one outcome per participant."""
        self._ensure_open()
        if len(outcomes) != self.participants:
            raise ValueError(
                f"Expected {self.participants} outcomes, got {len(outcomes)}"
            )
        self._counts[np.arange(self.participants), np.asarray(outcomes, dtype=np.intp)] += 1

    def merge(self, counts: np.ndarray) -> None:
        """Add the counts of another tally (e.g. one worker batch)."""
        self._ensure_open()
        counts = np.asarray(counts, dtype=np.int64)
        if counts.shape != self._counts.shape:
            raise ValueError(
                f"Cannot merge counts of shape {counts.shape} into {self._counts.shape}"
            )
        self._counts += counts

    def finalize(self, sample_size: int) -> list[Equity]:
        """Normalize the counts into Equity values, one per participant.

        Raises:
            RuntimeError: If called twice, or if the recorded trials do
                not match sample_size for every participant.
        """
        self._ensure_open()
        per_participant = self._counts.sum(axis=1)
        if not np.all(per_participant == sample_size):
            raise RuntimeError(
                f"Tally holds {per_participant.tolist()} trials per participant, "
                f"expected {sample_size}"
            )
        self._finalized = True

        frequencies = self._counts / sample_size
        return [
            Equity(
                win=float(row[Outcome.WIN]),
                lose=float(row[Outcome.LOSE]),
                split=float(row[Outcome.SPLIT]),
                samples=sample_size,
            )
            for row in frequencies
        ]
