"""Configuration for equity calculations.

A CalculationConfig is immutable and is passed to EquityCalculator for
each call, so the same config can be reused across any number of
calculations without one affecting another.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from poker_equity.core.board import Board
from poker_equity.core.hand_evaluator import DefaultEvaluator, Evaluator
from poker_equity.utils.card import Card, parse_cards

logger = logging.getLogger("poker_equity.core.config")

# The default number of trials to simulate per calculation.
DEFAULT_SAMPLE_SIZE = 25_000

# The default evaluator used to rank hands.
DEFAULT_EVALUATOR: Evaluator = DefaultEvaluator()

# Trials per unit of parallel work. Batch boundaries (and so the random
# streams) depend only on this and the sample size, never on worker count.
DEFAULT_BATCH_SIZE = 1_000

# Rejected range draws allowed per trial before the sampler gives up.
DEFAULT_MAX_SAMPLING_ATTEMPTS = 10_000

# Number of worker processes for parallel Monte Carlo.
# Defaults to CPU count minus 1 (leave one core for the main thread),
# with a minimum of 1 and a maximum of 4 (diminishing returns beyond that).
_MAX_WORKERS = max(1, min(4, (os.cpu_count() or 2) - 1))

DEFAULT_CONFIG_PATH = Path.home() / ".poker_equity" / "config.json"


@dataclass(frozen=True)
class CalculationConfig:
    """Settings for one or more equity calculations."""

    sample_size: int = DEFAULT_SAMPLE_SIZE
    evaluator: Evaluator = DEFAULT_EVALUATOR
    board: Board = field(default_factory=Board)
    dead_cards: tuple[Card, ...] = ()
    max_workers: int | None = None  # None → _MAX_WORKERS, 1 → run inline
    batch_size: int = DEFAULT_BATCH_SIZE
    max_sampling_attempts: int = DEFAULT_MAX_SAMPLING_ATTEMPTS
    seed: int | None = None  # None → derived from the participants

    def __post_init__(self) -> None:
        dead = tuple(self.dead_cards)
        object.__setattr__(self, "dead_cards", dead)

        for name in ("sample_size", "batch_size", "max_sampling_attempts"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 1:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError(f"max_workers must be positive, got {self.max_workers}")
        if len(set(dead)) != len(dead):
            raise ValueError(f"Duplicate dead card in {' '.join(map(str, dead))}")
        on_board = set(dead) & set(self.board.cards)
        if on_board:
            raise ValueError(
                f"Dead cards also on the board: {' '.join(sorted(map(str, on_board)))}"
            )
        if not isinstance(self.evaluator, Evaluator):
            raise TypeError(f"{self.evaluator!r} does not implement rank(hand, board)")

    @property
    def workers(self) -> int:
        """Resolved worker-process count."""
        return self.max_workers or _MAX_WORKERS

    @property
    def blocked_cards(self) -> frozenset[Card]:
        """Cards no participant may hold: the board plus the dead cards."""
        return frozenset(self.board.cards) | frozenset(self.dead_cards)


def load_calculation_config(config_path: Path | None = None) -> CalculationConfig | None:
    """Load calculation settings from a JSON file.

    Default path: ~/.poker_equity/config.json

    Returns None if the config file does not exist or cannot be used,
    leaving the caller to fall back to CalculationConfig().

    Expected JSON format (every key optional):
        {
            "sample_size": 50000,
            "board": "Kc 7d 2s",
            "dead_cards": "Ah Qd",
            "max_workers": 4,
            "batch_size": 1000,
            "max_sampling_attempts": 10000,
            "seed": 1234
        }
    """
    path = config_path or DEFAULT_CONFIG_PATH
    if not path.exists():
        return None

    try:
        with open(path) as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Failed to read equity config at %s: %s", path, e)
        return None

    if not isinstance(data, dict):
        logger.warning("Equity config at %s is not a JSON object", path)
        return None

    try:
        return CalculationConfig(
            sample_size=data.get("sample_size", DEFAULT_SAMPLE_SIZE),
            board=Board.from_str(data.get("board", "")),
            dead_cards=tuple(parse_cards(data.get("dead_cards", ""))),
            max_workers=data.get("max_workers"),
            batch_size=data.get("batch_size", DEFAULT_BATCH_SIZE),
            max_sampling_attempts=data.get(
                "max_sampling_attempts", DEFAULT_MAX_SAMPLING_ATTEMPTS
            ),
            seed=data.get("seed"),
        )
    except (TypeError, ValueError) as e:
        logger.warning("Invalid equity config at %s: %s", path, e)
        return None
