"""Monte Carlo equity engine for Texas Hold'em.

Estimates how often fixed hands or weighted ranges win, lose or split
by the river, given an optional partial board and dead cards.

Key public API:
    EquityCalculator          -- Runs calculations for a CalculationConfig
    EquityCalculationBuilder  -- Fluent builder for CalculationConfig
    CalculationConfig         -- Immutable calculation settings
    Equity                    -- Finalized win/lose/split decimals
    Board, Range              -- Community cards and weighted hand ranges
    InfeasibleInputError      -- Inputs that can never be dealt
    SamplingExhaustedError    -- Range sampler gave up on a trial
"""

from poker_equity.core.board import Board
from poker_equity.core.config import CalculationConfig, load_calculation_config
from poker_equity.core.equity import Equity
from poker_equity.core.equity_calculator import EquityCalculationBuilder, EquityCalculator
from poker_equity.core.errors import EquityError, InfeasibleInputError, SamplingExhaustedError
from poker_equity.core.hand_evaluator import DefaultEvaluator, Evaluator
from poker_equity.core.ranges import Range

__all__ = [
    "Board",
    "CalculationConfig",
    "DefaultEvaluator",
    "Equity",
    "EquityCalculationBuilder",
    "EquityCalculator",
    "EquityError",
    "Evaluator",
    "InfeasibleInputError",
    "Range",
    "SamplingExhaustedError",
    "load_calculation_config",
]
