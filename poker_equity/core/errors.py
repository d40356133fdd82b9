"""Errors raised by the equity engine."""


class EquityError(Exception):
    """Base class for equity calculation failures."""

    pass


class InfeasibleInputError(EquityError, ValueError):
    """Raised when the participants, board and dead cards cannot be dealt.

    Validation raises this before any trial runs, so no simulation budget
    is spent on inputs that can never produce a legal deal.
    """

    pass


class SamplingExhaustedError(EquityError):
    """Raised when the range sampler hits its attempt budget in a trial.

    Range validation only checks pairs of ranges. Three or more ranges can
    pass it and still have no card-disjoint assignment (or one too rare to
    find), so the sampler gives up instead of looping forever.
    """

    pass
