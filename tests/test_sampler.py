"""Tests for the per-trial range sampler."""

import numpy as np
import pytest

from poker_equity.core.errors import SamplingExhaustedError
from poker_equity.core.ranges import Range
from poker_equity.core.sampler import sample_hands
from poker_equity.utils.card import Card, parse_cards


class TestSampleHands:
    def test_one_hand_per_range_all_disjoint(self) -> None:
        ranges = [Range.parse("AA,KK"), Range.parse("AK,KQs"), Range.parse("QQ+")]
        blocked = frozenset(parse_cards("Kc 7d 2s"))
        rng = np.random.default_rng(11)
        for _ in range(200):
            hands = sample_hands(ranges, blocked, rng, max_attempts=10_000)
            assert len(hands) == 3
            cards = [c for h in hands for c in h]
            assert len(set(cards)) == 6
            assert blocked.isdisjoint(cards)
            for hand, r in zip(hands, ranges):
                assert hand in r

    def test_forced_assignment(self) -> None:
        a = Range.parse("AhKh,QdJd")
        b = Range.parse("AhKh")
        rng = np.random.default_rng(3)
        for _ in range(20):
            hands = sample_hands([a, b], frozenset(), rng, max_attempts=1_000)
            assert str(hands[0]) == "QdJd"
            assert str(hands[1]) == "AhKh"

    def test_reproducible(self) -> None:
        ranges = [Range.parse("JJ+"), Range.parse("AKs,AQs")]
        first = sample_hands(ranges, frozenset(), np.random.default_rng(5), 100)
        second = sample_hands(ranges, frozenset(), np.random.default_rng(5), 100)
        assert first == second

    def test_impossible_deal_exhausts(self) -> None:
        ranges = [
            Range.parse("AhKh,QdJd"),
            Range.parse("AhQd,KhJd"),
            Range.parse("AhJd,KhQd"),
        ]
        with pytest.raises(SamplingExhaustedError, match="after 25 attempts"):
            sample_hands(ranges, frozenset(), np.random.default_rng(0), max_attempts=25)

    def test_blocked_cards_exhaust(self) -> None:
        with pytest.raises(SamplingExhaustedError):
            sample_hands(
                [Range.parse("AsKs")],
                frozenset([Card.from_str("As")]),
                np.random.default_rng(0),
                max_attempts=5,
            )
