"""Tests for the weighted range model."""

from collections import Counter

import numpy as np
import pytest

from poker_equity.core.ranges import HandNotation, HandType, Range, expand_notation
from poker_equity.utils.card import Card, Hand
from poker_equity.utils.constants import Rank


class TestHandNotation:
    def test_parse_pair(self) -> None:
        h = HandNotation.from_str("AA")
        assert h.rank1 == Rank.ACE
        assert h.rank2 == Rank.ACE
        assert h.hand_type == HandType.PAIR

    def test_parse_suited(self) -> None:
        h = HandNotation.from_str("AKs")
        assert h.hand_type == HandType.SUITED

    def test_parse_normalizes_rank_order(self) -> None:
        h = HandNotation.from_str("KAs")
        assert h.rank1 == Rank.ACE
        assert h.rank2 == Rank.KING

    def test_expands_to_distinct_combos(self) -> None:
        for notation, count in (("AA", 6), ("AKs", 4), ("AKo", 12)):
            h = HandNotation.from_str(notation)
            assert len(set(h.to_hands())) == count

    def test_invalid_notation(self) -> None:
        with pytest.raises(ValueError):
            HandNotation.from_str("AKx")


class TestExpandNotation:
    def test_plus_pairs(self) -> None:
        assert [str(h) for h in expand_notation("JJ+")] == ["AA", "KK", "QQ", "JJ"]

    def test_plus_suited(self) -> None:
        assert [str(h) for h in expand_notation("ATs+")] == ["AKs", "AQs", "AJs", "ATs"]

    def test_dash_range(self) -> None:
        assert [str(h) for h in expand_notation("A5s-A2s")] == ["A5s", "A4s", "A3s", "A2s"]

    def test_two_char_non_pair_is_both(self) -> None:
        assert {str(h) for h in expand_notation("AK")} == {"AKs", "AKo"}

    def test_dash_needs_same_high_card(self) -> None:
        with pytest.raises(ValueError, match="share the high card"):
            expand_notation("AKs-QJs")


class TestRange:
    def test_parse_counts_combos(self) -> None:
        r = Range.parse("AA,KK,AKs")
        assert r.combo_count == 16
        assert len(r.all()) == 16

    def test_specific_hands(self) -> None:
        r = Range.parse("AsKs, AhKh")
        assert set(r.all()) == {Hand.from_str("AsKs"), Hand.from_str("AhKh")}

    def test_of(self) -> None:
        r = Range.of(Hand.from_str("AsKs"), weight=2.0)
        assert r.weight(Hand.from_str("AsKs")) == 2.0
        assert r.weight(Hand.from_str("AhKh")) == 0.0

    def test_add_returns_new_range(self) -> None:
        base = Range.parse("AA")
        bigger = base.add("KK")
        assert base.combo_count == 6
        assert bigger.combo_count == 12

    def test_equal_ranges_hash_equal(self) -> None:
        a = Range.parse("AA,KK")
        b = Range.parse("KK").add("AA")
        assert a == b
        assert hash(a) == hash(b)
        assert str(a) == str(b)

    def test_remove(self) -> None:
        r = Range.parse("QQ+").remove("KK")
        assert r.combo_count == 12
        assert Hand.from_str("KsKh") not in r
        assert Hand.from_str("AsAh") in r

    def test_without_cards(self) -> None:
        r = Range.parse("AA").without_cards([Card.from_str("As")])
        assert r.combo_count == 3

    def test_non_positive_weight_raises(self) -> None:
        with pytest.raises(ValueError, match="positive"):
            Range.parse("AA", weight=0)

    def test_str_shows_weights(self) -> None:
        r = Range.parse("AsKs").add("AhKh", weight=0.5)
        assert str(r) == "AsKs,AhKh:0.5"


class TestSample:
    def test_sample_is_member(self) -> None:
        r = Range.parse("JJ+,AKs")
        rng = np.random.default_rng(0)
        for _ in range(50):
            assert r.sample(rng) in r

    def test_sample_respects_weights(self) -> None:
        heavy = Hand.from_str("AsKs")
        light = Hand.from_str("AhKh")
        r = Range.of(heavy, weight=9.0).with_hands([light], weight=1.0)
        rng = np.random.default_rng(42)
        counts = Counter(r.sample(rng) for _ in range(5_000))
        assert 0.85 < counts[heavy] / 5_000 < 0.95

    def test_sample_empty_raises(self) -> None:
        with pytest.raises(ValueError, match="empty range"):
            Range().sample(np.random.default_rng(0))
