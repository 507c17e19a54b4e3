"""Unit tests for the seeded generator (procgen.engine.rng).

Tests cover:
- Determinism of the raw sequence and every derived draw
- Range and argument checks (int, pick, pick_weighted)
- shuffle / pick_multiple returning copies
- fork independence and reset
- Seed validation (negative, bool, non-integer)
"""

from __future__ import annotations

import pytest

from procgen.engine.errors import InvalidSeed, ProcgenError
from procgen.engine.rng import DEFAULT_CHARSET, SeededRNG


class TestDeterminism:
    @pytest.mark.unit
    def test_same_seed_same_sequence(self):
        a, b = SeededRNG(42), SeededRNG(42)
        assert [a.next_uint32() for _ in range(50)] == [b.next_uint32() for _ in range(50)]

    @pytest.mark.unit
    def test_different_seeds_diverge(self):
        a, b = SeededRNG(100), SeededRNG(200)
        assert [a.next_uint32() for _ in range(10)] != [b.next_uint32() for _ in range(10)]

    @pytest.mark.unit
    def test_values_are_32_bit(self):
        rng = SeededRNG(7)
        assert all(0 <= rng.next_uint32() <= 0xFFFFFFFF for _ in range(500))

    @pytest.mark.unit
    def test_float_in_unit_interval(self):
        rng = SeededRNG(1)
        assert all(0.0 <= rng.float() < 1.0 for _ in range(500))

    @pytest.mark.unit
    def test_seed_zero_is_valid(self):
        rng = SeededRNG(0)
        assert rng.seed == 0
        assert isinstance(rng.next_uint32(), int)

    @pytest.mark.unit
    def test_reset_rewinds(self):
        rng = SeededRNG(9)
        first = [rng.int(0, 1000) for _ in range(5)]
        rng.reset()
        assert [rng.int(0, 1000) for _ in range(5)] == first


class TestDraws:
    @pytest.mark.unit
    def test_int_inclusive_bounds(self):
        rng = SeededRNG(3)
        values = {rng.int(1, 3) for _ in range(300)}
        assert values == {1, 2, 3}

    @pytest.mark.unit
    def test_int_single_value_range(self):
        assert SeededRNG(3).int(5, 5) == 5

    @pytest.mark.unit
    def test_int_empty_range_raises(self):
        with pytest.raises(ValueError, match="Empty range"):
            SeededRNG(3).int(2, 1)

    @pytest.mark.unit
    def test_bool_probability_extremes(self):
        rng = SeededRNG(11)
        assert not any(rng.bool(0.0) for _ in range(100))
        assert all(rng.bool(1.0) for _ in range(100))

    @pytest.mark.unit
    def test_pick_returns_member(self):
        rng = SeededRNG(5)
        items = ["a", "b", "c"]
        assert all(rng.pick(items) in items for _ in range(50))

    @pytest.mark.unit
    def test_pick_empty_raises(self):
        with pytest.raises(ValueError):
            SeededRNG(5).pick([])

    @pytest.mark.unit
    def test_pick_weighted_skips_zero_weight(self):
        for seed in range(50):
            assert SeededRNG(seed).pick_weighted([("never", 0), ("always", 1)]) == "always"

    @pytest.mark.unit
    def test_pick_weighted_follows_weights(self):
        rng = SeededRNG(8)
        picks = [rng.pick_weighted([("heavy", 95), ("light", 5)]) for _ in range(400)]
        assert picks.count("heavy") > picks.count("light")

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "items",
        [[], [("a", -1), ("b", 2)], [("a", 0), ("b", 0)]],
        ids=["empty", "negative", "zero-total"],
    )
    def test_pick_weighted_rejects_bad_weights(self, items):
        with pytest.raises(ValueError):
            SeededRNG(1).pick_weighted(items)

    @pytest.mark.unit
    def test_shuffle_returns_permuted_copy(self):
        items = list(range(20))
        shuffled = SeededRNG(4).shuffle(items)
        assert items == list(range(20))
        assert sorted(shuffled) == items

    @pytest.mark.unit
    def test_pick_multiple_distinct(self):
        picked = SeededRNG(4).pick_multiple(list("abcdef"), 3)
        assert len(picked) == 3
        assert len(set(picked)) == 3

    @pytest.mark.unit
    def test_pick_multiple_clamps_count(self):
        rng = SeededRNG(4)
        assert sorted(rng.pick_multiple([1, 2], 5)) == [1, 2]
        assert rng.pick_multiple([1, 2], -1) == []

    @pytest.mark.unit
    def test_string_uses_charset(self):
        value = SeededRNG(6).string(32)
        assert len(value) == 32
        assert set(value) <= set(DEFAULT_CHARSET)
        assert set(SeededRNG(6).string(10, "xy")) <= {"x", "y"}


class TestFork:
    @pytest.mark.unit
    def test_fork_is_deterministic(self):
        a = SeededRNG(42).fork()
        b = SeededRNG(42).fork()
        assert [a.next_uint32() for _ in range(10)] == [b.next_uint32() for _ in range(10)]

    @pytest.mark.unit
    def test_fork_advances_parent(self):
        parent = SeededRNG(42)
        untouched = SeededRNG(42)
        parent.fork()
        untouched.next_uint32()
        assert parent.next_uint32() == untouched.next_uint32()

    @pytest.mark.unit
    def test_successive_forks_differ(self):
        parent = SeededRNG(42)
        first, second = parent.fork(), parent.fork()
        assert first.seed != second.seed


class TestSeedValidation:
    @pytest.mark.unit
    @pytest.mark.parametrize("seed", [-1, -100, 1.5, "42", None, True, False])
    def test_invalid_seed_raises(self, seed):
        with pytest.raises(InvalidSeed) as exc_info:
            SeededRNG(seed)
        assert exc_info.value.seed == seed

    @pytest.mark.unit
    def test_invalid_seed_is_procgen_error(self):
        with pytest.raises(ProcgenError):
            SeededRNG(-1)

    @pytest.mark.unit
    def test_large_seed_accepted(self):
        rng = SeededRNG(2**40 + 5)
        assert 0 <= rng.next_uint32() <= 0xFFFFFFFF
