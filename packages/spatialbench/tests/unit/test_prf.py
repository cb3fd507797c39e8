"""Unit tests for the counter-based pseudo-random function."""

from __future__ import annotations

import pytest

from spatialbench.spider import prf

pytestmark = pytest.mark.unit


class TestHash64:
    """Tests for hash64 and mix64."""

    def test_hash_is_deterministic(self) -> None:
        """Same inputs always produce the same hash."""
        assert prf.hash64(42, 1000, 3) == prf.hash64(42, 1000, 3)

    def test_hash_fits_in_64_bits(self) -> None:
        """Hashes are unsigned 64-bit integers."""
        for ordinal in range(200):
            value = prf.hash64(7, ordinal, 0)
            assert 0 <= value <= prf.MASK64

    def test_inputs_are_independent(self) -> None:
        """Changing seed, ordinal or stream changes the hash."""
        base = prf.hash64(1, 1, 1)
        assert prf.hash64(2, 1, 1) != base
        assert prf.hash64(1, 2, 1) != base
        assert prf.hash64(1, 1, 2) != base

    def test_large_inputs_wrap(self) -> None:
        """Inputs beyond 64 bits are reduced modulo 2**64."""
        assert prf.hash64(1 << 64, 5, 0) == prf.hash64(0, 5, 0)

    def test_mix64_spreads_consecutive_values(self) -> None:
        """Consecutive inputs map to distinct outputs."""
        values = {prf.mix64(i) for i in range(1000)}
        assert len(values) == 1000


class TestDraws:
    """Tests for unit, randint and reduce."""

    def test_unit_in_half_open_interval(self) -> None:
        """unit() returns floats in [0, 1)."""
        draws = [prf.unit(99, ordinal, 0) for ordinal in range(5000)]
        assert all(0.0 <= u < 1.0 for u in draws)

    def test_unit_is_roughly_uniform(self) -> None:
        """Mean of many draws is close to 0.5."""
        draws = [prf.unit(3, ordinal, 1) for ordinal in range(20000)]
        assert abs(sum(draws) / len(draws) - 0.5) < 0.02

    def test_randint_bounds_inclusive(self) -> None:
        """randint() covers the closed range."""
        values = {prf.randint(5, ordinal, 0, 1, 4) for ordinal in range(500)}
        assert values == {1, 2, 3, 4}

    def test_reduce_within_cardinality(self) -> None:
        """reduce() stays within [0, cardinality)."""
        for ordinal in range(1000):
            assert 0 <= prf.reduce(11, ordinal, 2, 17) < 17

    def test_reduce_single_row_dimension(self) -> None:
        """A one-row dimension always maps to index 0."""
        assert {prf.reduce(11, ordinal, 2, 1) for ordinal in range(100)} == {0}
