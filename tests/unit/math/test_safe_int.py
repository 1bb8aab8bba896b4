"""Tests for checked reserve and counter arithmetic."""

import pytest

from ammpair.safe_int import (
    UINT112_MAX,
    UINT256_MAX,
    DivisionByZero,
    S,
    SafeIntError,
    Uint256Overflow,
    Underflow,
)


class TestAmounts:
    def test_rejects_non_int(self):
        with pytest.raises(TypeError):
            S("42")  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            S(True)  # type: ignore[arg-type]

    def test_checked_arithmetic(self):
        assert (S(10) + 5).value == 15
        assert (S(10) - S(4)).value == 6
        assert (S(6) * 7).value == 42
        assert (S(7) // 2).value == 3

    def test_custody_shortfall_underflows(self):
        """A balance below the recorded reserve cannot be diffed into a deposit."""
        with pytest.raises(Underflow, match="negative"):
            S(5) - 10

    def test_share_of_empty_total(self):
        with pytest.raises(DivisionByZero):
            S(1) // 0

    def test_errors_are_arithmetic_errors(self):
        assert issubclass(SafeIntError, ArithmeticError)
        assert issubclass(Underflow, SafeIntError)
        assert issubclass(DivisionByZero, SafeIntError)

    def test_min_and_comparison(self):
        assert S(3).min(5) == 3
        assert S(5).min(S(3)) == S(3)
        assert S(1) < 2

    def test_saturating_sub(self):
        assert S(10).saturating_sub(3).value == 7
        assert S(3).saturating_sub(10).value == 0


class TestCounters:
    def test_accumulator_wraps_at_256_bits(self):
        assert S(UINT256_MAX).wrapping_add(5).value == 4

    def test_elapsed_across_timestamp_wrap(self):
        """A 32-bit timestamp that wrapped still yields the true elapsed time."""
        assert S(5).wrapping_sub(2**32 - 10, bits=32).value == 15


class TestStorageWidths:
    def test_reserve_slot(self):
        assert S(UINT112_MAX).is_uint112()
        assert not S(UINT112_MAX + 1).is_uint112()

    def test_supply_bound(self):
        assert S(UINT256_MAX).to_uint256() == UINT256_MAX
        with pytest.raises(Uint256Overflow):
            S(UINT256_MAX + 1).to_uint256()
