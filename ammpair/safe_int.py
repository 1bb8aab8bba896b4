"""Checked integers for reserve, claim and accumulator arithmetic.

Pair arithmetic mixes two kinds of integers:
- amounts (balances, reserves, claims), which must never go negative and
  are bounded by their storage width (uint112 reserves, uint256 supplies)
- counters (the 32-bit block timestamp, the 256-bit price accumulators),
  which wrap around by definition

SafeInt makes the first kind fail loudly and gives the second kind explicit
wrapping operations:

    deposited = (S(balance0) - reserve0).value        # Underflow if custody shrank
    elapsed = S(now).wrapping_sub(last, 32).value      # never raises
"""

from __future__ import annotations

UINT112_MAX = 2**112 - 1
UINT256_MAX = 2**256 - 1


class SafeIntError(ArithmeticError):
    """Arithmetic on amounts produced an impossible value."""


class DivisionByZero(SafeIntError):
    """Pro-rata share computed against an empty total."""


class Underflow(SafeIntError):
    """An amount would become negative."""


class Uint256Overflow(SafeIntError):
    """A supply or amount no longer fits in 256 bits."""


def _raw(x: SafeInt | int) -> int:
    return x._value if isinstance(x, SafeInt) else x


class SafeInt:
    """Integer amount with checked subtraction and division.

    Multiplication and addition are unbounded (Python ints); widths are
    enforced where a value is stored, through is_uint112() and to_uint256().
    """

    __slots__ = ("_value",)
    __hash__ = None  # type: ignore[assignment]

    def __init__(self, value: int | SafeInt) -> None:
        if isinstance(value, SafeInt):
            value = value._value
        elif not isinstance(value, int) or isinstance(value, bool):
            raise TypeError(f"SafeInt requires int, got {type(value).__name__}")
        self._value = value

    @property
    def value(self) -> int:
        return self._value

    def __repr__(self) -> str:
        return f"S({self._value})"

    def __add__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value + _raw(other))

    def __sub__(self, other: SafeInt | int) -> SafeInt:
        """Raises Underflow if other exceeds self."""
        result = self._value - _raw(other)
        if result < 0:
            raise Underflow(f"{self._value} - {_raw(other)} is negative")
        return SafeInt(result)

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value * _raw(other))

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        """Floor division; raises DivisionByZero on an empty divisor."""
        divisor = _raw(other)
        if divisor == 0:
            raise DivisionByZero(f"{self._value} // 0")
        return SafeInt(self._value // divisor)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (SafeInt, int)):
            return self._value == _raw(other)
        return NotImplemented

    def __lt__(self, other: SafeInt | int) -> bool:
        return self._value < _raw(other)

    def min(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(min(self._value, _raw(other)))

    def saturating_sub(self, other: SafeInt | int) -> SafeInt:
        """Subtract, flooring at zero. Used where a shortfall means "nothing arrived"."""
        return SafeInt(max(0, self._value - _raw(other)))

    # --- Counters ---

    def wrapping_add(self, other: SafeInt | int, bits: int = 256) -> SafeInt:
        return SafeInt((self._value + _raw(other)) % (1 << bits))

    def wrapping_sub(self, other: SafeInt | int, bits: int = 256) -> SafeInt:
        """Difference modulo 2**bits, e.g. seconds between two 32-bit timestamps."""
        return SafeInt((self._value - _raw(other)) % (1 << bits))

    # --- Storage widths ---

    def is_uint112(self) -> bool:
        """Whether the value fits a reserve slot."""
        return 0 <= self._value <= UINT112_MAX

    def to_uint256(self) -> int:
        """Return the value, checking it fits a uint256 supply.

        Raises:
            Uint256Overflow: If negative or above 2**256 - 1
        """
        if not 0 <= self._value <= UINT256_MAX:
            raise Uint256Overflow(f"{self._value} does not fit in uint256")
        return self._value


S = SafeInt
