"""UQ112x112 binary fixed-point numbers.

A UQ112x112 packs an unsigned 112-bit integer part and a 112-bit fraction
into 224 bits. Reserves are uint112, so the ratio of one reserve to the
other always fits without loss of the integer part:

    price0 = UQ112x112.encode(reserve1).uqdiv(reserve0)

Products with a time delta (uint32) fit in 256 bits, which is what lets the
price accumulators integrate the ratio over time with plain modular adds.
"""

from __future__ import annotations

from decimal import Decimal
from typing import ClassVar

from ammpair.safe_int import UINT112_MAX, UINT256_MAX

__all__ = [
    "UQ112x112",
    "Q112",
    "RESOLUTION",
    "decode144",
]

RESOLUTION = 112
Q112 = 1 << RESOLUTION


def decode144(value: int) -> int:
    """Decode a UQ144x112 product (as returned by UQ112x112.mul) to an integer."""
    return value >> RESOLUTION


class UQ112x112:
    """224-bit unsigned fixed-point number stored as int.

    Values are stored scaled by 2^112.
    Example: 1.5 is stored as 3 * 2^111
    """

    Q: ClassVar[int] = Q112
    MAX: ClassVar[int] = (1 << 224) - 1

    __slots__ = ("value",)
    __hash__ = None  # type: ignore[assignment]  # Unhashable since we define __eq__

    def __init__(self, value: int) -> None:
        """Create from raw scaled value."""
        if value < 0 or value > self.MAX:
            raise ValueError(f"UQ112x112 out of range: {value}")
        self.value = value

    @classmethod
    def encode(cls, y: int) -> UQ112x112:
        """Encode a uint112 as a UQ112x112 (y * 2^112)."""
        if y < 0 or y > UINT112_MAX:
            raise ValueError(f"UQ112x112.encode requires uint112, got {y}")
        return cls(y * cls.Q)

    def uqdiv(self, y: int) -> UQ112x112:
        """Divide by a uint112, flooring the result."""
        if y == 0:
            raise ZeroDivisionError("UQ112x112 division by zero")
        return UQ112x112(self.value // y)

    def mul(self, y: int) -> int:
        """Multiply by a uint, returning the raw UQ144x112 product.

        Raises:
            OverflowError: If the product does not fit in 256 bits
        """
        product = self.value * y
        if y < 0 or product > UINT256_MAX:
            raise OverflowError(f"UQ112x112.mul overflow: {self.value} * {y}")
        return product

    def decode(self) -> int:
        """Integer part, rounding down."""
        return self.value >> RESOLUTION

    def to_decimal(self) -> Decimal:
        """Convert to Decimal for display."""
        return Decimal(self.value) / Decimal(self.Q)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UQ112x112):
            return NotImplemented
        return self.value == other.value

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, UQ112x112):
            return NotImplemented
        return self.value < other.value

    def __le__(self, other: object) -> bool:
        if not isinstance(other, UQ112x112):
            return NotImplemented
        return self.value <= other.value

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, UQ112x112):
            return NotImplemented
        return self.value > other.value

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, UQ112x112):
            return NotImplemented
        return self.value >= other.value

    def __repr__(self) -> str:
        return f"UQ112x112({self.value})"

    def __str__(self) -> str:
        return str(self.to_decimal())
