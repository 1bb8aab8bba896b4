"""Mathematical utilities for the pair core.

This package provides the exact-integer primitives the pair relies on:
- UQ112x112: 224-bit binary fixed-point prices
- sqrt: Babylonian floor square root
"""

from ammpair.math.integer import sqrt
from ammpair.math.uq112x112 import Q112, UQ112x112, decode144

__all__ = ["Q112", "UQ112x112", "decode144", "sqrt"]
