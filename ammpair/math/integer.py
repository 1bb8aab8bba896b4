"""Integer helpers matching the on-chain Math library."""

from __future__ import annotations


def sqrt(y: int) -> int:
    """Floor square root using the Babylonian method.

    Args:
        y: Non-negative integer

    Returns:
        The largest z such that z * z <= y

    Raises:
        ValueError: If y is negative
    """
    if y < 0:
        raise ValueError(f"sqrt requires non-negative input, got {y}")
    if y > 3:
        z = y
        x = y // 2 + 1
        while x < z:
            z = x
            x = (y // x + x) // 2
        return z
    if y != 0:
        return 1
    return 0
