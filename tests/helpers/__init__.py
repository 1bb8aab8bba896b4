"""Test helpers module for shared test utilities.

- constants: Accounts, token addresses and common amounts
- factories: Pair setup functions
"""

from tests.helpers.constants import (
    MINIMUM_LIQUIDITY,
    OTHER,
    START_TIME,
    TOKEN_A,
    TOKEN_B,
    TOKEN_SUPPLY,
    TRADER,
    WALLET,
    expand_to_18_decimals,
)
from tests.helpers.factories import add_liquidity, make_pair

__all__ = [
    # Constants
    "WALLET",
    "OTHER",
    "TRADER",
    "TOKEN_A",
    "TOKEN_B",
    "TOKEN_SUPPLY",
    "MINIMUM_LIQUIDITY",
    "START_TIME",
    "expand_to_18_decimals",
    # Factories
    "make_pair",
    "add_liquidity",
]
