"""Constant product quoting math for pairs.

Formula: amount_out = (in * m * res_out) / (res_in * d + in * m)
where d is the fee denominator and m = d - fee numerator.

With the default 19 / 10000 fee, m = 9981. get_amount_out returns the
largest output a pair's K check accepts for a given input.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ammpair.constants import FEE_DENOMINATOR, FEE_NUMERATOR
from ammpair.models.types import address_key, normalize_address
from ammpair.safe_int import UINT256_MAX, S

if TYPE_CHECKING:
    from ammpair.pair import Pair


def sort_tokens(token_a: str, token_b: str) -> tuple[str, str]:
    """Order two asset addresses canonically (lower address first).

    Raises:
        ValueError: If the addresses are identical
    """
    token_a, token_b = normalize_address(token_a), normalize_address(token_b)
    if token_a == token_b:
        raise ValueError(f"Identical addresses: {token_a}")
    if address_key(token_a) < address_key(token_b):
        return token_a, token_b
    return token_b, token_a


@dataclass
class SwapQuote:
    """Result of quoting a swap against a pair's current reserves."""

    amount_in: int
    amount_out: int
    pair_address: str
    token_in: str
    token_out: str
    # Outputs in pair order, ready for Pair.swap
    amount0_out: int
    amount1_out: int


class PairMath:
    """Quoting math for constant product pairs with a configurable fee."""

    def quote(self, amount_a: int, reserve_a: int, reserve_b: int) -> int:
        """Equivalent amount of the other asset at the current reserve ratio (no fee).

        Raises:
            ValueError: If amount_a is zero or either reserve is empty
        """
        if amount_a <= 0:
            raise ValueError("Insufficient amount")
        if reserve_a <= 0 or reserve_b <= 0:
            raise ValueError("Insufficient liquidity")
        return (S(amount_a) * reserve_b // reserve_a).value

    def get_amount_out(
        self,
        amount_in: int,
        reserve_in: int,
        reserve_out: int,
        fee_numerator: int = FEE_NUMERATOR,
        fee_denominator: int = FEE_DENOMINATOR,
    ) -> int:
        """Calculate output amount using constant product formula.

        Args:
            amount_in: Input token amount
            reserve_in: Reserve of input token in pair
            reserve_out: Reserve of output token in pair
            fee_numerator: Fee numerator (default 19)
            fee_denominator: Fee denominator (default 10000)

        Returns:
            Output token amount, 0 for empty inputs or reserves
        """
        if amount_in <= 0:
            return 0
        if reserve_in <= 0 or reserve_out <= 0:
            return 0

        amount_in_with_fee = S(amount_in) * (fee_denominator - fee_numerator)
        numerator = amount_in_with_fee * reserve_out
        denominator = S(reserve_in) * fee_denominator + amount_in_with_fee

        return (numerator // denominator).value

    def get_amount_in(
        self,
        amount_out: int,
        reserve_in: int,
        reserve_out: int,
        fee_numerator: int = FEE_NUMERATOR,
        fee_denominator: int = FEE_DENOMINATOR,
    ) -> int:
        """Calculate required input for desired output.

        Formula: amount_in = (res_in * out * d) / ((res_out - out) * m) + 1

        Returns:
            Required input token amount; 2**256 - 1 if the output drains the reserve
        """
        if amount_out <= 0:
            return 0
        if reserve_in <= 0 or reserve_out <= 0:
            return 0
        if amount_out >= reserve_out:
            return UINT256_MAX

        numerator = S(reserve_in) * amount_out * fee_denominator
        denominator = (S(reserve_out) - amount_out) * (fee_denominator - fee_numerator)

        return ((numerator // denominator) + 1).value

    def simulate_swap(self, pair: Pair, token_in: str, amount_in: int) -> SwapQuote:
        """Quote an exact-input swap against a pair's stored reserves.

        Raises:
            ValueError: If token_in is not one of the pair's assets
        """
        token_in = normalize_address(token_in)
        reserve0, reserve1, _ = pair.get_reserves()
        if token_in == pair.token0.address:
            reserve_in, reserve_out, token_out = reserve0, reserve1, pair.token1.address
        elif token_in == pair.token1.address:
            reserve_in, reserve_out, token_out = reserve1, reserve0, pair.token0.address
        else:
            raise ValueError(f"Token {token_in} not in pair {pair.address}")

        amount_out = self.get_amount_out(
            amount_in,
            reserve_in,
            reserve_out,
            pair.config.fee_numerator,
            pair.config.fee_denominator,
        )
        zero_for_one = token_in == pair.token0.address
        return SwapQuote(
            amount_in=amount_in,
            amount_out=amount_out,
            pair_address=pair.address,
            token_in=token_in,
            token_out=token_out,
            amount0_out=0 if zero_for_one else amount_out,
            amount1_out=amount_out if zero_for_one else 0,
        )


# Singleton instance
pair_math = PairMath()


__all__ = [
    "PairMath",
    "SwapQuote",
    "pair_math",
    "sort_tokens",
]
