"""Time-weighted average price (TWAP) accumulation and consumption.

A pair integrates its instantaneous price, reserve1 / reserve0 as a
UQ112x112, over time into price0_cumulative_last (and the inverse into
price1_cumulative_last). Both counters wrap at 2**256, so consumers only ever
use differences between two readings:

    average = (cumulative_end - cumulative_start) mod 2**256 / elapsed

The helpers below mirror what an on-chain oracle consumer does: read
counterfactual cumulatives without touching the pair, compute averages over
a window, and keep a fixed-window average up to date.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from ammpair.constants import CUMULATIVE_BITS, TIMESTAMP_BITS
from ammpair.errors import PeriodNotElapsedError
from ammpair.math import UQ112x112, decode144
from ammpair.models.types import normalize_address
from ammpair.safe_int import S

if TYPE_CHECKING:
    from ammpair.pair import Pair

logger = structlog.get_logger()


@dataclass
class PriceAccumulator:
    """Cumulative prices of a pair, each wrapping at 2**256."""

    price0_cumulative_last: int = 0
    price1_cumulative_last: int = 0

    def accumulate(self, reserve0: int, reserve1: int, time_elapsed: int) -> None:
        """Add each price times the elapsed seconds to its counter.

        Must be called with the reserves as they stood before the current
        operation. Zero reserves or zero elapsed time leave the counters
        untouched.
        """
        if time_elapsed == 0 or reserve0 == 0 or reserve1 == 0:
            return
        price0, price1 = spot_prices(reserve0, reserve1)
        self.price0_cumulative_last = (
            S(self.price0_cumulative_last)
            .wrapping_add(price0.value * time_elapsed, CUMULATIVE_BITS)
            .value
        )
        self.price1_cumulative_last = (
            S(self.price1_cumulative_last)
            .wrapping_add(price1.value * time_elapsed, CUMULATIVE_BITS)
            .value
        )


def spot_prices(reserve0: int, reserve1: int) -> tuple[UQ112x112, UQ112x112]:
    """Instantaneous prices (token0 in token1, token1 in token0)."""
    return (
        UQ112x112.encode(reserve1).uqdiv(reserve0),
        UQ112x112.encode(reserve0).uqdiv(reserve1),
    )


def current_cumulative_prices(pair: Pair) -> tuple[int, int, int]:
    """Cumulative prices as of now, without syncing the pair.

    If time has passed since the pair's last update, the elapsed interval is
    added counterfactually using the stored reserves.

    Returns:
        Tuple of (price0_cumulative, price1_cumulative, block_timestamp)
    """
    block_timestamp = pair.chain.block_timestamp
    reserve0, reserve1, block_timestamp_last = pair.get_reserves()
    accumulator = PriceAccumulator(pair.price0_cumulative_last, pair.price1_cumulative_last)
    if block_timestamp_last != block_timestamp:
        elapsed = S(block_timestamp).wrapping_sub(block_timestamp_last, TIMESTAMP_BITS).value
        accumulator.accumulate(reserve0, reserve1, elapsed)
    return (
        accumulator.price0_cumulative_last,
        accumulator.price1_cumulative_last,
        block_timestamp,
    )


def average_price(cumulative_start: int, cumulative_end: int, time_elapsed: int) -> UQ112x112:
    """Time-weighted average price between two cumulative readings.

    Raises:
        ValueError: If time_elapsed is not positive
    """
    if time_elapsed <= 0:
        raise ValueError(f"time_elapsed must be positive, got {time_elapsed}")
    delta = S(cumulative_end).wrapping_sub(cumulative_start, CUMULATIVE_BITS).value
    return UQ112x112(delta // time_elapsed)


class FixedWindowOracle:
    """Average prices of one pair over a fixed, periodically recomputed window.

    update() may be called at most once per period; consult() converts an
    amount of one token to the other at the last computed average.
    """

    def __init__(self, pair: Pair, period: int) -> None:
        if period <= 0:
            raise ValueError(f"period must be positive, got {period}")
        reserve0, reserve1, block_timestamp_last = pair.get_reserves()
        if reserve0 == 0 or reserve1 == 0:
            raise ValueError(f"Pair {pair.address} has no reserves")
        self.pair = pair
        self.period = period
        self.price0_cumulative_last = pair.price0_cumulative_last
        self.price1_cumulative_last = pair.price1_cumulative_last
        self.block_timestamp_last = block_timestamp_last
        self.price0_average = UQ112x112(0)
        self.price1_average = UQ112x112(0)

    def update(self) -> None:
        """Recompute both averages over the window since the last update.

        Raises:
            PeriodNotElapsedError: If less than one period has passed
        """
        price0_cumulative, price1_cumulative, block_timestamp = current_cumulative_prices(self.pair)
        elapsed = S(block_timestamp).wrapping_sub(self.block_timestamp_last, TIMESTAMP_BITS).value
        if elapsed < self.period:
            raise PeriodNotElapsedError(f"{elapsed}s elapsed, period is {self.period}s")

        self.price0_average = average_price(self.price0_cumulative_last, price0_cumulative, elapsed)
        self.price1_average = average_price(self.price1_cumulative_last, price1_cumulative, elapsed)
        self.price0_cumulative_last = price0_cumulative
        self.price1_cumulative_last = price1_cumulative
        self.block_timestamp_last = block_timestamp

        logger.info(
            "oracle_updated",
            pair=self.pair.address,
            elapsed=elapsed,
            price0_average=str(self.price0_average),
            price1_average=str(self.price1_average),
        )

    def consult(self, token: str, amount_in: int) -> int:
        """Convert amount_in of token to the other token at the window average.

        Raises:
            ValueError: If token is not one of the pair's assets
        """
        token = normalize_address(token)
        if token == self.pair.token0.address:
            return decode144(self.price0_average.mul(amount_in))
        if token == self.pair.token1.address:
            return decode144(self.price1_average.mul(amount_in))
        raise ValueError(f"Token {token} not in pair {self.pair.address}")
