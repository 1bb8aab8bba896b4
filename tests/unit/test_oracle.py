"""Tests for price accumulation and TWAP consumers."""

import pytest

from ammpair.errors import PeriodNotElapsedError
from ammpair.math import Q112, UQ112x112
from ammpair.oracle import (
    FixedWindowOracle,
    PriceAccumulator,
    average_price,
    current_cumulative_prices,
    spot_prices,
)
from ammpair.safe_int import UINT256_MAX
from tests.helpers import WALLET, add_liquidity, expand_to_18_decimals


class TestPriceAccumulator:
    def test_accumulates_price_times_elapsed(self):
        acc = PriceAccumulator()
        acc.accumulate(2, 6, 10)
        assert acc.price0_cumulative_last == (6 * Q112 // 2) * 10
        assert acc.price1_cumulative_last == (2 * Q112 // 6) * 10

    @pytest.mark.parametrize("reserve0,reserve1,elapsed", [(0, 5, 10), (5, 0, 10), (5, 5, 0)])
    def test_noop_cases(self, reserve0, reserve1, elapsed):
        acc = PriceAccumulator()
        acc.accumulate(reserve0, reserve1, elapsed)
        assert (acc.price0_cumulative_last, acc.price1_cumulative_last) == (0, 0)

    def test_wraps_at_256_bits(self):
        acc = PriceAccumulator(price0_cumulative_last=UINT256_MAX, price1_cumulative_last=0)
        acc.accumulate(1, 1, 1)
        assert acc.price0_cumulative_last == Q112 - 1

    def test_spot_prices(self):
        price0, price1 = spot_prices(4, 1)
        assert price0 == UQ112x112.encode(1).uqdiv(4)
        assert price1.decode() == 4


class TestAveragePrice:
    def test_average_over_window(self):
        start = 100 * Q112
        end = start + 3 * Q112 * 10
        assert average_price(start, end, 10) == UQ112x112(3 * Q112)

    def test_wrapped_counter(self):
        """A counter that overflowed between readings still averages correctly."""
        start = UINT256_MAX - Q112 + 1
        end = Q112
        assert average_price(start, end, 2).value == Q112

    def test_zero_elapsed(self):
        with pytest.raises(ValueError):
            average_price(0, 0, 0)


class TestCurrentCumulativePrices:
    def test_counterfactual_does_not_touch_pair(self, chain, pair):
        add_liquidity(pair, WALLET, expand_to_18_decimals(1), expand_to_18_decimals(2))
        chain.advance(30)
        price0, price1, timestamp = current_cumulative_prices(pair)

        assert timestamp == chain.block_timestamp
        assert price0 == 2 * Q112 * 30
        assert price1 == (Q112 // 2) * 30
        assert pair.price0_cumulative_last == 0

    def test_matches_sync(self, chain, pair):
        add_liquidity(pair, WALLET, expand_to_18_decimals(3), expand_to_18_decimals(7))
        chain.advance(17)
        expected = current_cumulative_prices(pair)
        pair.sync()
        assert (pair.price0_cumulative_last, pair.price1_cumulative_last) == expected[:2]

    def test_same_block(self, pair):
        add_liquidity(pair, WALLET, expand_to_18_decimals(1), expand_to_18_decimals(2))
        assert current_cumulative_prices(pair)[:2] == (0, 0)


class TestFixedWindowOracle:
    @pytest.fixture
    def oracle(self, pair) -> FixedWindowOracle:
        add_liquidity(pair, WALLET, expand_to_18_decimals(1), expand_to_18_decimals(2))
        return FixedWindowOracle(pair, period=3600)

    def test_requires_reserves(self, pair):
        with pytest.raises(ValueError, match="no reserves"):
            FixedWindowOracle(pair, period=60)

    def test_requires_positive_period(self, pair):
        with pytest.raises(ValueError, match="period"):
            FixedWindowOracle(pair, period=0)

    def test_update_before_period(self, chain, oracle):
        chain.advance(3599)
        with pytest.raises(PeriodNotElapsedError):
            oracle.update()

    def test_consult_after_update(self, chain, pair, token0, token1, oracle, captured_logs):
        chain.advance(3600)
        oracle.update()

        assert oracle.price0_average.value == 2 * Q112
        assert oracle.consult(token0.address, 100) == 200
        assert oracle.consult(token1.address, 100) == 50
        assert any(log["event"] == "oracle_updated" for log in captured_logs)

    def test_consult_unknown_token(self, oracle):
        with pytest.raises(ValueError, match="not in pair"):
            oracle.consult(WALLET, 1)
