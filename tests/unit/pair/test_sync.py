"""Tests for reserve synchronization and price accumulation."""

import pytest

from ammpair.errors import ReserveOverflowError
from ammpair.math import Q112, UQ112x112
from ammpair.models.events import Sync
from ammpair.safe_int import UINT112_MAX
from tests.helpers import WALLET, add_liquidity, expand_to_18_decimals, make_pair


class TestSync:
    def test_absorbs_donation(self, chain, pair, token0):
        add_liquidity(pair, WALLET, expand_to_18_decimals(1), expand_to_18_decimals(1))
        token0.transfer(WALLET, pair.address, 500)

        pair.sync()

        assert pair.get_reserves()[:2] == (expand_to_18_decimals(1) + 500, expand_to_18_decimals(1))
        sync = chain.events_of(Sync)[-1]
        assert sync.reserve0 == expand_to_18_decimals(1) + 500

    def test_empty_pair(self, chain, pair):
        pair.sync()
        assert pair.get_reserves() == (0, 0, chain.block_timestamp)
        assert pair.price0_cumulative_last == 0

    def test_same_timestamp_is_idempotent(self, chain, pair):
        add_liquidity(pair, WALLET, expand_to_18_decimals(1), expand_to_18_decimals(2))
        chain.advance(5)
        pair.sync()
        cumulatives = (pair.price0_cumulative_last, pair.price1_cumulative_last)

        pair.sync()

        assert (pair.price0_cumulative_last, pair.price1_cumulative_last) == cumulatives

    def test_overflow_rolls_back(self):
        chain, _, pair = make_pair(supply=2**113)
        pair.token0.transfer(WALLET, pair.address, UINT112_MAX + 1)

        with pytest.raises(ReserveOverflowError):
            pair.sync()

        assert pair.get_reserves() == (0, 0, 0)
        assert chain.events_of(Sync) == []


class TestPriceAccumulation:
    def test_cumulative_prices_across_swap(self, chain, pair, token0):
        amount = expand_to_18_decimals(3)
        add_liquidity(pair, WALLET, amount, amount)
        block_timestamp = pair.get_reserves()[2]
        initial_price = UQ112x112.encode(amount).uqdiv(amount)
        assert initial_price.value == Q112

        chain.set_time(block_timestamp + 1)
        pair.sync()
        assert pair.price0_cumulative_last == initial_price.value
        assert pair.price1_cumulative_last == initial_price.value
        assert pair.get_reserves()[2] == block_timestamp + 1

        swap_amount = expand_to_18_decimals(3)
        token0.transfer(WALLET, pair.address, swap_amount)
        chain.set_time(block_timestamp + 10)
        # Swap to a price of 1:3
        pair.swap(0, expand_to_18_decimals(1), WALLET)
        assert pair.price0_cumulative_last == initial_price.value * 10
        assert pair.price1_cumulative_last == initial_price.value * 10
        assert pair.get_reserves()[2] == block_timestamp + 10

        chain.set_time(block_timestamp + 20)
        pair.sync()
        new_price0 = UQ112x112.encode(expand_to_18_decimals(2)).uqdiv(expand_to_18_decimals(6))
        new_price1 = UQ112x112.encode(expand_to_18_decimals(6)).uqdiv(expand_to_18_decimals(2))
        assert pair.price0_cumulative_last == initial_price.value * 10 + new_price0.value * 10
        assert pair.price1_cumulative_last == initial_price.value * 10 + new_price1.value * 10
        assert pair.get_reserves()[2] == block_timestamp + 20

    def test_timestamp_wraparound(self):
        """Elapsed time is computed modulo 2**32."""
        chain, _, pair = make_pair(start_time=2**32 - 5)
        add_liquidity(pair, WALLET, expand_to_18_decimals(1), expand_to_18_decimals(2))
        assert pair.get_reserves()[2] == 2**32 - 5

        chain.advance(10)
        pair.sync()

        assert pair.get_reserves()[2] == 5
        assert pair.price0_cumulative_last == 2 * Q112 * 10
        assert pair.price1_cumulative_last == (Q112 // 2) * 10

    def test_first_deposit_does_not_accumulate(self, pair):
        add_liquidity(pair, WALLET, expand_to_18_decimals(1), expand_to_18_decimals(2))
        assert pair.price0_cumulative_last == 0
        assert pair.price1_cumulative_last == 0
