"""Tests for Pair.skim."""

import pytest

from tests.helpers import OTHER, WALLET, add_liquidity, expand_to_18_decimals


class TestSkim:
    def test_sends_excess(self, pair, token0, token1):
        add_liquidity(pair, WALLET, expand_to_18_decimals(1), expand_to_18_decimals(1))
        token0.transfer(WALLET, pair.address, 123)
        token1.transfer(WALLET, pair.address, 7)
        reserves = pair.get_reserves()

        assert pair.skim(OTHER) == (123, 7)

        assert token0.balance_of(OTHER) == 123
        assert token1.balance_of(OTHER) == 7
        assert pair.get_reserves() == reserves

    def test_nothing_to_skim(self, pair, token0):
        add_liquidity(pair, WALLET, expand_to_18_decimals(1), expand_to_18_decimals(1))
        assert pair.skim(OTHER) == (0, 0)
        assert token0.balance_of(OTHER) == 0

    def test_invalid_recipient_address(self, pair, token0):
        add_liquidity(pair, WALLET, expand_to_18_decimals(1), expand_to_18_decimals(1))
        token0.transfer(WALLET, pair.address, 123)

        with pytest.raises(ValueError, match="Invalid address"):
            pair.skim("0x1234")

        assert token0.balance_of(pair.address) == expand_to_18_decimals(1) + 123
