"""Tests for address and amount types."""

import pytest
from pydantic import BaseModel, ValidationError

from ammpair.models.types import (
    Address,
    Uint256,
    address_key,
    amount_as_decimal,
    is_valid_address,
    normalize_address,
    require_uint,
)
from ammpair.safe_int import UINT256_MAX
from tests.helpers import TOKEN_A, TOKEN_B


class _Reading(BaseModel):
    pair: Address
    reserve: Uint256


class TestAddresses:
    def test_normalize_lowercases_and_prefixes(self):
        assert normalize_address("AA" * 20) == TOKEN_A
        assert normalize_address("0x" + "BB" * 20, validate=True) == TOKEN_B

    @pytest.mark.parametrize("address", ["0x1234", "not-an-address", "0x" + "g" * 40])
    def test_validate_rejects_malformed(self, address):
        assert not is_valid_address(address)
        with pytest.raises(ValueError, match="Invalid address"):
            normalize_address(address, validate=True)

    def test_non_string_is_not_an_address(self):
        assert not is_valid_address(0xAA)

    def test_key_orders_assets(self):
        assert address_key(TOKEN_A) < address_key(TOKEN_B)


class TestAmounts:
    def test_decimal_string_is_canonical(self):
        assert amount_as_decimal("007") == "7"
        assert amount_as_decimal(UINT256_MAX) == str(UINT256_MAX)

    @pytest.mark.parametrize("value", ["-1", "abc", "", 1.5, True, -1, UINT256_MAX + 1])
    def test_rejects_non_uint256(self, value):
        with pytest.raises(ValueError):
            amount_as_decimal(value)

    def test_model_fields(self):
        reading = _Reading(pair=TOKEN_A, reserve=2**112)
        assert reading.reserve == str(2**112)
        with pytest.raises(ValidationError):
            _Reading(pair="0x1234", reserve=1)
        with pytest.raises(ValidationError):
            _Reading(pair=TOKEN_A, reserve="-5")

    def test_require_uint(self):
        assert require_uint("amount", 0) == 0
        with pytest.raises(ValueError, match="amount must be an int"):
            require_uint("amount", "1")  # type: ignore[arg-type]
        with pytest.raises(ValueError, match="out of uint256 range"):
            require_uint("amount", -1)
