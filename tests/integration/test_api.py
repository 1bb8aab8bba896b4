"""Integration tests for the inspection API."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from ammpair.api.endpoints import get_factory
from ammpair.api.main import app
from ammpair.models.api import PairSnapshot, QuoteResponse
from tests.helpers import WALLET, add_liquidity, expand_to_18_decimals, make_pair


@pytest.fixture
def seeded():
    """Factory with one pair holding (5, 10) tokens of liquidity."""
    chain, factory, pair = make_pair()
    add_liquidity(pair, WALLET, expand_to_18_decimals(5), expand_to_18_decimals(10))
    return chain, factory, pair


@pytest.fixture
def client(seeded) -> Iterator[TestClient]:
    """Create a test client serving the seeded factory."""
    factory = seeded[1]
    app.dependency_overrides[get_factory] = lambda: factory
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestHealth:
    def test_health_check(self, client):
        """Health endpoint returns ok."""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestPairs:
    def test_list_pairs(self, client, seeded):
        pair = seeded[2]
        response = client.get("/pairs")
        assert response.status_code == 200
        assert response.json() == [
            {
                "address": pair.address,
                "token0": pair.token0.address,
                "token1": pair.token1.address,
            }
        ]

    def test_snapshot_uses_camel_case_and_decimal_strings(self, client, seeded):
        chain, _, pair = seeded
        response = client.get(f"/pairs/{pair.address}")
        assert response.status_code == 200

        data = response.json()
        assert data["reserve0"] == str(expand_to_18_decimals(5))
        assert data["reserve1"] == str(expand_to_18_decimals(10))
        assert data["blockTimestampLast"] == chain.block_timestamp
        assert data["price0CumulativeLast"] == "0"
        assert data["kLast"] == "0"
        assert int(data["totalSupply"]) == pair.total_supply
        PairSnapshot.model_validate(data)

    def test_snapshot_reflects_accumulators(self, client, seeded):
        chain, _, pair = seeded
        chain.advance(10)
        pair.sync()
        data = client.get(f"/pairs/{pair.address}").json()
        assert data["price0CumulativeLast"] == str(pair.price0_cumulative_last)
        assert int(data["price0CumulativeLast"]) > 0

    def test_address_is_case_insensitive(self, client, seeded):
        pair = seeded[2]
        response = client.get(f"/pairs/{pair.address.upper().replace('0X', '0x')}")
        assert response.status_code == 200

    def test_unknown_pair(self, client):
        response = client.get("/pairs/0x" + "12" * 20)
        assert response.status_code == 404

    def test_invalid_address(self, client):
        response = client.get("/pairs/not-an-address")
        assert response.status_code == 400


class TestQuote:
    def test_quote_token0_in(self, client, seeded, captured_logs):
        pair = seeded[2]
        response = client.get(
            f"/pairs/{pair.address}/quote",
            params={"tokenIn": pair.token0.address, "amountIn": str(expand_to_18_decimals(1))},
        )
        assert response.status_code == 200

        quote = QuoteResponse.model_validate(response.json())
        assert quote.token_out == pair.token1.address
        assert quote.amount_out == "1664026941864923892"
        assert "quote_served" in [log["event"] for log in captured_logs]

    def test_quote_foreign_token(self, client, seeded):
        pair = seeded[2]
        response = client.get(
            f"/pairs/{pair.address}/quote",
            params={"tokenIn": WALLET, "amountIn": "1"},
        )
        assert response.status_code == 400

    def test_quote_negative_amount(self, client, seeded):
        pair = seeded[2]
        response = client.get(
            f"/pairs/{pair.address}/quote",
            params={"tokenIn": pair.token0.address, "amountIn": "-1"},
        )
        assert response.status_code == 422
