"""Pydantic models for the inspection API responses."""

from pydantic import BaseModel, Field

from ammpair.models.types import Address, Uint256


class PairSummary(BaseModel):
    """A pair and its two assets."""

    address: Address
    token0: Address
    token1: Address


class PairSnapshot(BaseModel):
    """Reserve, oracle and claim state of a pair."""

    address: Address
    token0: Address
    token1: Address
    reserve0: Uint256
    reserve1: Uint256
    block_timestamp_last: int = Field(alias="blockTimestampLast", ge=0)
    price0_cumulative_last: Uint256 = Field(alias="price0CumulativeLast")
    price1_cumulative_last: Uint256 = Field(alias="price1CumulativeLast")
    k_last: Uint256 = Field(alias="kLast")
    total_supply: Uint256 = Field(alias="totalSupply")

    model_config = {"populate_by_name": True}


class QuoteResponse(BaseModel):
    """Output of an exact-input swap against current reserves."""

    pair: Address
    token_in: Address = Field(alias="tokenIn")
    token_out: Address = Field(alias="tokenOut")
    amount_in: Uint256 = Field(alias="amountIn")
    amount_out: Uint256 = Field(alias="amountOut")

    model_config = {"populate_by_name": True}
