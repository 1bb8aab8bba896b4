"""Pydantic models for events emitted by pairs, ledgers and the factory.

Every event carries the address of the contract that emitted it. Amounts are
plain ints; they are serialized as decimal strings at the API boundary.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from ammpair.models.types import Address


class Event(BaseModel):
    """Base class for all emitted events."""

    address: Address = Field(description="Emitting contract")

    model_config = ConfigDict(frozen=True)


class Transfer(Event):
    """Ledger transfer; mints come from and burns go to the zero address."""

    name: Literal["Transfer"] = "Transfer"
    sender: Address
    recipient: Address
    value: int = Field(ge=0)


class Approval(Event):
    """Allowance set by owner for spender."""

    name: Literal["Approval"] = "Approval"
    owner: Address
    spender: Address
    value: int = Field(ge=0)


class Mint(Event):
    """Liquidity added to a pair."""

    name: Literal["Mint"] = "Mint"
    sender: Address
    amount0: int = Field(ge=0)
    amount1: int = Field(ge=0)


class Burn(Event):
    """Liquidity removed from a pair."""

    name: Literal["Burn"] = "Burn"
    sender: Address
    amount0: int = Field(ge=0)
    amount1: int = Field(ge=0)
    to: Address


class Swap(Event):
    """Swap executed through a pair."""

    name: Literal["Swap"] = "Swap"
    sender: Address
    amount0_in: int = Field(ge=0)
    amount1_in: int = Field(ge=0)
    amount0_out: int = Field(ge=0)
    amount1_out: int = Field(ge=0)
    to: Address


class Sync(Event):
    """Reserves overwritten with the current custody balances."""

    name: Literal["Sync"] = "Sync"
    reserve0: int = Field(ge=0)
    reserve1: int = Field(ge=0)


class PairCreated(Event):
    """Factory deployed a new pair."""

    name: Literal["PairCreated"] = "PairCreated"
    token0: Address
    token1: Address
    pair: Address
    index: int = Field(ge=1, description="Number of pairs after this one was created")
