"""Underlying assets held in a pair's custody.

The pair only ever sees the FungibleAsset capability: query a balance and
transfer out of its own holdings. Token is an in-memory implementation
deployed on a Chain, used by simulations and tests.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import structlog

from ammpair.chain import Chain
from ammpair.ledger import FungibleLedger

logger = structlog.get_logger()


@runtime_checkable
class FungibleAsset(Protocol):
    """Transfer and balance-query capability of a custodied asset."""

    address: str

    def balance_of(self, holder: str) -> int: ...

    def transfer(self, sender: str, recipient: str, amount: int) -> None: ...


class Token(FungibleLedger):
    """Fungible asset with a fixed supply minted to its owner at deployment."""

    def __init__(
        self,
        chain: Chain,
        owner: str,
        initial_supply: int,
        name: str = "Test Token",
        symbol: str = "TT",
        decimals: int = 18,
        address: str | None = None,
    ) -> None:
        super().__init__(
            chain,
            address if address is not None else chain.new_address(f"token:{symbol}"),
            name,
            symbol,
            decimals,
        )
        chain.deploy(self)
        self._mint(owner, initial_supply)
        logger.debug(
            "token_deployed",
            token=self.address,
            symbol=symbol,
            owner=owner,
            initial_supply=initial_supply,
        )
