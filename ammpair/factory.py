"""Pair factory: one pair per asset combination, plus the protocol fee switch.

The factory is the registry pairs consult for the fee recipient. fee_to is
None while the protocol fee is off; only fee_to_setter may change it.
"""

from __future__ import annotations

import structlog

from ammpair.chain import Chain
from ammpair.config import DEFAULT_PAIR_CONFIG, PairConfig
from ammpair.constants import ZERO_ADDRESS
from ammpair.errors import (
    ForbiddenError,
    IdenticalAddressesError,
    PairExistsError,
    ZeroAddressError,
)
from ammpair.library import sort_tokens
from ammpair.models.events import PairCreated
from ammpair.models.types import normalize_address
from ammpair.pair import Pair
from ammpair.tokens import FungibleAsset

logger = structlog.get_logger()


class PairFactory:
    """Creates pairs and supplies them with the protocol fee recipient."""

    def __init__(
        self,
        chain: Chain,
        fee_to_setter: str,
        config: PairConfig = DEFAULT_PAIR_CONFIG,
        address: str | None = None,
    ) -> None:
        self.chain = chain
        self.config = config
        self.address = normalize_address(
            address if address is not None else chain.new_address("factory"), validate=True
        )
        self.fee_to_setter = normalize_address(fee_to_setter, validate=True)
        self._fee_to: str | None = None
        # Keyed by (token0, token1) in canonical order
        self._pairs: dict[tuple[str, str], Pair] = {}
        self.all_pairs: list[Pair] = []
        chain.deploy(self)

    @property
    def fee_to(self) -> str | None:
        return self._fee_to

    def get_pair(self, token_a: str, token_b: str) -> Pair | None:
        """Look up a pair by its assets, in either order."""
        if normalize_address(token_a) == normalize_address(token_b):
            return None
        return self._pairs.get(sort_tokens(token_a, token_b))

    def create_pair(self, asset_a: FungibleAsset, asset_b: FungibleAsset) -> Pair:
        """Deploy the pair for two assets.

        Raises:
            IdenticalAddressesError: If both assets are the same
            ZeroAddressError: If either asset is the zero address
            PairExistsError: If the pair was already created
        """
        address_a = normalize_address(asset_a.address)
        address_b = normalize_address(asset_b.address)
        if address_a == address_b:
            raise IdenticalAddressesError(f"Cannot pair {address_a} with itself")
        token0, token1 = sort_tokens(address_a, address_b)
        if token0 == ZERO_ADDRESS:
            raise ZeroAddressError("Asset cannot be the zero address")
        if (token0, token1) in self._pairs:
            raise PairExistsError(f"Pair {token0}/{token1} already exists")

        pair = Pair(self.chain, self, asset_a, asset_b, config=self.config)
        self._pairs[(token0, token1)] = pair
        self.all_pairs.append(pair)
        self.chain.emit(
            PairCreated(
                address=self.address,
                token0=token0,
                token1=token1,
                pair=pair.address,
                index=len(self.all_pairs),
            )
        )
        logger.info("pair_created", pair=pair.address, token0=token0, token1=token1)
        return pair

    def set_fee_to(self, caller: str, fee_to: str | None) -> None:
        """Set the protocol fee recipient; None turns the protocol fee off.

        Raises:
            ForbiddenError: If caller is not fee_to_setter
        """
        self._require_setter(caller)
        self._fee_to = normalize_address(fee_to, validate=True) if fee_to is not None else None
        logger.info("fee_to_changed", factory=self.address, fee_to=self._fee_to)

    def set_fee_to_setter(self, caller: str, fee_to_setter: str) -> None:
        """Hand the fee switch over to another account.

        Raises:
            ForbiddenError: If caller is not fee_to_setter
        """
        self._require_setter(caller)
        self.fee_to_setter = normalize_address(fee_to_setter, validate=True)
        logger.info("fee_to_setter_changed", factory=self.address, fee_to_setter=self.fee_to_setter)

    def _require_setter(self, caller: str) -> None:
        if normalize_address(caller) != self.fee_to_setter:
            raise ForbiddenError(f"{caller} is not the fee_to_setter")
