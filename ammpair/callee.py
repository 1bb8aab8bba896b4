"""Reference swap callee for flash swaps.

The callback payload is ABI-encoded as (address token, uint256 amount): the
asset and quantity the callee pays back to the pair from inside on_swap.

Usage:
    borrower = FlashSwapRepayer(chain, owner=wallet)
    token1.transfer(wallet, borrower.address, repayment)
    pair.swap(amount0_out, 0, borrower.address, encode_repayment(token1.address, repayment))
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from eth_abi import decode, encode  # type: ignore[attr-defined]

from ammpair.chain import Chain
from ammpair.models.types import is_valid_address, normalize_address
from ammpair.tokens import FungibleAsset

if TYPE_CHECKING:
    from ammpair.pair import Pair

logger = structlog.get_logger()

REPAYMENT_TYPES = ["address", "uint256"]


def encode_repayment(token: str, amount: int) -> bytes:
    """Encode the callback payload naming what to repay.

    Raises:
        ValueError: If token is not a valid address
    """
    if not is_valid_address(token):
        raise ValueError(f"Invalid token address: {token}")
    return encode(REPAYMENT_TYPES, [bytes.fromhex(token[2:]), amount])


def decode_repayment(data: bytes) -> tuple[str, int]:
    """Decode a payload produced by encode_repayment."""
    token, amount = decode(REPAYMENT_TYPES, data)
    return normalize_address(token), amount


class FlashSwapRepayer:
    """Callee that repays a flash swap out of its own balance.

    Records every callback it receives in `calls`. The record is part of its
    state, so callbacks of a reverted swap disappear with the swap.
    """

    def __init__(self, chain: Chain, owner: str, address: str | None = None) -> None:
        self.chain = chain
        self.owner = normalize_address(owner)
        self.address = normalize_address(
            address if address is not None else chain.new_address("flash-swap-repayer"),
            validate=True,
        )
        self.calls: list[tuple[str, int, int]] = []
        chain.deploy(self)

    def on_swap(
        self,
        pair: Pair,
        sender: str,
        amount0_out: int,
        amount1_out: int,
        data: bytes,
    ) -> None:
        token_address, amount = decode_repayment(data)
        asset: FungibleAsset = self.chain.contract_at(token_address)
        self.calls.append((sender, amount0_out, amount1_out))
        logger.debug(
            "flash_swap_repaying",
            pair=pair.address,
            token=token_address,
            amount=amount,
            amount0_out=amount0_out,
            amount1_out=amount1_out,
        )
        asset.transfer(self.address, pair.address, amount)

    def snapshot(self) -> list[tuple[str, int, int]]:
        return list(self.calls)

    def restore(self, state: object) -> None:
        if not isinstance(state, list):
            raise TypeError(f"Expected list of calls, got {type(state).__name__}")
        self.calls = list(state)
