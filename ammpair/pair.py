"""Constant product pair: reserves, liquidity claims, TWAP oracle and protocol fee.

The pair holds custody of two assets and keeps them in balance with
reserve0 * reserve1 = k. It never pulls funds: callers transfer assets to
the pair first and then call mint or swap, and the pair infers the amounts
deposited by diffing its custody balances against its reserves.

Every public operation runs as one atomic unit under the reentrancy lock:
if any check fails, every effect (including transfers already sent out by
an optimistic swap) is rolled back before the error reaches the caller.

Trading fee (default 19 / 10000 = 0.19%):
    (balance0 * 10000 - amount0_in * 19) * (balance1 * 10000 - amount1_in * 19)
        >= reserve0 * reserve1 * 10000**2
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

import structlog

from ammpair.chain import Chain
from ammpair.config import DEFAULT_PAIR_CONFIG, PairConfig
from ammpair.constants import TIMESTAMP_BITS, ZERO_ADDRESS
from ammpair.errors import (
    InsufficientInputAmountError,
    InsufficientLiquidityBurnedError,
    InsufficientLiquidityError,
    InsufficientLiquidityMintedError,
    InsufficientOutputAmountError,
    InvalidRecipientError,
    InvariantViolationError,
    ReserveOverflowError,
)
from ammpair.guard import ReentrancyGuard
from ammpair.ledger import ClaimLedger, LedgerState
from ammpair.math import sqrt
from ammpair.models.events import Burn, Mint, Swap, Sync
from ammpair.models.types import address_key, normalize_address, require_uint
from ammpair.oracle import PriceAccumulator
from ammpair.safe_int import S
from ammpair.tokens import FungibleAsset

logger = structlog.get_logger()


@runtime_checkable
class FeeToProvider(Protocol):
    """Source of the protocol fee recipient (None disables the protocol fee)."""

    @property
    def fee_to(self) -> str | None: ...


@runtime_checkable
class SwapCallee(Protocol):
    """Contract that receives swap outputs before paying for them."""

    def on_swap(
        self,
        pair: Pair,
        sender: str,
        amount0_out: int,
        amount1_out: int,
        data: bytes,
    ) -> None: ...


@dataclass
class PairState:
    """Mutable state of a pair, captured as a unit for rollback."""

    reserve0: int = 0
    reserve1: int = 0
    block_timestamp_last: int = 0
    oracle: PriceAccumulator = field(default_factory=PriceAccumulator)
    k_last: int = 0
    claims: LedgerState = field(default_factory=LedgerState)


class Pair:
    """A two-asset constant product market.

    Created by a factory with both assets fixed; token0 is the asset with the
    lower address. Liquidity claims live in `claims`, at the pair's address.
    """

    def __init__(
        self,
        chain: Chain,
        factory: FeeToProvider,
        token_a: FungibleAsset,
        token_b: FungibleAsset,
        address: str | None = None,
        config: PairConfig = DEFAULT_PAIR_CONFIG,
    ) -> None:
        if address_key(token_a.address) > address_key(token_b.address):
            token_a, token_b = token_b, token_a
        self.chain = chain
        self.factory = factory
        self.token0 = token_a
        self.token1 = token_b
        self.config = config
        self.address = normalize_address(
            address
            if address is not None
            else chain.new_address(f"pair:{token_a.address}:{token_b.address}"),
            validate=True,
        )
        self.claims = ClaimLedger(
            chain,
            self.address,
            config.claim_name,
            config.claim_symbol,
            config.claim_decimals,
        )
        self._oracle = PriceAccumulator()
        self._reserve0 = 0
        self._reserve1 = 0
        self._block_timestamp_last = 0
        self._k_last = 0
        self._guard = ReentrancyGuard()
        chain.deploy(self)

    # --- Read-only views ---

    def get_reserves(self) -> tuple[int, int, int]:
        """Return (reserve0, reserve1, block_timestamp_last)."""
        return self._reserve0, self._reserve1, self._block_timestamp_last

    @property
    def price0_cumulative_last(self) -> int:
        return self._oracle.price0_cumulative_last

    @property
    def price1_cumulative_last(self) -> int:
        return self._oracle.price1_cumulative_last

    @property
    def k_last(self) -> int:
        """reserve0 * reserve1 after the last liquidity event, 0 while the protocol fee is off."""
        return self._k_last

    @property
    def total_supply(self) -> int:
        return self.claims.total_supply

    def balance_of(self, holder: str) -> int:
        return self.claims.balance_of(holder)

    @property
    def locked(self) -> bool:
        return self._guard.locked

    # --- Stateful ---

    def snapshot(self) -> PairState:
        return PairState(
            reserve0=self._reserve0,
            reserve1=self._reserve1,
            block_timestamp_last=self._block_timestamp_last,
            oracle=copy.copy(self._oracle),
            k_last=self._k_last,
            claims=self.claims.snapshot(),
        )

    def restore(self, state: object) -> None:
        if not isinstance(state, PairState):
            raise TypeError(f"Expected PairState, got {type(state).__name__}")
        self._reserve0 = state.reserve0
        self._reserve1 = state.reserve1
        self._block_timestamp_last = state.block_timestamp_last
        self._oracle = copy.copy(state.oracle)
        self._k_last = state.k_last
        self.claims.restore(state.claims)

    # --- Internal steps ---

    def _balances(self) -> tuple[int, int]:
        return self.token0.balance_of(self.address), self.token1.balance_of(self.address)

    def _update(self, balance0: int, balance1: int, reserve0: int, reserve1: int) -> None:
        """Accumulate prices over the elapsed interval, then overwrite reserves.

        reserve0 / reserve1 are the reserves before the current operation.

        Raises:
            ReserveOverflowError: If either balance does not fit in uint112
        """
        if not (S(balance0).is_uint112() and S(balance1).is_uint112()):
            raise ReserveOverflowError(
                f"Balances ({balance0}, {balance1}) exceed the uint112 reserve bound"
            )
        block_timestamp = self.chain.block_timestamp
        time_elapsed = (
            S(block_timestamp).wrapping_sub(self._block_timestamp_last, TIMESTAMP_BITS).value
        )
        self._oracle.accumulate(reserve0, reserve1, time_elapsed)
        self._reserve0 = balance0
        self._reserve1 = balance1
        self._block_timestamp_last = block_timestamp
        self.chain.emit(Sync(address=self.address, reserve0=balance0, reserve1=balance1))
        logger.debug(
            "reserves_synced",
            pair=self.address,
            reserve0=balance0,
            reserve1=balance1,
            time_elapsed=time_elapsed,
        )

    def _mint_fee(self, reserve0: int, reserve1: int) -> bool:
        """Mint the protocol's share of sqrt(k) growth since the last liquidity event.

        Returns:
            True if a fee recipient is configured
        """
        fee_to = self.factory.fee_to
        fee_on = fee_to is not None
        k_last = self._k_last
        if fee_on:
            if k_last != 0:
                root_k = sqrt(reserve0 * reserve1)
                root_k_last = sqrt(k_last)
                if root_k > root_k_last:
                    numerator = S(self.claims.total_supply) * (S(root_k) - root_k_last)
                    denominator = S(root_k) * self.config.protocol_fee_divisor + root_k_last
                    liquidity = (numerator // denominator).value
                    if liquidity > 0:
                        self.claims.mint_claims(fee_to, liquidity)
                        logger.info(
                            "protocol_fee_minted",
                            pair=self.address,
                            fee_to=fee_to,
                            liquidity=liquidity,
                            root_k=root_k,
                            root_k_last=root_k_last,
                        )
        elif k_last != 0:
            self._k_last = 0
        return fee_on

    # --- Operations ---

    def mint(self, to: str, *, sender: str | None = None) -> int:
        """Issue liquidity claims for assets already transferred to the pair.

        Args:
            to: Recipient of the new claims
            sender: Caller, recorded in the Mint event (defaults to to)

        Returns:
            Number of claims minted to `to`

        Raises:
            ValueError: If to or sender is not a valid address
            InsufficientLiquidityMintedError: If the deposit is worth no claims
            Underflow: If custody is below the recorded reserves
            ReserveOverflowError: If the new balances exceed uint112
        """
        to = normalize_address(to, validate=True)
        sender = normalize_address(sender, validate=True) if sender is not None else to
        with self.chain.atomic(), self._guard:
            reserve0, reserve1, _ = self.get_reserves()
            balance0, balance1 = self._balances()
            amount0 = (S(balance0) - reserve0).value
            amount1 = (S(balance1) - reserve1).value

            fee_on = self._mint_fee(reserve0, reserve1)
            total_supply = self.claims.total_supply
            minimum = self.config.minimum_liquidity
            if total_supply == 0:
                root = sqrt(amount0 * amount1)
                if root <= minimum:
                    raise InsufficientLiquidityMintedError(
                        f"sqrt({amount0} * {amount1}) = {root} does not exceed "
                        f"the {minimum} locked claims"
                    )
                liquidity = root - minimum
                # Permanently lock the first claims
                self.claims.mint_claims(ZERO_ADDRESS, minimum)
            else:
                liquidity = (
                    (S(amount0) * total_supply // reserve0)
                    .min(S(amount1) * total_supply // reserve1)
                    .value
                )
            if liquidity <= 0:
                raise InsufficientLiquidityMintedError(
                    f"Deposit ({amount0}, {amount1}) mints no liquidity"
                )
            self.claims.mint_claims(to, liquidity)

            self._update(balance0, balance1, reserve0, reserve1)
            if fee_on:
                self._k_last = self._reserve0 * self._reserve1
            self.chain.emit(Mint(address=self.address, sender=sender, amount0=amount0, amount1=amount1))

        logger.info(
            "liquidity_minted",
            pair=self.address,
            to=to,
            liquidity=liquidity,
            amount0=amount0,
            amount1=amount1,
        )
        return liquidity

    def burn(self, to: str, *, sender: str | None = None) -> tuple[int, int]:
        """Redeem the claims held by the pair itself for a pro-rata share of custody.

        The caller transfers claims to the pair's address beforehand.

        Args:
            to: Recipient of the underlying assets
            sender: Caller, recorded in the Burn event (defaults to to)

        Returns:
            Tuple of (amount0, amount1) sent to `to`

        Raises:
            ValueError: If to or sender is not a valid address
            InsufficientLiquidityBurnedError: If either amount would be zero
        """
        to = normalize_address(to, validate=True)
        sender = normalize_address(sender, validate=True) if sender is not None else to
        with self.chain.atomic(), self._guard:
            reserve0, reserve1, _ = self.get_reserves()
            balance0, balance1 = self._balances()
            liquidity = self.claims.balance_of(self.address)

            fee_on = self._mint_fee(reserve0, reserve1)
            total_supply = self.claims.total_supply
            if total_supply == 0:
                raise InsufficientLiquidityBurnedError("No liquidity has been minted")
            # Pro-rata share of actual custody, not of the stale reserves
            amount0 = (S(liquidity) * balance0 // total_supply).value
            amount1 = (S(liquidity) * balance1 // total_supply).value
            if amount0 <= 0 or amount1 <= 0:
                raise InsufficientLiquidityBurnedError(
                    f"Burning {liquidity} claims returns ({amount0}, {amount1})"
                )
            self.claims.burn_claims(self.address, liquidity)
            self.token0.transfer(self.address, to, amount0)
            self.token1.transfer(self.address, to, amount1)
            balance0, balance1 = self._balances()

            self._update(balance0, balance1, reserve0, reserve1)
            if fee_on:
                self._k_last = self._reserve0 * self._reserve1
            self.chain.emit(
                Burn(address=self.address, sender=sender, amount0=amount0, amount1=amount1, to=to)
            )

        logger.info(
            "liquidity_burned",
            pair=self.address,
            to=to,
            liquidity=liquidity,
            amount0=amount0,
            amount1=amount1,
        )
        return amount0, amount1

    def swap(
        self,
        amount0_out: int,
        amount1_out: int,
        to: str,
        data: bytes = b"",
        *,
        sender: str | None = None,
    ) -> tuple[int, int]:
        """Send outputs to `to`, optionally call it back, then require enough input.

        Inputs are whatever custody exceeds (reserve - output) once the
        callback has returned. With non-empty data, `to` must be a deployed
        SwapCallee; it may supply the input from inside on_swap (flash swap).

        Args:
            amount0_out: token0 to send to `to`
            amount1_out: token1 to send to `to`
            to: Recipient of the outputs
            data: Opaque callback payload; empty means no callback
            sender: Caller, recorded in the Swap event and passed to the callee

        Returns:
            Tuple of (amount0_in, amount1_in) inferred from custody

        Raises:
            ValueError: If an output is not a uint256 or an address is invalid
            InsufficientOutputAmountError: If both outputs are zero
            InsufficientLiquidityError: If an output is not below its reserve
            InvalidRecipientError: If `to` is one of the pair's assets
            InsufficientInputAmountError: If no input arrived
            InvariantViolationError: If the fee-adjusted product decreased
        """
        require_uint("amount0_out", amount0_out)
        require_uint("amount1_out", amount1_out)
        to = normalize_address(to, validate=True)
        sender = normalize_address(sender, validate=True) if sender is not None else to
        with self.chain.atomic(), self._guard:
            if amount0_out == 0 and amount1_out == 0:
                raise InsufficientOutputAmountError("Both outputs are zero")
            reserve0, reserve1, _ = self.get_reserves()
            if amount0_out >= reserve0 or amount1_out >= reserve1:
                raise InsufficientLiquidityError(
                    f"Outputs ({amount0_out}, {amount1_out}) not below reserves "
                    f"({reserve0}, {reserve1})"
                )
            if to in (self.token0.address, self.token1.address):
                raise InvalidRecipientError(f"Recipient {to} is an asset of the pair")

            # Optimistic transfer, validated below
            if amount0_out > 0:
                self.token0.transfer(self.address, to, amount0_out)
            if amount1_out > 0:
                self.token1.transfer(self.address, to, amount1_out)
            if data:
                callee = self.chain.contract_at(to)
                if not isinstance(callee, SwapCallee):
                    raise InvalidRecipientError(f"Recipient {to} cannot take swap callbacks")
                callee.on_swap(self, sender, amount0_out, amount1_out, data)
            balance0, balance1 = self._balances()

            amount0_in = S(balance0).saturating_sub(S(reserve0) - amount0_out).value
            amount1_in = S(balance1).saturating_sub(S(reserve1) - amount1_out).value
            if amount0_in == 0 and amount1_in == 0:
                raise InsufficientInputAmountError("No input received")

            fee_numerator = self.config.fee_numerator
            fee_denominator = self.config.fee_denominator
            balance0_adjusted = S(balance0) * fee_denominator - S(amount0_in) * fee_numerator
            balance1_adjusted = S(balance1) * fee_denominator - S(amount1_in) * fee_numerator
            if balance0_adjusted * balance1_adjusted < (
                S(reserve0) * reserve1 * (fee_denominator * fee_denominator)
            ):
                raise InvariantViolationError()

            self._update(balance0, balance1, reserve0, reserve1)
            self.chain.emit(
                Swap(
                    address=self.address,
                    sender=sender,
                    amount0_in=amount0_in,
                    amount1_in=amount1_in,
                    amount0_out=amount0_out,
                    amount1_out=amount1_out,
                    to=to,
                )
            )

        logger.info(
            "swap_executed",
            pair=self.address,
            to=to,
            amount0_in=amount0_in,
            amount1_in=amount1_in,
            amount0_out=amount0_out,
            amount1_out=amount1_out,
            flash=bool(data),
        )
        return amount0_in, amount1_in

    def skim(self, to: str) -> tuple[int, int]:
        """Send any custody in excess of the reserves to `to`.

        Returns:
            Tuple of (amount0, amount1) sent
        """
        to = normalize_address(to, validate=True)
        with self.chain.atomic(), self._guard:
            balance0, balance1 = self._balances()
            excess0 = S(balance0).saturating_sub(self._reserve0).value
            excess1 = S(balance1).saturating_sub(self._reserve1).value
            if excess0 > 0:
                self.token0.transfer(self.address, to, excess0)
            if excess1 > 0:
                self.token1.transfer(self.address, to, excess1)

        logger.info("pair_skimmed", pair=self.address, to=to, amount0=excess0, amount1=excess1)
        return excess0, excess1

    def sync(self) -> None:
        """Overwrite the reserves with the current custody balances.

        Raises:
            ReserveOverflowError: If either balance exceeds uint112
        """
        with self.chain.atomic(), self._guard:
            balance0, balance1 = self._balances()
            self._update(balance0, balance1, self._reserve0, self._reserve1)
