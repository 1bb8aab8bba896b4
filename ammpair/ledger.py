"""Fungible balance bookkeeping.

FungibleLedger is the generic transfer/approve/balance ledger. ClaimLedger
specializes it as the pair's Liquidity Claim Ledger: claims are created and
destroyed only by the pair, through mint_claims and burn_claims.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field

from ammpair.chain import Chain
from ammpair.constants import ZERO_ADDRESS
from ammpair.errors import (
    InsufficientAllowanceError,
    InsufficientBalanceError,
    LockedBalanceError,
)
from ammpair.models.events import Approval, Transfer
from ammpair.models.types import normalize_address, require_uint
from ammpair.safe_int import UINT256_MAX, S


@dataclass
class LedgerState:
    """Mutable state of a fungible ledger."""

    total_supply: int = 0
    balances: dict[str, int] = field(default_factory=dict)
    allowances: dict[tuple[str, str], int] = field(default_factory=dict)


class FungibleLedger:
    """Balances, allowances and total supply of one fungible token.

    Holders are addresses, normalized to lowercase. Missing entries read
    as zero; balances never go negative.
    """

    def __init__(self, chain: Chain, address: str, name: str, symbol: str, decimals: int = 18):
        self.chain = chain
        self.address = normalize_address(address, validate=True)
        self.name = name
        self.symbol = symbol
        self.decimals = decimals
        self._state = LedgerState()

    @property
    def total_supply(self) -> int:
        return self._state.total_supply

    def balance_of(self, holder: str) -> int:
        return self._state.balances.get(normalize_address(holder), 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self._state.allowances.get((normalize_address(owner), normalize_address(spender)), 0)

    def transfer(self, sender: str, recipient: str, amount: int) -> None:
        """Move amount from sender to recipient.

        Raises:
            InsufficientBalanceError: If sender holds less than amount
            LockedBalanceError: If sender is the zero address
        """
        self._transfer(normalize_address(sender), normalize_address(recipient), amount)

    def approve(self, owner: str, spender: str, amount: int) -> None:
        owner, spender = normalize_address(owner), normalize_address(spender)
        self._state.allowances[(owner, spender)] = require_uint("amount", amount)
        self.chain.emit(Approval(address=self.address, owner=owner, spender=spender, value=amount))

    def transfer_from(self, spender: str, owner: str, recipient: str, amount: int) -> None:
        """Move amount from owner to recipient on behalf of spender.

        An allowance of 2**256 - 1 is treated as infinite and never decremented.

        Raises:
            InsufficientAllowanceError: If the allowance is below amount
            InsufficientBalanceError: If owner holds less than amount
            LockedBalanceError: If owner is the zero address
        """
        spender, owner = normalize_address(spender), normalize_address(owner)
        require_uint("amount", amount)
        allowed = self.allowance(owner, spender)
        if allowed != UINT256_MAX and allowed < amount:
            raise InsufficientAllowanceError(
                f"{spender} may spend {allowed} of {owner}'s {self.symbol}, requested {amount}"
            )
        self._transfer(owner, normalize_address(recipient), amount)
        if allowed != UINT256_MAX:
            self._state.allowances[(owner, spender)] = allowed - amount

    # --- Internal supply changes ---

    def _transfer(self, sender: str, recipient: str, amount: int) -> None:
        require_uint("amount", amount)
        if sender == ZERO_ADDRESS:
            raise LockedBalanceError(f"{self.symbol} held by the zero address cannot be moved")
        balances = self._state.balances
        held = balances.get(sender, 0)
        if held < amount:
            raise InsufficientBalanceError(
                f"{sender} holds {held} {self.symbol}, cannot transfer {amount}"
            )
        balances[sender] = held - amount
        balances[recipient] = balances.get(recipient, 0) + amount
        self.chain.emit(
            Transfer(address=self.address, sender=sender, recipient=recipient, value=amount)
        )

    def _mint(self, holder: str, amount: int) -> None:
        holder = normalize_address(holder)
        require_uint("amount", amount)
        self._state.total_supply = (S(self._state.total_supply) + amount).to_uint256()
        self._state.balances[holder] = self._state.balances.get(holder, 0) + amount
        self.chain.emit(
            Transfer(address=self.address, sender=ZERO_ADDRESS, recipient=holder, value=amount)
        )

    def _burn(self, holder: str, amount: int) -> None:
        holder = normalize_address(holder)
        require_uint("amount", amount)
        held = self._state.balances.get(holder, 0)
        if held < amount:
            raise InsufficientBalanceError(f"{holder} holds {held} {self.symbol}, cannot burn {amount}")
        self._state.balances[holder] = held - amount
        self._state.total_supply -= amount
        self.chain.emit(
            Transfer(address=self.address, sender=holder, recipient=ZERO_ADDRESS, value=amount)
        )

    # --- Stateful ---

    def snapshot(self) -> LedgerState:
        return copy.deepcopy(self._state)

    def restore(self, state: object) -> None:
        if not isinstance(state, LedgerState):
            raise TypeError(f"Expected LedgerState, got {type(state).__name__}")
        self._state = copy.deepcopy(state)


class ClaimLedger(FungibleLedger):
    """Liquidity claims of a pair, co-located with it at the pair's address.

    The ledger is not deployed on its own; its state is captured and
    restored as part of the owning pair's snapshot.
    """

    def mint_claims(self, holder: str, amount: int) -> None:
        """Issue amount new claims to holder."""
        self._mint(holder, amount)

    def burn_claims(self, holder: str, amount: int) -> None:
        """Destroy amount of holder's claims.

        Raises:
            InsufficientBalanceError: If holder has fewer than amount claims
        """
        self._burn(holder, amount)
