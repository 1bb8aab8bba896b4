"""Pair error classes.

Every failure of a pair operation maps to exactly one of these classes.
The operation's effects are rolled back before the error reaches the caller.
"""


class PairError(Exception):
    """Base error for pair operations."""

    pass


class InsufficientLiquidityMintedError(PairError):
    """Deposit too small to mint any liquidity claims."""

    pass


class InsufficientLiquidityBurnedError(PairError):
    """Burned claims would return zero of at least one asset."""

    pass


class InsufficientOutputAmountError(PairError):
    """Swap requested zero output on both sides."""

    pass


class InsufficientInputAmountError(PairError):
    """Swap found no input on either side after the callback."""

    pass


class InsufficientLiquidityError(PairError):
    """Requested output is not strictly below the reserve."""

    pass


class InvalidRecipientError(PairError):
    """Swap recipient is one of the pair's own assets."""

    pass


class InvariantViolationError(PairError):
    """Fee-adjusted reserve product decreased ("K")."""

    def __init__(self, message: str = "K") -> None:
        super().__init__(message)


class ReentrancyError(PairError):
    """Pair operation entered while another one holds the lock."""

    def __init__(self, message: str = "LOCKED") -> None:
        super().__init__(message)


class ReserveOverflowError(PairError, OverflowError):
    """Custody balance does not fit in a uint112 reserve."""

    pass


class InsufficientBalanceError(PairError):
    """Ledger debit exceeds the holder's balance."""

    pass


class InsufficientAllowanceError(PairError):
    """transfer_from exceeds the spender's allowance."""

    pass


class LockedBalanceError(PairError):
    """Debit from the zero address, whose balance is permanently locked."""

    pass


class PeriodNotElapsedError(PairError):
    """Fixed-window oracle updated before its period elapsed."""

    pass


class UnknownContractError(LookupError):
    """No contract is deployed at the requested address."""

    pass


class FactoryError(Exception):
    """Base error for pair factory operations."""

    pass


class IdenticalAddressesError(FactoryError):
    """Both assets of a pair are the same."""

    pass


class ZeroAddressError(FactoryError):
    """An asset identity is the zero address."""

    pass


class PairExistsError(FactoryError):
    """A pair for these assets already exists."""

    pass


class ForbiddenError(FactoryError):
    """Caller is not allowed to change the fee configuration."""

    pass
