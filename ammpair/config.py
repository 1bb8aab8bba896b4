"""Pair configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

from ammpair.constants import (
    FEE_DENOMINATOR,
    FEE_NUMERATOR,
    MINIMUM_LIQUIDITY,
    PROTOCOL_FEE_DIVISOR,
)


@dataclass(frozen=True)
class PairConfig:
    """Centralized configuration for pair arithmetic.

    Attributes:
        fee_numerator: Share of each input withheld from the invariant (default: 19)
        fee_denominator: Fee base (default: 10,000, so the fee is 0.19%)
        protocol_fee_divisor: D in totalSupply * (rootK - rootKLast) / (rootK * D + rootKLast).
            The protocol receives 1 / (D + 1) of the growth in sqrt(k) (default: 18)
        minimum_liquidity: Claims locked in the zero address on the first mint
        claim_name: Display name of the liquidity claim token
        claim_symbol: Ticker of the liquidity claim token
        claim_decimals: Decimals of the liquidity claim token
    """

    fee_numerator: int = FEE_NUMERATOR
    fee_denominator: int = FEE_DENOMINATOR
    protocol_fee_divisor: int = PROTOCOL_FEE_DIVISOR
    minimum_liquidity: int = MINIMUM_LIQUIDITY

    claim_name: str = "AMM Pair Liquidity"
    claim_symbol: str = "AMM-LP"
    claim_decimals: int = 18

    def __post_init__(self) -> None:
        if self.fee_denominator <= 0:
            raise ValueError(f"fee_denominator must be positive, got {self.fee_denominator}")
        if not 0 <= self.fee_numerator < self.fee_denominator:
            raise ValueError(
                f"fee_numerator must be in [0, {self.fee_denominator}), got {self.fee_numerator}"
            )
        if self.protocol_fee_divisor <= 0:
            raise ValueError(
                f"protocol_fee_divisor must be positive, got {self.protocol_fee_divisor}"
            )
        if self.minimum_liquidity <= 0:
            raise ValueError(f"minimum_liquidity must be positive, got {self.minimum_liquidity}")

    @property
    def fee_multiplier(self) -> int:
        """Share of the input counted toward the invariant (fee_denominator - fee_numerator).

        For 19 / 10000, this returns 9981.
        """
        return self.fee_denominator - self.fee_numerator

    @classmethod
    def from_env(cls) -> PairConfig:
        """Build a config from AMMPAIR_* environment variables, falling back to defaults."""
        return cls(
            fee_numerator=int(os.environ.get("AMMPAIR_FEE_NUMERATOR", FEE_NUMERATOR)),
            fee_denominator=int(os.environ.get("AMMPAIR_FEE_DENOMINATOR", FEE_DENOMINATOR)),
            protocol_fee_divisor=int(
                os.environ.get("AMMPAIR_PROTOCOL_FEE_DIVISOR", PROTOCOL_FEE_DIVISOR)
            ),
            minimum_liquidity=int(os.environ.get("AMMPAIR_MINIMUM_LIQUIDITY", MINIMUM_LIQUIDITY)),
        )


# Default configuration instance
DEFAULT_PAIR_CONFIG = PairConfig()
