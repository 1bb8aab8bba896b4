"""Protocol constants for the pair core.

Centralizes well-known addresses and protocol parameters.
"""

from ammpair.models.types import is_valid_address

# Claims locked forever on the first mint, in the smallest claim unit
MINIMUM_LIQUIDITY = 10**3

# Trading fee: 19 / 10000 = 0.19% of the input is withheld from the invariant
FEE_NUMERATOR = 19
FEE_DENOMINATOR = 10_000

# Protocol fee mint: totalSupply * (rootK - rootKLast) / (rootK * DIVISOR + rootKLast)
# The protocol receives 1 / (DIVISOR + 1) of the growth in sqrt(k)
PROTOCOL_FEE_DIVISOR = 18

# Block timestamps and the accumulators wrap at these widths
TIMESTAMP_BITS = 32
CUMULATIVE_BITS = 256


def _validate_address(name: str, address: str) -> str:
    """Validate and return a well-known address.

    Raises:
        ValueError: If the address is invalid
    """
    if not is_valid_address(address):
        raise ValueError(f"Invalid {name} address: {address} (must be 0x + 40 hex chars)")
    return address


# Unspendable sink for MINIMUM_LIQUIDITY and the source/target of claim mints/burns
ZERO_ADDRESS = _validate_address("zero", "0x" + "00" * 20)
