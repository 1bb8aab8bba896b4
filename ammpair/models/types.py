"""Identity and amount types shared by pair events and API payloads.

Accounts, assets and pairs are all identified by 20-byte hex addresses and
compared in lowercase. Reserves, claim supplies and cumulative prices are
uint256 and cross the API boundary as decimal strings, since they exceed the
range JSON numbers carry safely.
"""

import re
from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from ammpair.safe_int import UINT256_MAX

ADDRESS_PATTERN = r"^0x[0-9a-fA-F]{40}$"
_ADDRESS_RE = re.compile(ADDRESS_PATTERN)


def _check_uint256(name: str, value: int) -> int:
    if value < 0 or value > UINT256_MAX:
        raise ValueError(f"{name} out of uint256 range: {value}")
    return value


def amount_as_decimal(value: Any) -> str:
    """Coerce a reserve, claim or accumulator reading to its decimal-string form.

    Raises:
        ValueError: If the value is not a uint256 int or decimal string
    """
    if isinstance(value, str):
        if not value.isdigit():
            raise ValueError(f"Amount must be a decimal integer string: '{value}'")
        return str(_check_uint256("amount", int(value)))
    if isinstance(value, int) and not isinstance(value, bool):
        return str(_check_uint256("amount", value))
    raise ValueError(f"Amount must be int or decimal string, got {type(value).__name__}")


# Account, asset or pair identity
Address = Annotated[str, Field(pattern=ADDRESS_PATTERN)]

# Reserve, claim supply or cumulative price, serialized as a decimal string
Uint256 = Annotated[
    str,
    BeforeValidator(amount_as_decimal),
    Field(description="uint256 amount as a decimal string"),
]


def is_valid_address(address: object) -> bool:
    """Whether address is 0x followed by 40 hex digits (any case)."""
    return isinstance(address, str) and _ADDRESS_RE.fullmatch(address) is not None


def normalize_address(address: str, *, validate: bool = False) -> str:
    """Lowercase an address, adding the 0x prefix if missing.

    Raises:
        ValueError: If validate is set and the result is not a valid address
    """
    normalized = address.lower()
    if not normalized.startswith("0x"):
        normalized = "0x" + normalized
    if validate and not is_valid_address(normalized):
        raise ValueError(f"Invalid address: {address!r}")
    return normalized


def address_key(address: str) -> int:
    """Numeric value of an address; token0 is the asset with the lower key."""
    return int(normalize_address(address, validate=True), 16)


def require_uint(name: str, value: int) -> int:
    """Validate an amount argument of a ledger or pair operation.

    Raises:
        ValueError: If value is not an int within uint256
    """
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"{name} must be an int, got {type(value).__name__}")
    return _check_uint256(name, value)
