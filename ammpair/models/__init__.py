"""Pydantic models for pair events and API payloads."""

from ammpair.models.api import PairSnapshot, PairSummary, QuoteResponse
from ammpair.models.events import (
    Approval,
    Burn,
    Event,
    Mint,
    PairCreated,
    Swap,
    Sync,
    Transfer,
)

__all__ = [
    # Events
    "Event",
    "Transfer",
    "Approval",
    "Mint",
    "Burn",
    "Swap",
    "Sync",
    "PairCreated",
    # API
    "PairSummary",
    "PairSnapshot",
    "QuoteResponse",
]
