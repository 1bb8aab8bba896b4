"""In-process execution environment for pairs and their assets.

The Chain plays the role of the surrounding runtime:
- a clock, truncated to 32-bit block timestamps
- an ordered event log
- a registry of deployed contracts, addressable by 20-byte hex identity
- all-or-nothing execution via atomic()

Operations run strictly one after another. The only nesting is a swap
callback calling back into deployed contracts, and atomic() nests with it.
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Protocol, TypeVar, runtime_checkable

import structlog

from ammpair.constants import TIMESTAMP_BITS
from ammpair.errors import UnknownContractError
from ammpair.models.events import Event
from ammpair.models.types import normalize_address

logger = structlog.get_logger()

E = TypeVar("E", bound=Event)


@runtime_checkable
class Contract(Protocol):
    """Anything deployed on a chain."""

    address: str


@runtime_checkable
class Stateful(Protocol):
    """Contract whose state is captured and restored by Chain.atomic()."""

    address: str

    def snapshot(self) -> object:
        """Return an independent copy of the mutable state."""
        ...

    def restore(self, state: object) -> None:
        """Reinstate a state previously returned by snapshot()."""
        ...


class Chain:
    """Clock, event log and contract registry shared by pairs and assets."""

    def __init__(self, timestamp: int = 0) -> None:
        if timestamp < 0:
            raise ValueError(f"timestamp must be non-negative, got {timestamp}")
        self.timestamp = timestamp
        self.events: list[Event] = []
        self._contracts: dict[str, Any] = {}
        self._nonce = 0

    # --- Clock ---

    @property
    def block_timestamp(self) -> int:
        """Current time truncated to 32 bits."""
        return self.timestamp % (1 << TIMESTAMP_BITS)

    def advance(self, seconds: int) -> int:
        """Move the clock forward and return the new timestamp."""
        if seconds < 0:
            raise ValueError(f"Cannot move the clock backwards by {seconds}s")
        self.timestamp += seconds
        return self.timestamp

    def set_time(self, timestamp: int) -> None:
        """Set the clock to an absolute timestamp not earlier than now."""
        if timestamp < self.timestamp:
            raise ValueError(f"Cannot set time to {timestamp}, already at {self.timestamp}")
        self.timestamp = timestamp

    # --- Contracts ---

    def new_address(self, seed: str) -> str:
        """Derive a fresh, deterministic address from a seed."""
        self._nonce += 1
        digest = hashlib.sha256(f"{seed}:{self._nonce}".encode()).hexdigest()
        return "0x" + digest[:40]

    def deploy(self, contract: Contract) -> None:
        """Register a contract under its address.

        Raises:
            ValueError: If the address is already taken
        """
        address = normalize_address(contract.address, validate=True)
        if address in self._contracts:
            raise ValueError(f"Address already in use: {address}")
        self._contracts[address] = contract

    def contract_at(self, address: str) -> Any:
        """Return the contract deployed at address.

        Raises:
            UnknownContractError: If nothing is deployed there
        """
        try:
            return self._contracts[normalize_address(address)]
        except KeyError:
            raise UnknownContractError(f"No contract at {address}") from None

    def is_contract(self, address: str) -> bool:
        return normalize_address(address) in self._contracts

    # --- Events ---

    def emit(self, event: Event) -> None:
        self.events.append(event)

    def events_of(self, kind: type[E], address: str | None = None) -> list[E]:
        """Events of a given type, optionally filtered by emitting address."""
        wanted = normalize_address(address) if address is not None else None
        return [
            e
            for e in self.events
            if isinstance(e, kind) and (wanted is None or e.address == wanted)
        ]

    # --- Atomicity ---

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """Run a block with all-or-nothing semantics.

        Captures every deployed Stateful contract and the event log length on
        entry. If the block raises, all of them are restored before the
        exception propagates.
        """
        saved = [
            (contract, contract.snapshot())
            for contract in self._contracts.values()
            if isinstance(contract, Stateful)
        ]
        event_count = len(self.events)
        try:
            yield
        except BaseException as exc:
            for contract, state in saved:
                contract.restore(state)
            del self.events[event_count:]
            logger.debug(
                "operation_reverted",
                error=type(exc).__name__,
                detail=str(exc),
                restored_contracts=len(saved),
            )
            raise
