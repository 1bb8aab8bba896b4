"""Single-slot reentrancy lock."""

from __future__ import annotations

from types import TracebackType

from ammpair.errors import ReentrancyError


class ReentrancyGuard:
    """Lock held for the duration of one pair operation.

    Used as a context manager: entering while held raises ReentrancyError,
    and the lock is released on every exit path, including exceptions.
    """

    __slots__ = ("_locked",)

    def __init__(self) -> None:
        self._locked = False

    @property
    def locked(self) -> bool:
        return self._locked

    def __enter__(self) -> ReentrancyGuard:
        if self._locked:
            raise ReentrancyError()
        self._locked = True
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self._locked = False
