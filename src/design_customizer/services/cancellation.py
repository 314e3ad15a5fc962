"""Single-slot cancellation for remote processing calls.

Every processing call runs under a `CancellationToken` handed out by the
`CancellationCoordinator`. Beginning a new call cancels the active token and
bumps the generation counter, so a response that arrives for an older token
is recognised as stale and dropped instead of being applied.
"""

import asyncio
from collections.abc import Awaitable
from dataclasses import dataclass, field
from typing import TypeVar

from design_customizer.domain.images import ProcessingOperation
from design_customizer.errors import ProcessingCancelledError

T = TypeVar("T")


class CancellationToken:
    """Cancellation signal for one processing call."""

    def __init__(self, generation: int, operation: ProcessingOperation) -> None:
        self.generation = generation
        self.operation = operation
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        """Return true once the call has been superseded or stopped."""
        return self._event.is_set()

    def cancel(self) -> None:
        """Signal cancellation to the call holding this token."""
        self._event.set()

    def raise_if_cancelled(self) -> None:
        """Raise `ProcessingCancelledError` when the token is cancelled."""
        if self.cancelled:
            raise ProcessingCancelledError(
                f"{self.operation} call #{self.generation} was cancelled"
            )

    async def run(self, awaitable: Awaitable[T]) -> T:
        """Await work, abandoning it as soon as the token is cancelled."""
        work = asyncio.ensure_future(awaitable)
        if self.cancelled:
            work.cancel()
            self.raise_if_cancelled()
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            done, _ = await asyncio.wait(
                {work, waiter}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            waiter.cancel()
            if not work.done():
                work.cancel()
        if work not in done:
            self.raise_if_cancelled()
        return work.result()

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else "active"
        return f"CancellationToken({self.operation}, #{self.generation}, {state})"


@dataclass
class CancellationCoordinator:
    """Ensures at most one processing call is in flight."""

    generation: int = 0
    _active: CancellationToken | None = field(default=None, init=False)

    @property
    def in_flight(self) -> ProcessingOperation | None:
        """Operation of the active call, if one is running."""
        return self._active.operation if self._active else None

    def begin(self, operation: ProcessingOperation) -> CancellationToken:
        """Cancel the active call and hand out a token for a new one."""
        self.cancel()
        self.generation += 1
        self._active = CancellationToken(self.generation, operation)
        return self._active

    def cancel(self) -> bool:
        """Cancel the active call; return true if one was running."""
        token = self._active
        if token is None:
            return False
        self._active = None
        token.cancel()
        return True

    def is_current(self, token: CancellationToken) -> bool:
        """Return true when the token's result may still be applied."""
        return token is self._active and not token.cancelled

    def finish(self, token: CancellationToken) -> None:
        """Mark the token's call as resolved."""
        if token is self._active:
            self._active = None
