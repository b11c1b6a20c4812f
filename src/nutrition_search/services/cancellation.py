"""Cooperative cancellation shared by every call in one search."""

import asyncio
from collections.abc import Awaitable
from dataclasses import dataclass, field
from typing import TypeVar

T = TypeVar("T")


class SearchCancelledError(Exception):
    """Raised when a search is cancelled before it completes."""


@dataclass
class CancellationToken:
    """One-shot cancellation signal for a single search invocation."""

    reason: str = "search cancelled"
    _event: asyncio.Event = field(default_factory=asyncio.Event, repr=False)

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: str | None = None) -> None:
        """Signal cancellation; later calls are no-ops."""
        if self._event.is_set():
            return
        if reason:
            self.reason = reason
        self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise SearchCancelledError(self.reason)

    async def run(self, awaitable: Awaitable[T]) -> T:
        """Await a call, abandoning it as soon as the token is cancelled."""
        task = asyncio.ensure_future(awaitable)
        if self._event.is_set():
            task.cancel()
            raise SearchCancelledError(self.reason)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            waiter.cancel()
        if self._event.is_set():
            task.cancel()
            raise SearchCancelledError(self.reason)
        return task.result()
