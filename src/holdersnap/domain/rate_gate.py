"""Concurrency cap for requests against a single upstream endpoint."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from types import TracebackType

    from .model import Sleep


class RateGate:
    """Polling semaphore limiting in-flight operations.

    ``acquire`` waits until fewer than ``max_concurrent`` operations hold a slot.
    There is no queue, so admission order under saturation is arbitrary. Use it as
    an async context manager so the slot is released when the guarded call fails.
    """

    def __init__(
        self,
        max_concurrent: int,
        *,
        poll_interval: float = 0.1,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1")
        self.max_concurrent = max_concurrent
        self.poll_interval = poll_interval
        self._sleep = sleep
        self._in_flight = 0

    @property
    def in_flight(self) -> int:
        return self._in_flight

    async def acquire(self) -> None:
        while self._in_flight >= self.max_concurrent:
            await self._sleep(self.poll_interval)
        self._in_flight += 1

    def release(self) -> None:
        if self._in_flight <= 0:
            raise RuntimeError("RateGate released more times than acquired")
        self._in_flight -= 1

    async def __aenter__(self) -> RateGate:
        await self.acquire()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()
