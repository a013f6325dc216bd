from __future__ import annotations

import asyncio
import contextvars
from typing import Any


def deferred[T]() -> asyncio.Future[T]:
    """Unsettled future on the running loop, settled by the test."""
    return asyncio.get_running_loop().create_future()


class CountingFuture(asyncio.Future):
    """Future that counts done-callback subscriptions."""

    def __init__(self, *, loop: asyncio.AbstractEventLoop | None = None) -> None:
        super().__init__(loop=loop or asyncio.get_running_loop())
        self.callbacks_added = 0

    def add_done_callback(self, fn: Any, *, context: contextvars.Context | None = None) -> None:
        self.callbacks_added += 1
        if context is None:
            context = contextvars.copy_context()
        super().add_done_callback(fn, context=context)


async def ticks(n: int = 10) -> None:
    """Let pending done-callbacks (and the ones they schedule) run."""
    for _ in range(n):
        await asyncio.sleep(0)
