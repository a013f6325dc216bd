"""
Lift — bridges from maybe-async values into kungfu monads.

Re-exports the lifting helpers of combinators.lift used alongside.
"""

from __future__ import annotations

import asyncio
from typing import Any

from kungfu import Error, LazyCoroResult, Nothing, Ok, Option, Result, Some

from combinators.lift import (
    pure,
    fail,
    catching_async,
)

from eagerly._types import MaybeAsync
from eagerly.settle import Fulfilled, Rejected, get_settlement, is_async_value


# ═══════════════════════════════════════════════════════════════════════════════
# Awaitable bridge
# ═══════════════════════════════════════════════════════════════════════════════


def from_maybe_async[T](value: MaybeAsync[T]) -> LazyCoroResult[T, Exception]:
    """
    Lift a plain value or a future into LazyCoroResult.

    A rejected future becomes Error(exc); cancellation is not caught.

    Example:
        result = await from_maybe_async(store.get(total))
        match result:
            case Ok(value): ...
            case Error(exc): ...
    """
    if not is_async_value(value):
        return pure(value)

    fut: asyncio.Future[T] = value  # type: ignore[assignment]

    async def wait() -> T:
        return await fut

    return catching_async(wait, on_error=lambda exc: exc)


# ═══════════════════════════════════════════════════════════════════════════════
# Snapshot
# ═══════════════════════════════════════════════════════════════════════════════


def to_option(value: Any) -> Option[Result[Any, BaseException]]:
    """
    Current settlement as an Option, without waiting.

    Nothing() while pending, Some(Ok(v)) for plain values and fulfilled
    futures, Some(Error(exc)) for rejected ones.
    """
    match get_settlement(value):
        case None:
            return Some(Ok(value))
        case Fulfilled(result):
            return Some(Ok(result))
        case Rejected(reason):
            return Some(Error(reason))
        case _:
            return Nothing()


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    # From combinators.lift
    "pure",
    "fail",
    "catching_async",
    # Eagerly additions
    "from_maybe_async",
    "to_option",
)
