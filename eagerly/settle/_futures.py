"""
Future helpers — settled constructors and chaining.

Every future created here is recorded in the current registry as soon as
its outcome is known, so downstream fast paths can read it synchronously.
"""

from __future__ import annotations

import asyncio
import atexit
from collections.abc import Callable
from typing import Any

from eagerly.settle._types import Fulfilled, Rejected
from eagerly.settle._registry import (
    is_async_value,
    record_settlement,
    set_settlement,
)

# ═══════════════════════════════════════════════════════════════════════════════
# Constructors
# ═══════════════════════════════════════════════════════════════════════════════


def new_future[T]() -> asyncio.Future[T]:
    """Fresh future on the running loop."""
    return asyncio.get_running_loop().create_future()


_idle_loop: asyncio.AbstractEventLoop | None = None


def _settled_future[T]() -> asyncio.Future[T]:
    """
    Future that is settled on creation.

    Outside a running loop it is bound to a private loop that never runs,
    so synchronous callers still get their failure as a rejection.
    """
    global _idle_loop
    try:
        return asyncio.get_running_loop().create_future()
    except RuntimeError:
        if _idle_loop is None:
            _idle_loop = asyncio.new_event_loop()
            atexit.register(_idle_loop.close)
        return _idle_loop.create_future()


def fulfilled[T](value: T) -> asyncio.Future[T]:
    """Already-fulfilled future, known to the registry."""
    fut: asyncio.Future[T] = _settled_future()
    fut.set_result(value)
    set_settlement(fut, Fulfilled(value))
    return fut


def rejected(reason: BaseException) -> asyncio.Future[Any]:
    """Already-rejected future, known to the registry."""
    fut: asyncio.Future[Any] = _settled_future()
    _reject(fut, reason)
    set_settlement(fut, Rejected(reason))
    return fut


# ═══════════════════════════════════════════════════════════════════════════════
# Settling
# ═══════════════════════════════════════════════════════════════════════════════


def _reject(out: asyncio.Future[Any], reason: BaseException) -> None:
    if isinstance(reason, asyncio.CancelledError):
        out.cancel()
    else:
        out.set_exception(reason)


def resolve_into(out: asyncio.Future[Any], value: Any) -> None:
    """
    Settle `out` with `value`, adopting its outcome if it is a future.

    No-op when `out` is already done (e.g. cancelled by its consumer).
    """
    if out.done():
        return
    if not is_async_value(value):
        out.set_result(value)
        return
    if value is out:
        out.set_exception(TypeError("Future cannot be resolved with itself"))
        return
    value.add_done_callback(lambda f: settle_into(out, record_settlement(f)))


def settle_into(out: asyncio.Future[Any], settlement: Fulfilled[Any] | Rejected) -> None:
    """Settle `out` from a settlement record."""
    if out.done():
        return
    match settlement:
        case Fulfilled(value):
            resolve_into(out, value)
        case Rejected(reason):
            _reject(out, reason)


# ═══════════════════════════════════════════════════════════════════════════════
# then() — Chain a transform after settlement
# ═══════════════════════════════════════════════════════════════════════════════


def then[T, U](
    fut: asyncio.Future[T],
    on_fulfilled: Callable[[T], U | asyncio.Future[U]],
) -> asyncio.Future[U]:
    """
    Future of `on_fulfilled(value)` once `fut` fulfills.

    Rejection and cancellation propagate untouched; an exception raised by
    `on_fulfilled` rejects the result; a returned future is adopted.

    Example:
        doubled = then(fut, lambda x: x * 2)
    """
    out: asyncio.Future[U] = new_future()

    def on_done(f: asyncio.Future[T]) -> None:
        if out.done():
            return
        match record_settlement(f):
            case Fulfilled(value):
                try:
                    result = on_fulfilled(value)
                except Exception as exc:
                    _reject(out, exc)
                    return
                resolve_into(out, result)
            case Rejected(reason):
                _reject(out, reason)

    fut.add_done_callback(on_done)
    return out


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "new_future",
    "fulfilled",
    "rejected",
    "resolve_into",
    "settle_into",
    "then",
)
