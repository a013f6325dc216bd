"""
resolve_eagerly() — run a synchronous-style read, retrying on suspension.

Each attempt runs the whole read from the top: there is no saved
position to resume from. Read functions must therefore be free of side
effects observable across retries.

Per attempt:

    Running ──► Returned     plain value, returned as-is
            ──► Failed       rejected future
            ──► Suspended ──► Running   dependency settled, retry
                          ──► Aborted   signal cancelled, resolves to None
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from eagerly._types import Cancellable
from eagerly.settle import (
    Fulfilled,
    Rejected,
    new_future,
    record_settlement,
    rejected,
    resolve_into,
    settle_into,
)
from eagerly.eager._getter import EagerGetter
from eagerly.eager._policy import DEFAULT_POLICY, EagerPolicy, RetryLimitExceeded
from eagerly.eager._signal import Suspended

logger = logging.getLogger(__name__)

type EagerRead[T] = Callable[[EagerGetter], T]

# ═══════════════════════════════════════════════════════════════════════════════
# resolve_eagerly()
# ═══════════════════════════════════════════════════════════════════════════════


def resolve_eagerly[T](
    read: EagerRead[T],
    get: Callable[[Any], Any],
    signal: Cancellable,
    *,
    policy: EagerPolicy = DEFAULT_POLICY,
) -> T | asyncio.Future[T]:
    """
    Value of `read(get)`, synchronously when every dependency it touches
    is known, as a future otherwise.

    `get` is an EagerGetter or a raw graph getter (wrapped automatically).
    Failures, synchronous or not, come back as rejected futures.

    Example:
        result = resolve_eagerly(lambda get: get(x) * 2, store_getter, signal)
    """
    return _attempt(read, EagerGetter.wrap(get), signal, policy, 0)


def _attempt[T](
    read: EagerRead[T],
    get: EagerGetter,
    signal: Cancellable,
    policy: EagerPolicy,
    retries: int,
) -> Any:
    try:
        value = read(get)
    except Suspended as suspension:
        return _suspend(read, get, signal, policy, retries, suspension.pending)
    except (Exception, asyncio.CancelledError) as exc:
        return rejected(exc)

    if asyncio.iscoroutine(value):
        value.close()
        return rejected(TypeError("Eager read functions must be synchronous, got a coroutine"))
    return value


def _suspend[T](
    read: EagerRead[T],
    get: EagerGetter,
    signal: Cancellable,
    policy: EagerPolicy,
    retries: int,
    pending: asyncio.Future[Any],
) -> asyncio.Future[T]:
    out: asyncio.Future[T] = new_future()
    logger.debug("read suspended on %r (retry %d)", pending, retries)

    def on_settled(fut: asyncio.Future[Any]) -> None:
        settlement = record_settlement(fut)
        if out.done():
            return
        if signal.cancelled:
            logger.debug("read cancelled after %r settled, not retrying", fut)
            out.set_result(None)  # type: ignore[arg-type]
            return
        match settlement:
            case Rejected():
                settle_into(out, settlement)
            case Fulfilled():
                if policy.max_retries is not None and retries >= policy.max_retries:
                    logger.debug("read hit retry limit (%d)", policy.max_retries)
                    settle_into(out, Rejected(RetryLimitExceeded(retries)))
                    return
                resolve_into(out, _attempt(read, get, signal, policy, retries + 1))

    pending.add_done_callback(on_settled)
    return out


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = ("resolve_eagerly", "EagerRead")
