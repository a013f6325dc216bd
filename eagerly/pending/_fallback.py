"""
with_fallback() — stale-while-pending view of a possibly asynchronous atom.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from eagerly.settle import (
    Fulfilled,
    Rejected,
    get_settlement,
    is_async_value,
    record_settlement,
)
from eagerly.store import Atom, Getter, ReadOptions, Setter, atom

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# Types
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class FallbackContext[T]:
    """
    What a fallback function gets to work with.

    prev: last fulfilled value of the source, None before the first one.
    pending: the future being waited on.
    get: graph getter, for fallbacks that consult other atoms.
    """
    prev: T | None
    pending: asyncio.Future[T]
    get: Getter


type Fallback[T, P] = Callable[[FallbackContext[T]], P]


@dataclass(frozen=True, slots=True)
class _FallbackState:
    future: asyncio.Future[Any] | None
    value: Any = None
    has_value: bool = False
    fallback: Any = None
    is_pending: bool = False


def _no_fallback(_ctx: FallbackContext[Any]) -> None:
    return None


def _refresh_on_settle(fut: asyncio.Future[Any], refresh: Callable[[], Any]) -> None:
    logger.debug("waiting on %r", fut)

    def on_settled(f: asyncio.Future[Any]) -> None:
        record_settlement(f)
        logger.debug("%r settled, refreshing", f)
        refresh()

    fut.add_done_callback(on_settled)


# ═══════════════════════════════════════════════════════════════════════════════
# with_fallback()
# ═══════════════════════════════════════════════════════════════════════════════


def with_fallback[T, P](
    source: Atom[Any],
    fallback: Fallback[T, P] = _no_fallback,
    *,
    label: str | None = None,
) -> Atom[Any]:
    """
    Atom that is always synchronous: the source's fulfilled value, or
    `fallback(ctx)` while a new future from the source is pending.

    Each distinct pending future gets exactly one settlement handler,
    which re-evaluates the wrapper once. Writes go straight to `source`.

    Example:
        user_or_loading = with_fallback(user_atom, lambda ctx: "loading")
        user_or_stale = with_fallback(user_atom, lambda ctx: ctx.prev)
    """
    name = label or (source.label and f"{source.label}:fallback")
    refresh = atom(0, label=f"{name}:refresh" if name else None, private=True)

    def read_state(get: Getter, options: ReadOptions) -> _FallbackState:
        get(refresh)
        prev: _FallbackState | None = get(state)
        value = get(source)

        if not is_async_value(value):
            return _FallbackState(future=None, value=value, has_value=True)

        match get_settlement(value):
            case Fulfilled(result):
                return _FallbackState(future=value, value=result, has_value=True)
            case Rejected(reason):
                raise reason.with_traceback(None)

        if prev is None or value is not prev.future:
            _refresh_on_settle(value, options.set_self)

        has_value = prev is not None and prev.has_value
        prev_value = prev.value if has_value else None
        # Recomputed on every re-evaluation, same future or not: a fallback
        # reading other atoms through ctx.get must follow their changes.
        return _FallbackState(
            future=value,
            value=prev_value,
            has_value=has_value,
            fallback=fallback(FallbackContext(prev_value, value, get)),
            is_pending=True,
        )

    def bump(_get: Getter, set_: Setter) -> None:
        set_(refresh, lambda count: count + 1)

    state = atom(read_state, bump, label=f"{name}:state" if name else None, private=True)

    def read(get: Getter) -> Any:
        current: _FallbackState = get(state)
        return current.fallback if current.is_pending else current.value

    def write(_get: Getter, set_: Setter, *args: Any) -> Any:
        return set_(source, *args)

    return atom(read, write, label=name)


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = ("with_fallback", "FallbackContext", "Fallback")
