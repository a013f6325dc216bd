"""
soon_all() — tuple/sequence generalization of soon().
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from functools import partial
from typing import Any

from eagerly.settle import (
    Fulfilled,
    Rejected,
    get_settlement,
    get_fulfilled_value,
    is_known,
    new_future,
    record_settlement,
    rejected,
    settle_into,
)

# ═══════════════════════════════════════════════════════════════════════════════
# Shape
# ═══════════════════════════════════════════════════════════════════════════════


def reshape(like: Sequence[Any], values: list[Any]) -> tuple[Any, ...] | list[Any]:
    """Tuples stay tuples, every other sequence becomes a list."""
    return tuple(values) if isinstance(like, tuple) else values


# ═══════════════════════════════════════════════════════════════════════════════
# soon_all()
# ═══════════════════════════════════════════════════════════════════════════════


def soon_all(values: Sequence[Any]) -> Any:
    """
    Unwrapped `values` now if all are known, else one future of them.

    The future keeps input order regardless of settlement order and
    rejects with the first rejection to happen; a rejection already in the
    registry rejects at once. Each future element is
    recorded in the registry as it settles, so repeating the call on the
    same elements takes the synchronous path.

    Example:
        soon_all((1, 2, 3))          # (1, 2, 3)
        soon_all([1, pending, 3])    # future of [1, 2, 3]
    """
    items = list(values)
    if all(is_known(v) for v in items):
        return reshape(values, [get_fulfilled_value(v) for v in items])
    for item in items:
        match get_settlement(item):
            case Rejected(reason):
                return rejected(reason)

    out: asyncio.Future[Any] = new_future()
    results: list[Any] = list(items)
    waiting: set[int] = set()

    def on_done(idx: int, fut: asyncio.Future[Any]) -> None:
        match record_settlement(fut):
            case Fulfilled(value):
                results[idx] = value
                waiting.discard(idx)
                if not waiting and not out.done():
                    out.set_result(reshape(values, results))
            case Rejected() as failure:
                settle_into(out, failure)

    for idx, item in enumerate(items):
        match get_settlement(item):
            case None:
                continue
            case Fulfilled(value):
                results[idx] = value
            case _:
                waiting.add(idx)

    for idx in sorted(waiting):
        items[idx].add_done_callback(partial(on_done, idx))

    return out


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = ("soon_all", "reshape")
