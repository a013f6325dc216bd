"""
soon() — apply a transform as soon as the input is known.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any, overload

from eagerly.settle import (
    Fulfilled,
    Rejected,
    get_settlement,
    rejected,
    then,
)

type Transform[T, U] = Callable[[T], U]

_MISSING: Any = object()

# ═══════════════════════════════════════════════════════════════════════════════
# soon() — data-first and data-last forms
# ═══════════════════════════════════════════════════════════════════════════════


@overload
def soon[T, U](data: T | asyncio.Future[T], process: Transform[T, U], /) -> U | asyncio.Future[U]: ...


@overload
def soon[T, U](process: Transform[T, U], /) -> Callable[[T | asyncio.Future[T]], U | asyncio.Future[U]]: ...


def soon(first: Any, process: Any = _MISSING, /) -> Any:
    """
    Run `process` on `data` now if `data` is known, later otherwise.

    Known means a plain value or a fulfilled future. A failing `process`
    never raises: the failure comes back as a rejected future, whichever
    path ran.

    Example:
        soon(12, lambda x: x * 2)         # 24, synchronously
        soon(pending, lambda x: x * 2)    # future of 24
        double = soon(lambda x: x * 2)    # data-last, for pipelines
        double(12)                        # 24
    """
    if process is _MISSING:
        return lambda data: _soon(data, first)
    return _soon(first, process)


def _soon(data: Any, process: Callable[[Any], Any]) -> Any:
    match get_settlement(data):
        case Rejected(reason):
            return rejected(reason)
        case Fulfilled(value):
            return _apply(process, value)
        case None:
            return _apply(process, data)
        case _:
            return then(data, process)


def _apply(process: Callable[[Any], Any], value: Any) -> Any:
    try:
        return process(value)
    except Exception as exc:
        return rejected(exc)


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = ("soon", "Transform")
