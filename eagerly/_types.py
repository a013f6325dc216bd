"""
Core types for eagerly.

Re-exports from kungfu + custom type aliases.
"""

from __future__ import annotations

import asyncio
from typing import Protocol

# Re-export from kungfu
from kungfu import Result, Ok, Error, Option, Some, Nothing

# ═══════════════════════════════════════════════════════════════════════════════
# Maybe-Async Aliases
# ═══════════════════════════════════════════════════════════════════════════════

type MaybeAsync[T] = T | asyncio.Future[T]
"""A plain value, or a future that will settle to one."""

# ═══════════════════════════════════════════════════════════════════════════════
# Cancellation
# ═══════════════════════════════════════════════════════════════════════════════


class Cancellable(Protocol):
    """Anything exposing a `cancelled` flag."""

    @property
    def cancelled(self) -> bool: ...


class CancellationSignal:
    """
    Per-evaluation cancellation flag.

    The graph cancels the signal of an evaluation once its result is
    being discarded (e.g. the node re-evaluated).

    Example:
        signal = CancellationSignal()
        signal.cancel()
        assert signal.cancelled
    """

    __slots__ = ("_cancelled",)

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def __repr__(self) -> str:
        return f"CancellationSignal(cancelled={self._cancelled})"


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    # Re-exports from kungfu
    "Result",
    "Ok",
    "Error",
    "Option",
    "Some",
    "Nothing",
    # Aliases
    "MaybeAsync",
    # Cancellation
    "Cancellable",
    "CancellationSignal",
)
