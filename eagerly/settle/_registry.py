"""
Settlement registry — out-of-band status of futures.

Keyed by future identity, never by value. Entries are weak: the registry
does not keep a future alive.
"""

from __future__ import annotations

import asyncio
import contextvars
import logging
import weakref
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from eagerly.settle._types import (
    Pending,
    Fulfilled,
    Rejected,
    Settlement,
    SettlementError,
)

logger = logging.getLogger(__name__)

_PENDING = Pending()

# ═══════════════════════════════════════════════════════════════════════════════
# Detection
# ═══════════════════════════════════════════════════════════════════════════════


def is_async_value(value: object) -> bool:
    """
    True for asyncio futures and tasks.

    Uses the event loop's own marker, so plain objects with a `then` or
    `add_done_callback` attribute, coroutines and None are not futures.
    """
    return asyncio.isfuture(value)


def settlement_of[T](fut: asyncio.Future[T]) -> Fulfilled[T] | Rejected:
    """Read the outcome of a done future. Cancellation counts as rejection."""
    if fut.cancelled():
        return Rejected(asyncio.CancelledError())
    exc = fut.exception()
    if exc is not None:
        return Rejected(exc)
    return Fulfilled(fut.result())


# ═══════════════════════════════════════════════════════════════════════════════
# SettlementRegistry
# ═══════════════════════════════════════════════════════════════════════════════


class SettlementRegistry:
    """
    Identity-keyed weak side table of settlement records.

    Only settled records are stored; an absent future reads as Pending.

    Example:
        registry = SettlementRegistry()
        registry.set(fut, Fulfilled(12))
        registry.get(fut)  # Fulfilled(value=12)
    """

    __slots__ = ("_records", "_label")

    def __init__(self, label: str = "registry") -> None:
        self._records: weakref.WeakKeyDictionary[
            asyncio.Future[Any], Fulfilled[Any] | Rejected
        ] = weakref.WeakKeyDictionary()
        self._label = label

    @property
    def label(self) -> str:
        return self._label

    def get(self, fut: asyncio.Future[Any]) -> Settlement[Any]:
        return self._records.get(fut, _PENDING)

    def set(self, fut: asyncio.Future[Any], record: Settlement[Any]) -> None:
        if not is_async_value(fut):
            raise TypeError(f"Settlement can only be recorded for futures, got {type(fut).__name__}")
        if isinstance(record, Pending):
            return
        existing = self._records.get(fut)
        if existing is not None:
            if existing is not record:
                logger.debug("%s: %r already settled, ignoring %r", self._label, fut, record)
            return
        self._records[fut] = record

    def record(self, fut: asyncio.Future[Any]) -> Fulfilled[Any] | Rejected:
        """Store the outcome of a done future and return the stored record."""
        self.set(fut, settlement_of(fut))
        return self._records[fut]

    def __contains__(self, fut: object) -> bool:
        try:
            return fut in self._records
        except TypeError:
            return False

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"SettlementRegistry(label={self._label!r}, settled={len(self)})"


# ═══════════════════════════════════════════════════════════════════════════════
# Scoping
# ═══════════════════════════════════════════════════════════════════════════════

_DEFAULT = SettlementRegistry(label="default")

_current: contextvars.ContextVar[SettlementRegistry | None] = contextvars.ContextVar(
    "eagerly_registry", default=None
)


def current_registry() -> SettlementRegistry:
    """Registry bound to the running context, or the process default."""
    registry = _current.get()
    return registry if registry is not None else _DEFAULT


@contextmanager
def use_registry(registry: SettlementRegistry) -> Iterator[SettlementRegistry]:
    """
    Bind `registry` for the duration of the block.

    Done-callbacks attached inside the block keep seeing it, since asyncio
    runs them in the context captured at `add_done_callback` time.
    """
    token = _current.set(registry)
    try:
        yield registry
    finally:
        _current.reset(token)


# ═══════════════════════════════════════════════════════════════════════════════
# Module-level API (current registry)
# ═══════════════════════════════════════════════════════════════════════════════


def get_settlement(value: object) -> Settlement[Any] | None:
    """Record for a future (Pending if unseen); None for plain values."""
    if not is_async_value(value):
        return None
    return current_registry().get(value)  # type: ignore[arg-type]


def set_settlement(fut: asyncio.Future[Any], record: Settlement[Any]) -> None:
    current_registry().set(fut, record)


def record_settlement(fut: asyncio.Future[Any]) -> Fulfilled[Any] | Rejected:
    return current_registry().record(fut)


def is_known(value: object) -> bool:
    """True for plain values and fulfilled futures."""
    settlement = get_settlement(value)
    return settlement is None or isinstance(settlement, Fulfilled)


def get_fulfilled_value(value: Any) -> Any:
    """
    Plain value as-is, or the fulfilled value of a future.

    Check `is_known` first: a pending or rejected future is a contract
    violation.
    """
    match get_settlement(value):
        case None:
            return value
        case Fulfilled(result):
            return result
        case other:
            raise SettlementError(f"{value!r} is not fulfilled ({type(other).__name__})")


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "SettlementRegistry",
    "is_async_value",
    "settlement_of",
    "current_registry",
    "use_registry",
    "get_settlement",
    "set_settlement",
    "record_settlement",
    "is_known",
    "get_fulfilled_value",
)
