"""
Store — reference reactive graph.

Memoized reads with dependency epochs, writes, subscriptions, and a
per-evaluation cancellation signal. Owns the settlement registry that
every read and write of this store runs under.
"""

from __future__ import annotations

import asyncio
import logging
import weakref
from collections.abc import Callable
from dataclasses import dataclass, field
from functools import partial
from types import TracebackType
from typing import Any

from eagerly._types import CancellationSignal
from eagerly.settle import (
    SettlementRegistry,
    is_async_value,
    record_settlement,
    use_registry,
)
from eagerly.store._atom import Atom, ReadOptions

logger = logging.getLogger(__name__)

type Listener = Callable[[], None]

# ═══════════════════════════════════════════════════════════════════════════════
# Atom State
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(slots=True)
class _AtomState:
    value: Any = None
    error: BaseException | None = None
    origin: TracebackType | None = None
    epoch: int = 0
    deps: dict[Atom[Any], int] = field(default_factory=dict)
    signal: CancellationSignal | None = None


def _same(a: Any, b: Any) -> bool:
    if a is b:
        return True
    try:
        return bool(a == b)
    except Exception:
        return False


# ═══════════════════════════════════════════════════════════════════════════════
# Store
# ═══════════════════════════════════════════════════════════════════════════════


class Store:
    """
    Holds atom values.

    Example:
        store = Store()
        count = atom(1)
        doubled = atom(lambda get: get(count) * 2)

        store.get(doubled)  # 2
        store.set(count, 5)
        store.get(doubled)  # 10
    """

    __slots__ = ("_states", "_listeners", "_seen", "_evaluating", "_registry", "_label")

    def __init__(self, registry: SettlementRegistry | None = None, *, label: str = "store") -> None:
        self._states: weakref.WeakKeyDictionary[Atom[Any], _AtomState] = weakref.WeakKeyDictionary()
        self._listeners: dict[Atom[Any], list[Listener]] = {}
        self._seen: dict[Atom[Any], int] = {}
        self._evaluating: set[Atom[Any]] = set()
        self._registry = registry if registry is not None else SettlementRegistry(label=label)
        self._label = label

    @property
    def registry(self) -> SettlementRegistry:
        return self._registry

    @property
    def label(self) -> str:
        return self._label

    # ───────────────────────────────────────────────────────────────────────────
    # Public API
    # ───────────────────────────────────────────────────────────────────────────

    def get[T](self, target: Atom[T]) -> T:
        """Current value of `target`. Re-raises a failed read."""
        with use_registry(self._registry):
            state = self._read(target)
        if state.error is not None:
            raise state.error.with_traceback(state.origin)
        return state.value

    def set(self, target: Atom[Any], *args: Any) -> Any:
        """
        Write to `target`.

        Primitive atoms take a value or an updater `fn(prev)`; derived
        atoms run their write function with `args`.
        """
        with use_registry(self._registry):
            result = self._write(target, *args)
        self._flush()
        return result

    def sub(self, target: Atom[Any], listener: Listener) -> Callable[[], None]:
        """Call `listener` whenever `target` changes. Returns unsubscribe."""
        listeners = self._listeners.setdefault(target, [])
        listeners.append(listener)
        with use_registry(self._registry):
            self._seen[target] = self._read(target).epoch

        def unsubscribe() -> None:
            if listener in listeners:
                listeners.remove(listener)
            if not listeners and self._listeners.get(target) is listeners:
                del self._listeners[target]
                self._seen.pop(target, None)

        return unsubscribe

    # ───────────────────────────────────────────────────────────────────────────
    # Reading
    # ───────────────────────────────────────────────────────────────────────────

    def _read(self, target: Atom[Any]) -> _AtomState:
        state = self._states.get(target)
        if target.is_primitive:
            if state is None:
                state = _AtomState(value=target.init)
                self._states[target] = state
                self._track(target, target.init)
            return state
        if state is not None and self._is_fresh(state):
            return state
        return self._evaluate(target, state)

    def _is_fresh(self, state: _AtomState) -> bool:
        return all(self._read(dep).epoch == epoch for dep, epoch in state.deps.items())

    def _evaluate(self, target: Atom[Any], prev: _AtomState | None) -> _AtomState:
        if target in self._evaluating:
            raise RuntimeError(f"Dependency cycle detected at {target!r}")

        deps: dict[Atom[Any], int] = {}

        def getter(dep: Atom[Any]) -> Any:
            if dep is target:
                # Self read: previous value, no dependency
                return prev.value if prev is not None and prev.error is None else None
            dep_state = self._read(dep)
            deps[dep] = dep_state.epoch
            if dep_state.error is not None:
                raise dep_state.error.with_traceback(dep_state.origin)
            return dep_state.value

        if prev is not None and prev.signal is not None:
            prev.signal.cancel()
        signal = CancellationSignal()
        options = ReadOptions(signal=signal, set_self=partial(self._set_self, target))

        logger.debug("%s: evaluating %r", self._label, target)
        self._evaluating.add(target)
        try:
            value: Any = target.read(getter, options)
            error: BaseException | None = None
            origin: TracebackType | None = None
        except (Exception, asyncio.CancelledError) as exc:
            value, error, origin = None, exc, exc.__traceback__
        finally:
            self._evaluating.discard(target)

        if asyncio.iscoroutine(value):
            value = asyncio.ensure_future(value)

        if prev is None:
            state = _AtomState(value=value, error=error, origin=origin, deps=deps, signal=signal)
            self._states[target] = state
            self._track(target, value)
            return state

        changed = error is not prev.error or (error is None and not _same(value, prev.value))
        prev.value, prev.error, prev.deps, prev.signal = value, error, deps, signal
        prev.origin = origin
        if changed:
            prev.epoch += 1
            self._track(target, value)
        return prev

    # ───────────────────────────────────────────────────────────────────────────
    # Writing
    # ───────────────────────────────────────────────────────────────────────────

    def _write(self, target: Atom[Any], *args: Any) -> Any:
        if not target.is_primitive:
            return target.write(self.get, self.set, *args)

        if len(args) != 1:
            raise TypeError(f"Primitive {target!r} takes exactly one value, got {len(args)}")
        state = self._read(target)
        value = args[0]
        if callable(value):
            value = value(state.value)
        if not _same(value, state.value):
            state.value = value
            state.epoch += 1
            self._track(target, value)
        return None

    def _set_self(self, target: Atom[Any], *args: Any) -> Any:
        if target in self._evaluating:
            raise RuntimeError(f"set_self of {target!r} called while it is being read")
        return self.set(target, *args)

    # ───────────────────────────────────────────────────────────────────────────
    # Futures & Notification
    # ───────────────────────────────────────────────────────────────────────────

    def _track(self, target: Atom[Any], value: Any) -> None:
        """Record the settlement of a future produced by `target`."""
        if is_async_value(value) and not value.done():
            value.add_done_callback(partial(self._on_settled, target))
        elif is_async_value(value):
            record_settlement(value)

    def _on_settled(self, target: Atom[Any], fut: asyncio.Future[Any]) -> None:
        with use_registry(self._registry):
            record_settlement(fut)
        state = self._states.get(target)
        if state is not None and state.value is fut and target in self._listeners:
            self._notify(target)

    def _flush(self) -> None:
        for target in list(self._listeners):
            with use_registry(self._registry):
                epoch = self._read(target).epoch
            if self._seen.get(target) != epoch:
                self._seen[target] = epoch
                self._notify(target)

    def _notify(self, target: Atom[Any]) -> None:
        logger.debug("%s: notifying listeners of %r", self._label, target)
        for listener in list(self._listeners.get(target, ())):
            listener()

    def __repr__(self) -> str:
        return f"Store(label={self._label!r}, atoms={len(self._states)})"


def create_store(registry: SettlementRegistry | None = None, *, label: str = "store") -> Store:
    """Create a store with its own settlement registry."""
    return Store(registry, label=label)


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = ("Store", "create_store", "Listener")
