"""
Store — the reactive graph the eager engine plugs into.

    from eagerly.store import atom, create_store

    count = atom(1)
    doubled = atom(lambda get: get(count) * 2)

    store = create_store()
    store.get(doubled)   # 2
    store.set(count, 4)
    store.get(doubled)   # 8

Each store owns its own settlement registry; reads and writes run with it
bound, so futures observed through one store never leak into another.
"""

from __future__ import annotations

from eagerly.store._atom import (
    Atom,
    atom,
    ReadOptions,
    Getter,
    Setter,
    Read,
    Write,
)
from eagerly.store._store import Store, create_store, Listener

__all__ = (
    "Atom",
    "atom",
    "ReadOptions",
    "Getter",
    "Setter",
    "Read",
    "Write",
    "Store",
    "create_store",
    "Listener",
)
