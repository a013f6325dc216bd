"""
Atom — a node of the reference graph.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from eagerly._types import CancellationSignal

# ═══════════════════════════════════════════════════════════════════════════════
# Read / Write Signatures
# ═══════════════════════════════════════════════════════════════════════════════

type Getter = Callable[[Atom[Any]], Any]
type Setter = Callable[..., Any]


@dataclass(frozen=True, slots=True)
class ReadOptions:
    """
    Per-evaluation capabilities handed to a read function.

    signal: cancelled once this evaluation's result is discarded.
    set_self: writes to the atom being read (only after the read returned).
    """
    signal: CancellationSignal
    set_self: Callable[..., Any]


type Read[T] = Callable[[Getter, ReadOptions], T]
type Write = Callable[..., Any]


def _positional_arity(fn: Callable[..., Any]) -> int:
    """Positional parameters `fn` accepts, capped at 2 (get, options)."""
    try:
        params = inspect.signature(fn).parameters.values()
    except (TypeError, ValueError):
        return 2
    positional = [
        p for p in params
        if p.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
    ]
    if any(p.kind is inspect.Parameter.VAR_POSITIONAL for p in params):
        return 2
    return min(len(positional), 2)


# ═══════════════════════════════════════════════════════════════════════════════
# Atom
# ═══════════════════════════════════════════════════════════════════════════════


class Atom[T]:
    """
    Atom config. Holds no value: values live in a Store.

    Primitive atoms (no read function) hold a writable value; derived atoms
    compute theirs from other atoms. Identity is the atom object itself.
    """

    __slots__ = ("_read", "_write", "init", "label", "private", "_loadable", "__weakref__")

    def __init__(
        self,
        read: Read[T] | None = None,
        write: Write | None = None,
        *,
        init: T | None = None,
        label: str | None = None,
        private: bool = False,
    ) -> None:
        self._read = read
        self._write = write
        self.init = init
        self.label = label
        self.private = private
        self._loadable: Atom[Any] | None = None  # loadable() view, lives as long as this atom

    @property
    def is_primitive(self) -> bool:
        return self._read is None

    @property
    def writable(self) -> bool:
        return self._read is None or self._write is not None

    def read(self, get: Getter, options: ReadOptions) -> T:
        if self._read is None:
            raise TypeError(f"{self!r} is primitive and has no read function")
        return self._read(get, options)

    def write(self, get: Getter, set_: Setter, *args: Any) -> Any:
        if self._write is None:
            raise TypeError(f"{self!r} is not writable")
        return self._write(get, set_, *args)

    def __repr__(self) -> str:
        name = self.label or f"atom@{id(self):x}"
        kind = "primitive" if self.is_primitive else "derived"
        if self.private:
            kind += ", private"
        return f"<Atom {name} ({kind})>"


# ═══════════════════════════════════════════════════════════════════════════════
# atom() — Constructor
# ═══════════════════════════════════════════════════════════════════════════════


def atom(
    initial_or_read: Any = None,
    write: Write | None = None,
    *,
    label: str | None = None,
    private: bool = False,
) -> Atom[Any]:
    """
    Create an atom.

        atom(0)                              # primitive, writable
        atom(lambda get: get(a) * 2)         # derived, read-only
        atom(lambda get, opts: ...)          # derived, with ReadOptions
        atom(read, lambda get, set_, v: ...) # derived, writable
        atom(None, lambda get, set_: ...)    # write-only action

    A callable first argument is always a read function; wrap a function
    value in a primitive atom via `atom(None)` plus `store.set(a, lambda _: fn)`.
    """
    if callable(initial_or_read):
        fn = initial_or_read
        match _positional_arity(fn):
            case 2:
                read: Read[Any] = fn
            case 1:
                read = lambda get, _options: fn(get)  # noqa: E731
            case _:
                read = lambda _get, _options: fn()  # noqa: E731
        return Atom(read, write, label=label, private=private)

    if write is not None:
        value = initial_or_read
        return Atom(lambda _get, _options: value, write, label=label, private=private)

    return Atom(init=initial_or_read, label=label, private=private)


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "Atom",
    "atom",
    "ReadOptions",
    "Getter",
    "Setter",
    "Read",
    "Write",
)
