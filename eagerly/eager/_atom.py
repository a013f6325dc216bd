"""
eager_atom() — derived atom with a synchronous-style read function.
"""

from __future__ import annotations

import inspect
from typing import Any

from eagerly.store import Atom, Getter, ReadOptions, atom
from eagerly.eager._getter import EagerGetter
from eagerly.eager._policy import DEFAULT_POLICY, EagerPolicy
from eagerly.eager._resolve import EagerRead, resolve_eagerly


def eager_atom[T](
    read: EagerRead[T],
    *,
    policy: EagerPolicy = DEFAULT_POLICY,
    label: str | None = None,
) -> Atom[Any]:
    """
    Drop-in replacement for an async derived atom, without the needless
    suspensions.

    `read` is written as if every dependency were synchronous. When all of
    them are fulfilled the atom's value is computed on the spot; otherwise
    the read is interrupted at the first pending dependency and retried
    once it settles.

    Example:
        doubled = eager_atom(lambda get: get(count) * 2)

        @eager_atom
        def label(get):
            name, level = get.all((name_atom, level_atom))
            return f"{name} (lvl {level})"
    """
    if inspect.iscoroutinefunction(read):
        raise TypeError("eager_atom() read function cannot be asynchronous")

    def eager_read(get: Getter, options: ReadOptions) -> Any:
        return resolve_eagerly(read, EagerGetter(get), options.signal, policy=policy)

    return atom(eager_read, label=label)


__all__ = ("eager_atom",)
