"""
derive() — atom over a fixed list of dependencies.

Kept for existing callers; `eager_atom` covers the same ground with
arbitrary dependency access.
"""

from __future__ import annotations

import warnings
from collections.abc import Callable, Sequence
from typing import Any

from eagerly.settle import rejected
from eagerly.soon._all import soon_all
from eagerly.soon._soon import soon
from eagerly.store import Atom, Getter, atom


def derive[T](deps: Sequence[Atom[Any]], op: Callable[..., T]) -> Atom[Any]:
    """
    Atom of `op(*values)`, computed synchronously when every dependency
    is known and once they all settle otherwise.

    Example:
        product = derive([a, b], lambda x, y: x * y)
    """
    warnings.warn(
        "derive() is deprecated, use eager_atom() instead",
        DeprecationWarning,
        stacklevel=2,
    )
    deps = tuple(deps)

    def read(get: Getter) -> Any:
        try:
            return soon(soon_all([get(d) for d in deps]), lambda values: op(*values))
        except Exception as exc:
            return rejected(exc)

    return atom(read)


__all__ = ("derive",)
