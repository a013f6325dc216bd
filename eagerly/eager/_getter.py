"""
EagerGetter — synchronous-looking dependency access.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from eagerly.settle import Fulfilled, Rejected, get_settlement
from eagerly.soon import reshape
from eagerly.eager._signal import Suspended


def unwrap(value: Any) -> Any:
    """
    Fulfilled value of `value`, suspending while it is pending.

    Plain values pass through; a rejected future re-raises its reason.
    """
    match get_settlement(value):
        case None:
            return value
        case Fulfilled(result):
            return result
        case Rejected(reason):
            raise reason.with_traceback(None)
        case _:
            raise Suspended(value)


class EagerGetter:
    """
    Dependency accessor handed to eager read functions.

        value = get(dep)                # unwrapped, or suspends
        a, b, c = get.all((x, y, z))    # starts all three, then unwraps
    """

    __slots__ = ("_get",)

    def __init__(self, get: Callable[[Any], Any]) -> None:
        self._get = get

    @classmethod
    def wrap(cls, get: Callable[[Any], Any]) -> EagerGetter:
        return get if isinstance(get, EagerGetter) else cls(get)

    def __call__(self, dep: Any) -> Any:
        return unwrap(self._get(dep))

    def all(self, deps: Sequence[Any]) -> Any:
        # Read everything first so independent work starts concurrently
        values = [self._get(dep) for dep in deps]
        return reshape(deps, [unwrap(v) for v in values])


__all__ = ("EagerGetter", "unwrap")
