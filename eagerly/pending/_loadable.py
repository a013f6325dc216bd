"""
loadable() — loading / error / data view of an atom as a kungfu Option.
"""

from __future__ import annotations

import asyncio
from typing import Any

from kungfu import Error, Nothing, Ok, Option, Result, Some

from eagerly.store import Atom, Getter, atom
from eagerly.pending._fallback import with_fallback

type Loadable[T] = Option[Result[T, BaseException]]
"""Nothing() while loading, Some(Ok(value)) or Some(Error(exc)) once settled."""

_LOADING: Any = object()


def loadable(source: Atom[Any]) -> Atom[Any]:
    """
    Atom that never fails and never suspends.

    The same loadable atom is returned for the same source, and lives
    exactly as long as it.

    Example:
        match store.get(loadable(user_atom)):
            case Nothing():
                render_spinner()
            case Some(Ok(user)):
                render(user)
            case Some(Error(exc)):
                render_error(exc)
    """
    cached = source._loadable
    if cached is not None:
        return cached

    name = source.label and f"{source.label}:loadable"
    pending = with_fallback(source, lambda _ctx: _LOADING, label=name and f"{name}:pending")
    pending.private = True

    def read(get: Getter) -> Loadable[Any]:
        try:
            value = get(pending)
        except (Exception, asyncio.CancelledError) as exc:
            return Some(Error(exc))
        if value is _LOADING:
            return Nothing()
        return Some(Ok(value))

    result = atom(read, label=name)
    source._loadable = result
    return result


__all__ = ("loadable", "Loadable")
