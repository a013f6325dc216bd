"""
Soon — fast-path combinators.

    from eagerly.soon import soon, soon_all

    soon(12, lambda x: x * 2)       # 24, no event-loop tick
    soon(fut, lambda x: x * 2)      # future, unless fut is already fulfilled
    soon_all((a, b, c))             # tuple now, or future of tuple

Failures never raise synchronously: they come back as rejected futures.
"""

from __future__ import annotations

from eagerly.soon._soon import soon, Transform
from eagerly.soon._all import soon_all, reshape
from eagerly.soon._derive import derive

__all__ = (
    "soon",
    "soon_all",
    "reshape",
    "derive",
    "Transform",
)
