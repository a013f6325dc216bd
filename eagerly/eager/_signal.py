"""
Suspension signal.
"""

from __future__ import annotations

import asyncio
from typing import Any


class Suspended(BaseException):
    """
    A dependency read through an EagerGetter is still pending.

    Derives from BaseException so that `except Exception:` in a read
    function lets it through. Code catching BaseException must re-raise
    it: check with `is_suspension_signal(e)`.
    """

    def __init__(self, pending: asyncio.Future[Any]) -> None:
        super().__init__(pending)
        self.pending = pending

    def __str__(self) -> str:
        return (
            "Dependency is not fulfilled yet. Inside a read function, detect this "
            "with is_suspension_signal(e) and re-raise it."
        )


def is_suspension_signal(error: object) -> bool:
    """True if `error` is a suspension raised by an eager getter."""
    return isinstance(error, Suspended)


__all__ = ("Suspended", "is_suspension_signal")
