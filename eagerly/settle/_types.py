"""
Settlement types.
"""

from __future__ import annotations

from dataclasses import dataclass

# ═══════════════════════════════════════════════════════════════════════════════
# Settlement Records
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Pending:
    """Future has not settled yet (or nobody has observed it settle)."""


@dataclass(frozen=True, slots=True)
class Fulfilled[T]:
    """Future settled with a value."""
    value: T


@dataclass(frozen=True, slots=True)
class Rejected:
    """Future settled with an exception (cancellation included)."""
    reason: BaseException


type Settlement[T] = Pending | Fulfilled[T] | Rejected
"""
Settlement record of a single future.

Monotonic: once a record leaves Pending it never changes again.
"""

# ═══════════════════════════════════════════════════════════════════════════════
# Errors
# ═══════════════════════════════════════════════════════════════════════════════


class SettlementError(RuntimeError):
    """Fulfilled value requested for a future that is not fulfilled."""


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "Pending",
    "Fulfilled",
    "Rejected",
    "Settlement",
    "SettlementError",
)
