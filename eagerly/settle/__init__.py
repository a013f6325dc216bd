"""
Settle — out-of-band settlement status of futures.

    from eagerly import settle as S

    S.get_settlement(fut)   # Pending() until someone observes it settle
    S.record_settlement(fut)  # after fut is done
    S.is_known(fut)         # True once Fulfilled

Registries are scoped per context:

    with S.use_registry(S.SettlementRegistry(label="store")):
        ...
"""

from __future__ import annotations

from eagerly.settle._types import (
    Pending,
    Fulfilled,
    Rejected,
    Settlement,
    SettlementError,
)
from eagerly.settle._registry import (
    SettlementRegistry,
    is_async_value,
    settlement_of,
    current_registry,
    use_registry,
    get_settlement,
    set_settlement,
    record_settlement,
    is_known,
    get_fulfilled_value,
)
from eagerly.settle._futures import (
    new_future,
    fulfilled,
    rejected,
    resolve_into,
    settle_into,
    then,
)

__all__ = (
    "Pending",
    "Fulfilled",
    "Rejected",
    "Settlement",
    "SettlementError",
    "SettlementRegistry",
    "is_async_value",
    "settlement_of",
    "current_registry",
    "use_registry",
    "get_settlement",
    "set_settlement",
    "record_settlement",
    "is_known",
    "get_fulfilled_value",
    "new_future",
    "fulfilled",
    "rejected",
    "resolve_into",
    "settle_into",
    "then",
)
