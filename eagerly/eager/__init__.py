"""
Eager — synchronous-style reads over asynchronous dependencies.

    from eagerly import eager as E

    total = E.eager_atom(lambda get: get(price) * get(quantity))

    @E.eager_atom
    def summary(get):
        user, orders = get.all((user_atom, orders_atom))
        return f"{user.name}: {len(orders)} orders"

Reads that guard their own failures must let suspensions through:

    try:
        value = get(risky)
    except BaseException as e:
        if E.is_suspension_signal(e):
            raise
        value = None
"""

from __future__ import annotations

from eagerly.eager._signal import Suspended, is_suspension_signal
from eagerly.eager._policy import EagerPolicy, DEFAULT_POLICY, RetryLimitExceeded
from eagerly.eager._getter import EagerGetter, unwrap
from eagerly.eager._resolve import resolve_eagerly, EagerRead
from eagerly.eager._atom import eager_atom

__all__ = (
    "Suspended",
    "is_suspension_signal",
    "EagerPolicy",
    "DEFAULT_POLICY",
    "RetryLimitExceeded",
    "EagerGetter",
    "unwrap",
    "resolve_eagerly",
    "EagerRead",
    "eager_atom",
)
