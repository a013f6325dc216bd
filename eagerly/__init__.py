"""
eagerly — synchronous-style code over asynchronous dependencies.

    from eagerly import settle as S   # Settlement registry
    from eagerly import soon as N     # Fast-path combinators
    from eagerly import eager as E    # Suspend/retry resolver
    from eagerly import pending as P  # Stale-while-pending views
    from eagerly import store         # Reference reactive graph
"""

from eagerly import settle
from eagerly import store
from eagerly import soon
from eagerly import eager
from eagerly import pending
from eagerly import lift
from eagerly._types import (
    MaybeAsync,
    CancellationSignal,
    Result,
    Ok,
    Error,
    Option,
    Some,
    Nothing,
)
from eagerly.soon import soon_all, derive
from eagerly.eager import eager_atom, resolve_eagerly, is_suspension_signal
from eagerly.pending import with_fallback, loadable
from eagerly.store import atom, create_store, Store

__version__ = "0.1.0"

__all__ = (
    "settle",
    "store",
    "soon",
    "eager",
    "pending",
    "lift",
    "MaybeAsync",
    "CancellationSignal",
    "Result",
    "Ok",
    "Error",
    "Option",
    "Some",
    "Nothing",
    "soon_all",
    "derive",
    "eager_atom",
    "resolve_eagerly",
    "is_suspension_signal",
    "with_fallback",
    "loadable",
    "atom",
    "create_store",
    "Store",
)
