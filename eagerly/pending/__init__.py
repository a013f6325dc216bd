"""
Pending — synchronous views over asynchronous atoms.

    from eagerly import pending as P

    # Last fulfilled value (or a placeholder) while a new future is in flight
    user_view = P.with_fallback(user_atom, lambda ctx: ctx.prev or GUEST)

    # kungfu Option[Result]: Nothing() / Some(Ok(v)) / Some(Error(e))
    user_state = P.loadable(user_atom)
"""

from __future__ import annotations

from eagerly.pending._fallback import with_fallback, FallbackContext, Fallback
from eagerly.pending._loadable import loadable, Loadable

__all__ = (
    "with_fallback",
    "FallbackContext",
    "Fallback",
    "loadable",
    "Loadable",
)
