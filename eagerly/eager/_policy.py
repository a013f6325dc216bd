"""
Eager resolver policy.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class EagerPolicy:
    """
    Retry settings for resolve_eagerly().

    max_retries: how many times a suspended read may be re-run. None keeps
    retrying until the read returns, fails or is cancelled.
    """
    max_retries: int | None = None


DEFAULT_POLICY = EagerPolicy()


class RetryLimitExceeded(RuntimeError):
    """A read was still suspending after `max_retries` retries."""

    def __init__(self, retries: int) -> None:
        super().__init__(f"Read still suspended after {retries} retries")
        self.retries = retries


__all__ = ("EagerPolicy", "DEFAULT_POLICY", "RetryLimitExceeded")
