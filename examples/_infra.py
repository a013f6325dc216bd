"""Shared infrastructure for examples."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine
from dataclasses import dataclass, field


# Types
@dataclass(frozen=True, slots=True)
class User:
    id: int
    name: str
    tier: str = "standard"


@dataclass(frozen=True, slots=True)
class Order:
    id: int
    user_id: int
    total: float


# Errors
@dataclass(frozen=True, slots=True)
class NotFound(Exception):
    entity: str
    id: int | str

    def __str__(self) -> str:
        return f"{self.entity}:{self.id} not found"


# Fake API
@dataclass(slots=True)
class FakeApi:
    latency: float = 0.01
    calls: list[str] = field(default_factory=list)
    users: dict[int, User] = field(default_factory=lambda: {
        1: User(1, "Alice", "gold"),
        2: User(2, "Bob", "silver"),
    })
    orders: dict[int, list[Order]] = field(default_factory=lambda: {
        1: [Order(10, 1, 42.0), Order(11, 1, 8.5)],
        2: [Order(12, 2, 99.9)],
    })

    async def get_user(self, user_id: int) -> User:
        self.calls.append(f"user:{user_id}")
        await asyncio.sleep(self.latency)
        user = self.users.get(user_id)
        if user is None:
            raise NotFound("User", user_id)
        return user

    async def get_orders(self, user_id: int) -> list[Order]:
        self.calls.append(f"orders:{user_id}")
        await asyncio.sleep(self.latency)
        return self.orders.get(user_id, [])


# Helpers
def banner(title: str) -> None:
    print(f"\n{'─' * 50}\n{title}\n{'─' * 50}")


def run(main: Callable[[], Coroutine[object, object, None]]) -> None:
    asyncio.run(main())
