"""
Soon — apply a transform now when the input is known, later otherwise.

Key concepts:
- Plain values and recorded futures take the synchronous path
- Pending futures fall back to chaining
- soon_all keeps input order and back-fills settlements

Level 2: eagerly.soon
Level 1: eagerly.settle
"""

import asyncio

from eagerly import settle as S
from eagerly.soon import soon, soon_all
from examples._infra import banner, run, FakeApi


api = FakeApi()


async def main() -> None:
    banner("1. Plain values never touch the event loop")
    print(soon(12, lambda x: x * 2))
    print(soon_all((1, 2, 3)))

    banner("2. Pending input chains")
    user = asyncio.ensure_future(api.get_user(1))
    name = soon(user, lambda u: u.name)
    print(f"future? {S.is_async_value(name)}  ->  {await name}")

    banner("3. Recorded settlements skip the chain")
    S.record_settlement(user)
    print(soon(user, lambda u: u.tier))

    banner("4. soon_all keeps input order")
    slow = asyncio.ensure_future(api.get_orders(1))
    fast = S.fulfilled("cached")
    both = soon_all((slow, fast))
    orders, tag = await both
    print(f"{len(orders)} orders, {tag}")
    print(f"second call sync: {not S.is_async_value(soon_all((slow, fast)))}")


if __name__ == "__main__":
    run(main)
