"""
Eager — synchronous-style reads over asynchronous atoms.

Key concepts:
- Reads are written as if every dependency were plain
- Pending dependencies suspend the read; it retries once they settle
- Once everything is fulfilled, values are computed on the spot
- get.all() starts every dependency before waiting on any

Level 3: eagerly.eager
Level 2: eagerly.store
Level 1: eagerly.settle
"""

import logging

from eagerly import eager as E
from eagerly import settle as S
from eagerly.store import atom, create_store
from examples._infra import banner, run, FakeApi


api = FakeApi()
store = create_store(label="example")

user_id = atom(1, label="user_id")
user = atom(lambda get: api.get_user(get(user_id)), label="user")
orders = atom(lambda get: api.get_orders(get(user_id)), label="orders")
discount = atom(0.1, label="discount")


@E.eager_atom
def summary(get):
    u, user_orders = get.all((user, orders))
    total = sum(o.total for o in user_orders) * (1 - get(discount))
    return f"{u.name} [{u.tier}]: {len(user_orders)} orders, {total:.2f}"


@E.eager_atom
def tier_only(get):
    return get(user).tier.upper()


async def main() -> None:
    logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    banner("1. First read suspends")
    first = store.get(summary)
    print(f"future? {S.is_async_value(first)}")
    print(await first)
    print(f"api calls: {api.calls}")

    banner("2. Dependencies known: synchronous")
    store.set(discount, 0.5)
    print(store.get(summary))
    print(store.get(tier_only))

    banner("3. Switching user suspends again")
    store.set(user_id, 2)
    print(await store.get(summary))

    banner("4. Failures come back as rejections")
    store.set(user_id, 404)
    try:
        await store.get(summary)
    except Exception as e:
        print(f"rejected: {e}")


if __name__ == "__main__":
    run(main)
