"""
Fallback — always-synchronous views over asynchronous atoms.

Key concepts:
- with_fallback shows the last value while a new one loads
- The fallback function sees the previous value and the graph
- loadable gives Nothing() / Some(Ok(v)) / Some(Error(e)) and never fails

Level 3: eagerly.pending
Level 2: eagerly.soon, eagerly.store
"""

import asyncio

from kungfu import Error, Nothing, Ok, Some

from eagerly import pending as P
from eagerly.soon import soon
from eagerly.store import atom, create_store
from examples._infra import banner, run, FakeApi


api = FakeApi(latency=0.05)
store = create_store(label="example")

user_id = atom(1, label="user_id")
user = atom(lambda get: api.get_user(get(user_id)), label="user")
name = atom(lambda get: soon(get(user), lambda u: u.name), label="name")

name_or_stale = P.with_fallback(
    name,
    lambda ctx: f"{ctx.prev} (refreshing)" if ctx.prev else "loading...",
)
user_state = P.loadable(user)


def describe(state: object) -> str:
    match state:
        case Nothing():
            return "loading"
        case Some(Ok(u)):
            return f"loaded {u.name}"
        case Some(Error(e)):
            return f"failed: {e}"
        case _:
            return repr(state)


async def main() -> None:
    store.sub(user_state, lambda: print(f"  [sub] {describe(store.get(user_state))}"))

    banner("1. Placeholder while loading")
    print(store.get(name_or_stale))
    await asyncio.sleep(0.1)
    print(store.get(name_or_stale))

    banner("2. Stale value while refreshing")
    store.set(user_id, 2)
    print(store.get(name_or_stale))
    await asyncio.sleep(0.1)
    print(store.get(name_or_stale))

    banner("3. Errors")
    store.set(user_id, 404)
    await asyncio.sleep(0.1)
    print(describe(store.get(user_state)))


if __name__ == "__main__":
    run(main)
