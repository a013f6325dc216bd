import asyncio

import pytest
from fakes import CountingFuture, deferred, ticks

from eagerly.pending import FallbackContext, with_fallback
from eagerly.settle import fulfilled
from eagerly.store import atom, create_store


def test_sync_source_passes_through() -> None:
    store = create_store()
    count = atom(1)
    view = with_fallback(count, lambda _ctx: "never")

    assert store.get(view) == 1
    store.set(count, 2)
    assert store.get(view) == 2


def test_default_fallback_is_none() -> None:
    async def run() -> None:
        store = create_store()
        x = deferred()
        view = with_fallback(atom(x))

        assert store.get(view) is None
        x.set_result(123)
        await ticks()
        assert store.get(view) == 123

    asyncio.run(run())


def test_static_fallback_until_each_new_future_settles() -> None:
    async def run() -> None:
        store = create_store()
        first = deferred()
        source = atom(first)
        view = with_fallback(source, lambda _ctx: "loading")

        assert store.get(view) == "loading"
        first.set_result("done")
        await ticks()
        assert store.get(view) == "done"
        assert store.get(view) == "done"

        second = deferred()
        store.set(source, second)
        assert store.get(view) == "loading"
        second.set_result("done again")
        await ticks()
        assert store.get(view) == "done again"

    asyncio.run(run())


def test_fallback_to_previous_value() -> None:
    async def run() -> None:
        store = create_store()
        first = deferred()
        source = atom(first)
        seen: list[FallbackContext] = []

        def stale(ctx: FallbackContext):
            seen.append(ctx)
            return ctx.prev if ctx.prev is not None else 0

        view = with_fallback(source, stale)

        assert store.get(view) == 0
        first.set_result(123)
        await ticks()
        assert store.get(view) == 123

        second = deferred()
        store.set(source, second)
        assert store.get(view) == 123
        assert seen[-1].pending is second
        second.set_result(321)
        await ticks()
        assert store.get(view) == 321

    asyncio.run(run())


def test_fallback_consulting_another_atom() -> None:
    async def run() -> None:
        store = create_store()
        x = deferred()
        message = atom("Loading...")
        view = with_fallback(atom(x), lambda ctx: ctx.get(message))

        assert store.get(view) == "Loading..."
        store.set(message, "Not ready yet")
        assert store.get(view) == "Not ready yet"
        x.set_result(123)
        await ticks()
        assert store.get(view) == 123

    asyncio.run(run())


def test_already_fulfilled_source_shows_its_value() -> None:
    async def run() -> None:
        store = create_store()
        view = with_fallback(atom(fulfilled(7)), lambda _ctx: "loading")
        assert store.get(view) == 7

    asyncio.run(run())


def test_rejection_surfaces_as_error() -> None:
    async def run() -> None:
        store = create_store()
        x = deferred()
        view = with_fallback(atom(x), lambda _ctx: "loading")

        assert store.get(view) == "loading"
        x.set_exception(ValueError("failed"))
        await ticks()
        with pytest.raises(ValueError, match="failed"):
            store.get(view)

    asyncio.run(run())


def test_one_settlement_handler_per_future() -> None:
    async def run() -> None:
        store = create_store()
        x = CountingFuture()
        source = atom(x)
        message = atom("a")
        view = with_fallback(source, lambda ctx: ctx.get(message))

        store.get(source)
        baseline = x.callbacks_added

        store.get(view)
        store.get(view)
        store.set(message, "b")
        assert store.get(view) == "b"
        store.set(message, "c")
        assert store.get(view) == "c"
        assert x.callbacks_added == baseline + 1

        x.set_result(1)
        await ticks()
        assert store.get(view) == 1

    asyncio.run(run())


def test_subscribers_see_the_swap() -> None:
    async def run() -> None:
        store = create_store()
        x = deferred()
        view = with_fallback(atom(x), lambda _ctx: "loading")
        seen: list[object] = []

        store.sub(view, lambda: seen.append(store.get(view)))
        x.set_result(123)
        await ticks()
        assert seen == [123]

    asyncio.run(run())


def test_writes_go_to_the_source() -> None:
    async def run() -> None:
        store = create_store()
        source = atom(1)
        view = with_fallback(source, lambda ctx: ctx.prev)

        assert store.get(view) == 1
        pending = deferred()
        store.set(view, pending)
        assert store.get(source) is pending
        assert store.get(view) == 1
        pending.set_result(2)
        await ticks()
        assert store.get(view) == 2

    asyncio.run(run())
