import asyncio
import traceback

import pytest
from fakes import deferred, ticks

from eagerly import CancellationSignal
from eagerly.eager import (
    EagerPolicy,
    RetryLimitExceeded,
    eager_atom,
    is_suspension_signal,
    resolve_eagerly,
)
from eagerly.settle import (
    Fulfilled,
    Rejected,
    SettlementRegistry,
    get_fulfilled_value,
    rejected,
    use_registry,
)
from eagerly.store import atom, create_store


def test_derives_from_sync_atom() -> None:
    store = create_store()
    count = atom(12)
    doubled = eager_atom(lambda get: get(count) * 2)

    assert store.get(doubled) == 24
    store.set(count, 1)
    assert store.get(doubled) == 2


def test_sync_dependency_failure_becomes_rejection() -> None:
    async def run() -> None:
        store = create_store()

        def invalid(_get):
            raise ValueError("invalid")

        source = atom(invalid)
        doubled = eager_atom(lambda get: get(source) * 2)

        result = store.get(doubled)
        assert asyncio.isfuture(result)
        with pytest.raises(ValueError, match="invalid"):
            await result

    asyncio.run(run())


def test_async_dependency_failure_becomes_rejection() -> None:
    async def run() -> None:
        store = create_store()

        async def invalid(_get):
            raise ValueError("invalid")

        source = atom(invalid)
        doubled = eager_atom(lambda get: get(source) * 2)

        with pytest.raises(ValueError, match="invalid"):
            await store.get(doubled)

    asyncio.run(run())


def test_derives_from_async_atom_and_converges() -> None:
    async def run() -> None:
        store = create_store()
        x = deferred()
        source = atom(x)
        y = eager_atom(lambda get: get(source) * 2)

        first = store.get(y)
        assert asyncio.isfuture(first)

        x.set_result(12)
        assert await first == 24
        assert store.registry.get(first) == Fulfilled(24)

        # Already settled: a further consumer computes on the spot
        z = eager_atom(lambda get: get(y) + 1)
        assert store.get(z) == 25
        with use_registry(store.registry):
            assert get_fulfilled_value(store.get(y)) == 24

    asyncio.run(run())


def test_couple_of_async_atoms() -> None:
    async def run() -> None:
        store = create_store()
        a_fut, b_fut = deferred(), deferred()
        a, b = atom(a_fut), atom(b_fut)
        product = eager_atom(lambda get: get(a) * get(b))

        result = store.get(product)
        b_fut.set_result(3)
        await ticks()
        a_fut.set_result(4)
        assert await result == 12

    asyncio.run(run())


def test_computes_synchronously_once_dependencies_are_fulfilled() -> None:
    async def run() -> None:
        store = create_store()
        gate = deferred()

        async def pets(_get):
            await gate
            return ["cat", "dog", "bat"]

        pets_atom = atom(pets)
        needle = atom("at")
        filtered = eager_atom(lambda get: [p for p in get(pets_atom) if get(needle) in p])

        pending = store.get(pets_atom)
        gate.set_result(None)
        await pending

        assert store.get(filtered) == ["cat", "bat"]
        store.set(needle, "og")
        assert store.get(filtered) == ["dog"]

    asyncio.run(run())


def test_get_all_over_sync_atoms() -> None:
    store = create_store()
    a, b, c = atom(1), atom(2), atom(3)
    total = eager_atom(lambda get: sum(get.all((a, b, c))))

    assert store.get(total) == 6


def test_get_all_starts_every_dependency_before_suspending() -> None:
    async def run() -> None:
        store = create_store()
        events: list[str] = []
        futures = [deferred() for _ in range(3)]

        def started(name: str, fut):
            def read(_get):
                events.append(f"{name} started")
                return fut
            return atom(read)

        one, two, three = (started(n, f) for n, f in zip(("one", "two", "three"), futures))

        def read(get):
            try:
                return sum(get.all([one, two, three]))
            except BaseException as exc:
                if is_suspension_signal(exc):
                    events.append("suspended")
                raise

        total = eager_atom(read)
        result = store.get(total)
        assert events == ["one started", "two started", "three started", "suspended"]

        for idx, fut in enumerate(futures, start=1):
            fut.set_result(idx)
        assert await result == 6

    asyncio.run(run())


def test_except_exception_does_not_swallow_suspension() -> None:
    async def run() -> None:
        store = create_store()
        x = deferred()
        source = atom(x)

        def read(get):
            try:
                return get(source)
            except Exception:
                return -1

        guarded = eager_atom(read)
        result = store.get(guarded)
        x.set_result(5)
        assert await result == 5

    asyncio.run(run())


def test_reads_at_most_once_per_pending_dependency_plus_one() -> None:
    async def run() -> None:
        store = create_store()
        futures = [deferred() for _ in range(3)]
        a, b, c = (atom(f) for f in futures)
        reads: list[int] = []

        def read(get):
            reads.append(1)
            return get(a) + get(b) + get(c)

        total = eager_atom(read)
        result = store.get(total)
        for idx, fut in enumerate(futures, start=1):
            fut.set_result(idx)
            await ticks()

        assert await result == 6
        assert len(reads) == 4

    asyncio.run(run())


def test_dependency_settled_meanwhile_is_not_waited_on_again() -> None:
    async def run() -> None:
        store = create_store()
        futures = [deferred() for _ in range(3)]
        a, b, c = (atom(f) for f in futures)
        reads: list[int] = []

        def read(get):
            reads.append(1)
            return get(a) + get(b) + get(c)

        result = store.get(eager_atom(read))
        for fut, value in zip(reversed(futures), (3, 2, 1)):
            fut.set_result(value)
            await ticks()

        assert await result == 6
        assert len(reads) == 2

    asyncio.run(run())


def test_rejected_dependency_is_recorded_and_propagated() -> None:
    async def run() -> None:
        store = create_store()
        x = deferred()
        source = atom(x)
        y = eager_atom(lambda get: get(source) + 1)

        result = store.get(y)
        x.set_exception(LookupError("missing"))
        with pytest.raises(LookupError, match="missing"):
            await result
        assert isinstance(store.registry.get(x), Rejected)

    asyncio.run(run())


def test_superseded_evaluation_resolves_to_none() -> None:
    async def run() -> None:
        store = create_store()
        x = deferred()
        source = atom(x)
        reads: list[int] = []

        def read(get):
            reads.append(1)
            return get(source) * 2

        y = eager_atom(read)
        stale = store.get(y)

        store.set(source, 5)
        assert store.get(y) == 10

        x.set_result(1)
        assert await stale is None
        assert len(reads) == 2

    asyncio.run(run())


def test_cancelled_signal_stops_retries() -> None:
    async def run() -> None:
        x = deferred()
        signal = CancellationSignal()
        reads: list[int] = []

        def read(get):
            reads.append(1)
            return get(x)

        result = resolve_eagerly(read, lambda dep: dep, signal)
        signal.cancel()
        x.set_result(1)
        assert await result is None
        assert reads == [1]

    asyncio.run(run())


def test_resolve_eagerly_with_plain_values_is_synchronous() -> None:
    result = resolve_eagerly(lambda get: get(2) * get(3), lambda dep: dep, CancellationSignal())
    assert result == 6


def test_read_returning_a_coroutine_is_rejected() -> None:
    async def run() -> None:
        result = resolve_eagerly(lambda _get: asyncio.sleep(0), lambda dep: dep, CancellationSignal())
        with pytest.raises(TypeError, match="synchronous"):
            await result

    asyncio.run(run())


def test_async_read_function_is_refused() -> None:
    async def read(get):
        return get(1)

    with pytest.raises(TypeError):
        eager_atom(read)


def test_retry_limit() -> None:
    async def run() -> None:
        x = deferred()
        source = atom(x)
        store = create_store()
        bounded = eager_atom(lambda get: get(source), policy=EagerPolicy(max_retries=0))

        result = store.get(bounded)
        x.set_result(1)
        with pytest.raises(RetryLimitExceeded):
            await result

    asyncio.run(run())


def test_is_suspension_signal() -> None:
    async def run() -> None:
        x = deferred()
        seen: list[BaseException] = []

        def read(get):
            try:
                return get(x)
            except BaseException as exc:
                seen.append(exc)
                raise

        resolve_eagerly(read, lambda dep: dep, CancellationSignal())
        assert len(seen) == 1
        assert is_suspension_signal(seen[0])
        assert not isinstance(seen[0], Exception)
        assert not is_suspension_signal(ValueError())
        x.cancel()

    asyncio.run(run())


def test_cancelled_dependency_cancels_the_result() -> None:
    async def run() -> None:
        store = create_store()
        x = deferred()
        source = atom(x)
        y = eager_atom(lambda get: get(source) + 1)

        result = store.get(y)
        x.cancel()
        await ticks()
        assert result.cancelled()

    asyncio.run(run())


def test_failing_read_without_event_loop() -> None:
    store = create_store()
    broken = eager_atom(lambda get: 1 / 0)
    dependent = eager_atom(lambda get: get(broken) + 1)

    result = store.get(broken)
    assert result.done()
    assert isinstance(result.exception(), ZeroDivisionError)
    assert isinstance(store.get(dependent).exception(), ZeroDivisionError)

    direct = resolve_eagerly(lambda get: get(1) / 0, lambda dep: dep, CancellationSignal())
    assert isinstance(direct.exception(), ZeroDivisionError)


def test_rejected_dependency_keeps_a_bounded_traceback() -> None:
    with use_registry(SettlementRegistry()):
        failed = rejected(ValueError("failed"))
        reason = failed.exception()
        depths = []
        for _ in range(3):
            resolve_eagerly(lambda get: get(failed), lambda dep: dep, CancellationSignal())
            depths.append(len(traceback.extract_tb(reason.__traceback__)))

    assert depths[0] == depths[1] == depths[2]
