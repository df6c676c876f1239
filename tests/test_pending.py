"""Tests for Pending: laziness, run-once settlement and continuations."""

from __future__ import annotations

import asyncio

import anyio
import pytest
from hypothesis import given

from klaw_seq import Pending, PendingNotSettledError

from .strategies import exceptions, small_ints


class TestSettlement:
    """Tests for when and how often the factory runs."""

    async def test_factory_not_started_until_awaited(self) -> None:
        started = False

        async def factory() -> int:
            nonlocal started
            started = True
            return 1

        pending = Pending(factory)
        await anyio.sleep(0)
        assert not started
        assert not pending.done()
        assert await pending == 1
        assert started

    async def test_factory_runs_once(self) -> None:
        runs = 0

        async def factory() -> str:
            nonlocal runs
            runs += 1
            return 'value'

        pending = Pending(factory)
        assert await pending == 'value'
        assert await pending == 'value'
        assert runs == 1

    async def test_concurrent_awaiters_share_one_run(self) -> None:
        runs = 0

        async def factory() -> int:
            nonlocal runs
            runs += 1
            await anyio.sleep(0.01)
            return 42

        pending = Pending(factory)

        async def waiter() -> int:
            return await pending

        results = await asyncio.gather(waiter(), waiter(), waiter())
        assert results == [42, 42, 42]
        assert runs == 1

    async def test_failure_cached_and_identical(self) -> None:
        boom = ValueError('boom')
        runs = 0

        async def factory() -> int:
            nonlocal runs
            runs += 1
            raise boom

        pending = Pending(factory)
        for _ in range(2):
            with pytest.raises(ValueError) as exc_info:
                await pending
            assert exc_info.value is boom
        assert runs == 1
        assert pending.exception() is boom

    async def test_cancellation_is_not_cached(self) -> None:
        runs = 0

        async def factory() -> int:
            nonlocal runs
            runs += 1
            if runs == 1:
                await anyio.sleep(10)
            return runs

        pending = Pending(factory)
        with anyio.move_on_after(0.01):
            await pending
        assert not pending.done()
        assert await pending == 2


class TestFactories:
    """Tests for resolved, rejected and from_awaitable."""

    async def test_resolved(self) -> None:
        pending = Pending.resolved([1, 2])
        assert pending.done()
        assert pending.result() == [1, 2]
        assert await pending == [1, 2]

    async def test_rejected(self) -> None:
        error = KeyError('k')
        pending = Pending.rejected(error)
        assert pending.done()
        assert pending.exception() is error
        with pytest.raises(KeyError):
            await pending

    async def test_from_coroutine(self) -> None:
        async def produce() -> int:
            return 5

        pending = Pending.from_awaitable(produce())
        assert await pending == 5
        assert await pending == 5

    async def test_from_awaitable_keeps_pending(self) -> None:
        pending = Pending.resolved(1)
        assert Pending.from_awaitable(pending) is pending

    async def test_from_task(self) -> None:
        async def produce() -> str:
            return 'task'

        task = asyncio.ensure_future(produce())
        assert await Pending.from_awaitable(task) == 'task'


class TestIntrospection:
    """Tests for done, result, exception and repr."""

    def test_result_before_settled_raises(self) -> None:
        async def factory() -> int:
            return 1

        pending = Pending(factory)
        with pytest.raises(PendingNotSettledError):
            pending.result()
        with pytest.raises(PendingNotSettledError):
            pending.exception()

    def test_result_reraises_failure(self) -> None:
        pending = Pending.rejected(RuntimeError('nope'))
        with pytest.raises(RuntimeError, match='nope'):
            pending.result()

    def test_exception_none_on_success(self) -> None:
        assert Pending.resolved(0).exception() is None

    def test_repr(self) -> None:
        async def factory() -> int:
            return 1

        assert repr(Pending(factory)) == 'Pending(<pending>)'
        assert repr(Pending.resolved(3)) == 'Pending(3)'
        assert repr(Pending.rejected(ValueError('x'))) == "Pending(<failed: ValueError('x')>)"


class TestContinuations:
    """Tests for then, catch and finally_."""

    async def test_then_sync(self) -> None:
        assert await Pending.resolved(2).then(lambda x: x + 1) == 3

    async def test_then_async(self) -> None:
        async def triple(x: int) -> int:
            await anyio.sleep(0)
            return x * 3

        assert await Pending.resolved(2).then(triple) == 6

    async def test_then_is_lazy(self) -> None:
        calls: list[int] = []
        chained = Pending.resolved(1).then(calls.append)
        await anyio.sleep(0)
        assert calls == []
        await chained
        assert calls == [1]

    async def test_then_without_handlers_passes_through(self) -> None:
        assert await Pending.resolved('same').then() == 'same'

    async def test_then_routes_error_to_on_err(self) -> None:
        error = ValueError('bad')
        value = await Pending.rejected(error).then(lambda x: 'ok', lambda exc: exc)
        assert value is error

    async def test_then_without_on_err_reraises(self) -> None:
        error = ValueError('bad')
        with pytest.raises(ValueError) as exc_info:
            await Pending.rejected(error).then(lambda x: x)
        assert exc_info.value is error

    async def test_on_ok_error_not_routed_to_on_err(self) -> None:
        def fail(value: int) -> int:
            raise LookupError('from on_ok')

        recovered: list[Exception] = []
        with pytest.raises(LookupError):
            await Pending.resolved(1).then(fail, recovered.append)
        assert recovered == []

    async def test_catch_recovers(self) -> None:
        assert await Pending.rejected(RuntimeError()).catch(lambda exc: 'fallback') == 'fallback'

    async def test_catch_passes_value(self) -> None:
        assert await Pending.resolved(9).catch(lambda exc: 0) == 9

    async def test_finally_runs_on_success(self) -> None:
        calls: list[str] = []
        assert await Pending.resolved(1).finally_(lambda: calls.append('done')) == 1
        assert calls == ['done']

    async def test_finally_runs_on_failure_and_keeps_error(self) -> None:
        calls: list[str] = []

        async def cleanup() -> None:
            calls.append('cleanup')

        with pytest.raises(KeyError):
            await Pending.rejected(KeyError('k')).finally_(cleanup)
        assert calls == ['cleanup']


# --- Hypothesis Property Tests ---


@pytest.mark.hypothesis_property
@given(value=small_ints)
async def test_property_resolved_roundtrip(value: int) -> None:
    """Property: awaiting a resolved Pending yields its value, repeatedly."""
    pending = Pending.resolved(value)
    assert await pending == value
    assert await pending == value


@pytest.mark.hypothesis_property
@given(error=exceptions)
async def test_property_rejected_reraises_same_object(error: Exception) -> None:
    """Property: every awaiter of a rejected Pending sees the same exception."""
    pending = Pending.rejected(error)
    for _ in range(2):
        with pytest.raises(type(error)) as exc_info:
            await pending
        assert exc_info.value is error
