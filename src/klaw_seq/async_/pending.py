"""Pending: a lazily started, run-once, multi-await asynchronous value.

A Pending wraps a zero-argument factory returning an awaitable. The factory
starts on the first ``await`` and its outcome (value or exception) is cached,
so the same Pending can be awaited any number of times, by any number of
concurrent awaiters. Continuations registered with ``then`` / ``catch`` /
``finally_`` build new Pending values chained after this one.

Example:
    ```python
    async def load() -> int:
        return 21

    async def main():
        doubled = Pending(load).then(lambda x: x * 2)
        assert await doubled == 42
        assert await doubled == 42  # cached, load() ran once
    ```
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Generator
from typing import Any

import aiologic

from klaw_seq._internal.calls import maybe_await
from klaw_seq.errors import PendingNotSettledError

__all__ = ['Pending']


class Pending[T]:
    """Awaitable that settles once and replays its outcome to every awaiter.

    Nothing runs at construction time. The first awaiter drives the factory
    while holding an aiologic.Lock; later and concurrent awaiters get the
    cached value or have the cached exception re-raised (the same object,
    never wrapped).

    Note:
        Cancellation of the awaiter driving the factory is not cached: the
        Pending stays unsettled and the next awaiter starts the factory again.
        Only ``Exception`` subclasses are recorded as failures.
    """

    __slots__ = ('_error', '_factory', '_lock', '_settled', '_value')

    def __init__(self, factory: Callable[[], Awaitable[T]]) -> None:
        """Create a Pending from an awaitable factory.

        Args:
            factory: Zero-argument callable returning an awaitable of T.
                Called at most once per successful settlement.
        """
        self._factory: Callable[[], Awaitable[T]] | None = factory
        self._lock = aiologic.Lock()
        self._settled = False
        self._value: T | None = None
        self._error: Exception | None = None

    @classmethod
    def resolved(cls, value: T) -> Pending[T]:
        """Create an already settled Pending holding ``value``."""
        pending = cls(_never_called)
        pending._settle(value=value)
        return pending

    @classmethod
    def rejected(cls, error: Exception) -> Pending[T]:
        """Create an already settled Pending failing with ``error``."""
        pending = cls(_never_called)
        pending._settle(error=error)
        return pending

    @classmethod
    def from_awaitable(cls, awaitable: Awaitable[T]) -> Pending[T]:
        """Adopt any awaitable. An existing Pending is returned unchanged.

        Args:
            awaitable: Coroutine, task, future or other awaitable.
        """
        if isinstance(awaitable, Pending):
            return awaitable

        async def _adopt() -> T:
            return await awaitable

        return cls(_adopt)

    def __await__(self) -> Generator[Any, Any, T]:
        return self._wait().__await__()

    def __repr__(self) -> str:
        if not self._settled:
            return 'Pending(<pending>)'
        if self._error is not None:
            return f'Pending(<failed: {self._error!r}>)'
        return f'Pending({self._value!r})'

    async def _wait(self) -> T:
        if not self._settled:
            async with self._lock:
                if not self._settled:
                    factory = self._factory
                    assert factory is not None
                    try:
                        value = await factory()
                    except Exception as exc:
                        self._settle(error=exc)
                    else:
                        self._settle(value=value)
        return self.result()

    def _settle(self, *, value: T | None = None, error: Exception | None = None) -> None:
        self._value = value
        self._error = error
        self._settled = True
        self._factory = None

    # --- Introspection ---

    def done(self) -> bool:
        """Check whether the Pending has settled (either way)."""
        return self._settled

    def result(self) -> T:
        """Return the settled value, re-raising a settled exception.

        Raises:
            PendingNotSettledError: If the Pending has not settled yet.
        """
        if not self._settled:
            raise PendingNotSettledError
        if self._error is not None:
            raise self._error
        return self._value  # type: ignore[return-value]

    def exception(self) -> Exception | None:
        """Return the settled exception, or None if it settled with a value.

        Raises:
            PendingNotSettledError: If the Pending has not settled yet.
        """
        if not self._settled:
            raise PendingNotSettledError
        return self._error

    # --- Continuations ---

    def then[U](
        self,
        on_ok: Callable[[T], U | Awaitable[U]] | None = None,
        on_err: Callable[[Exception], U | Awaitable[U]] | None = None,
    ) -> Pending[Any]:
        """Chain continuations for either outcome.

        ``on_ok`` receives the value, ``on_err`` the exception; either may be
        sync or async. A missing ``on_ok`` passes the value through, a missing
        ``on_err`` re-raises. An exception raised by ``on_ok`` is not routed
        to ``on_err`` of the same call.

        Returns:
            New Pending settling with the continuation's outcome.

        Example:
            ```python
            async def example():
                value = await Pending.rejected(KeyError('x')).then(
                    on_err=lambda exc: 'fallback'
                )
                assert value == 'fallback'
            ```
        """

        async def _continue() -> Any:
            try:
                value = await self
            except Exception as exc:
                if on_err is None:
                    raise
                return await maybe_await(on_err(exc))
            if on_ok is None:
                return value
            return await maybe_await(on_ok(value))

        return Pending(_continue)

    def catch[U](self, on_err: Callable[[Exception], U | Awaitable[U]]) -> Pending[T | U]:
        """Recover from a failure. Shorthand for ``then(None, on_err)``."""
        return self.then(None, on_err)

    def finally_(self, callback: Callable[[], Any]) -> Pending[T]:
        """Run ``callback`` after either outcome, keeping the outcome.

        If ``callback`` itself raises, its exception replaces the outcome.
        """

        async def _finally() -> T:
            try:
                return await self
            finally:
                await maybe_await(callback())

        return Pending(_finally)


async def _never_called() -> Any:
    msg = 'factory of a pre-settled Pending was called'
    raise AssertionError(msg)
