"""AsyncSeq: an ordered sequence with async reduce, map and for-each.

AsyncSeq wraps a tuple of elements behind a single Pending computation that
settles to "the elements once every earlier transformation has finished".
``async_map`` replaces that Pending with a new one chained after it;
``async_reduce`` and ``async_for_each`` return fresh Pending values chained
after it and leave the sequence untouched.

Nothing runs until something is awaited. Chains are therefore cheap to build
and callbacks are never invoked at the call site.

Example:
    ```python
    async def fetch(user_id: int) -> dict:
        ...

    async def main():
        users = AsyncSeq(1, 2, 3).async_map(fetch)
        names = await users.async_map(lambda user: user['name'])
        total = await AsyncSeq(*names).async_reduce(lambda acc, name: acc + len(name), 0)
    ```
"""

from __future__ import annotations

import inspect
from collections.abc import AsyncIterable, AsyncIterator, Awaitable, Callable, Generator, Iterable
from typing import Any

from klaw_seq.async_.fold import MISSING, _Missing, fold, for_each, map_ordered
from klaw_seq.async_.pending import Pending

__all__ = ['AsyncSeq']


class AsyncSeq[T]:
    """Ordered sequence whose reduce/map/for-each steps may be async.

    Elements are processed strictly left to right and each step is awaited
    before the next one starts. The first failing step stops the walk and its
    exception reaches every awaiter unchanged.

    Attributes:
        _pending: Pending settling to the current elements as a tuple.
    """

    __slots__ = ('_pending',)

    def __init__(self, *items: T) -> None:
        """Create an AsyncSeq holding ``items``, already settled.

        Args:
            *items: Initial elements, in order.
        """
        self._pending: Pending[tuple[T, ...]] = Pending.resolved(items)

    @classmethod
    def from_iterable(cls, items: Iterable[T]) -> AsyncSeq[T]:
        """Create an AsyncSeq from any iterable."""
        return cls(*items)

    @classmethod
    def async_from(
        cls,
        source: Awaitable[Iterable[T]] | AsyncIterable[T] | Iterable[T],
        transform: Callable[..., Any] | None = None,
        context: object | None = None,
    ) -> AsyncSeq[Any]:
        """Adopt the elements an async source will produce.

        Args:
            source: Awaitable resolving to an iterable (coroutine, task,
                Pending, AsyncSeq), an async iterable drained in order, or a
                plain iterable, read when the AsyncSeq is first awaited.
            transform: Optional ``(item, index, items)`` applied with
                ``async_map`` right after adoption.
            context: Bound as the first argument of ``transform``.

        Returns:
            New AsyncSeq whose elements settle after ``source`` does.

        Raises:
            TypeError: ``source`` is neither awaitable nor iterable.
        """
        if inspect.isawaitable(source):
            awaitable = source

            async def _adopt() -> tuple[T, ...]:
                return tuple(await awaitable)

        elif isinstance(source, AsyncIterable):
            iterable = source

            async def _adopt() -> tuple[T, ...]:
                return tuple([item async for item in iterable])

        elif isinstance(source, Iterable):
            plain = source

            async def _adopt() -> tuple[T, ...]:
                return tuple(plain)

        else:
            msg = f'async_from() expects an awaitable or iterable, got {type(source).__name__!r}'
            raise TypeError(msg)

        seq: AsyncSeq[T] = cls()
        seq._pending = Pending(_adopt)
        if transform is not None:
            return seq.async_map(transform, context)
        return seq

    # --- Awaiting ---

    @property
    def pending(self) -> Pending[tuple[T, ...]]:
        """The Pending that currently governs the elements."""
        return self._pending

    def __await__(self) -> Generator[Any, Any, list[T]]:
        return self._as_list().__await__()

    async def _as_list(self) -> list[T]:
        return list(await self._pending)

    async def __aiter__(self) -> AsyncIterator[T]:
        for item in await self._pending:
            yield item

    def then(
        self,
        on_ok: Callable[[list[T]], Any] | None = None,
        on_err: Callable[[Exception], Any] | None = None,
    ) -> Pending[Any]:
        """Chain continuations on the elements, like ``Pending.then``.

        The continuation follows the elements as they are now: a later
        ``async_map`` on this AsyncSeq does not change what it receives.
        """
        return self._pending.then(list).then(on_ok, on_err)

    def catch(self, on_err: Callable[[Exception], Any]) -> Pending[Any]:
        """Recover from a failure of the pending elements."""
        return self.then(None, on_err)

    def __repr__(self) -> str:
        if not self._pending.done():
            return 'AsyncSeq(<pending>)'
        if self._pending.exception() is not None:
            return 'AsyncSeq(<failed>)'
        return f'AsyncSeq({list(self._pending.result())!r})'

    # --- Operations ---

    def async_reduce[A](
        self,
        reducer: Callable[..., A | Awaitable[A]],
        initial: A | _Missing = MISSING,
    ) -> Pending[A]:
        """Fold the elements left to right into one value.

        Args:
            reducer: ``(acc, item, index, items)``, sync or async.
            initial: Starting accumulator. Omit to seed from the first element.

        Returns:
            Pending settling to the final accumulator, or failing with
            EmptyReduceError when there are no elements and no ``initial``.

        Example:
            ```python
            async def example():
                assert await AsyncSeq(1, 2, 3).async_reduce(lambda a, b: a + b) == 6
            ```
        """
        previous = self._pending

        async def _reduced() -> A:
            return await fold(await previous, reducer, initial)

        return Pending(_reduced)

    def async_map[U](
        self,
        transform: Callable[..., U | Awaitable[U]],
        context: object | None = None,
    ) -> AsyncSeq[U]:
        """Replace each element with ``transform``'s result, in order.

        Chained after any earlier ``async_map``. Returns this same AsyncSeq so
        calls can be chained: ``seq.async_map(f).async_map(g)``.

        Args:
            transform: ``(item, index, items)``, sync or async.
            context: Bound as the first argument of ``transform``.
        """
        previous = self._pending

        async def _mapped() -> tuple[U, ...]:
            return tuple(await map_ordered(await previous, transform, context))

        self._pending = Pending(_mapped)  # type: ignore[assignment]
        return self  # type: ignore[return-value]

    def async_for_each(
        self,
        callback: Callable[..., Any],
        context: object | None = None,
    ) -> Pending[None]:
        """Call ``callback`` once per element, in order, when awaited.

        Calling this method invokes nothing; the walk runs when the returned
        Pending is awaited and it settles to None after the last callback.

        Args:
            callback: ``(item, index, items)``, sync or async.
            context: Bound as the first argument of ``callback``.
        """
        previous = self._pending

        async def _walked() -> None:
            await for_each(await previous, callback, context)

        return Pending(_walked)
