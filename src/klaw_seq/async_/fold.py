"""Sequential fold, map and for-each over a sequence with async steps.

Every step is awaited before the next one starts, so elements are always
processed in their original order and each reducer call sees the previous
call's resolved accumulator. The first failing step stops the walk and its
exception propagates unchanged.

Example:
    ```python
    async def add(acc: int, x: int) -> int:
        await anyio.sleep(0)
        return acc + x

    async def example():
        assert await fold([1, 2, 3], add, 0) == 6
        assert await map_ordered([1, 2, 3], lambda x: x * 2) == [2, 4, 6]
    ```
"""

from __future__ import annotations

import enum
from collections.abc import Awaitable, Callable, Iterable, Sequence
from typing import Any, Final

import anyio.lowlevel

from klaw_seq._config import _active_config
from klaw_seq._internal.calls import adapt_call, maybe_await
from klaw_seq._logging import get_logger
from klaw_seq.errors import EmptyReduceError

__all__ = ['MISSING', 'fold', 'for_each', 'map_ordered']


class _Missing(enum.Enum):
    MISSING = 'MISSING'

    def __repr__(self) -> str:
        return 'MISSING'


MISSING: Final = _Missing.MISSING
"""Marks an omitted initial value, so ``None`` stays a valid accumulator."""

type Reducer[A, T] = Callable[[A, T, int, Sequence[T]], A | Awaitable[A]]
type Transform[T, U] = Callable[[T, int, Sequence[T]], U | Awaitable[U]]


async def _checkpoint() -> None:
    if _active_config().cooperative:
        await anyio.lowlevel.checkpoint()


async def fold[T, A](
    items: Iterable[T],
    reducer: Reducer[A, T] | Callable[..., Any],
    initial: A | _Missing = MISSING,
) -> A:
    """Reduce ``items`` left to right, awaiting each reducer call.

    Without ``initial`` the first element seeds the accumulator; a single
    element is returned as is and the reducer is never called. With
    ``initial`` and no elements, ``initial`` is returned unchanged.

    Args:
        items: Elements to fold. Snapshotted into a tuple before the first step.
        reducer: ``(acc, item, index, items)``, sync or async. Trailing
            parameters it does not declare are not passed.
        initial: Starting accumulator. Omit to seed from the first element.

    Returns:
        The final accumulator.

    Raises:
        EmptyReduceError: No elements and no ``initial``.
    """
    snapshot = tuple(items)
    seeded = initial is not MISSING
    log = get_logger(__name__).bind(op='fold', count=len(snapshot))

    if seeded:
        acc: Any = initial
        start = 0
    elif not snapshot:
        raise EmptyReduceError
    else:
        acc = snapshot[0]
        start = 1

    log.debug('seq.fold.start', seeded=seeded)
    call = adapt_call(reducer, None, 4, 2)
    for index in range(start, len(snapshot)):
        try:
            acc = await maybe_await(call(acc, snapshot[index], index, snapshot))
        except Exception as exc:
            log.debug('seq.step.failed', index=index, error=repr(exc))
            raise
        await _checkpoint()

    log.debug('seq.fold.done')
    return acc


async def map_ordered[T, U](
    items: Iterable[T],
    transform: Transform[T, U] | Callable[..., Any],
    context: object | None = None,
) -> list[U]:
    """Transform each element in order, awaiting each call before the next.

    The output has the same length as the input and result ``i`` always comes
    from element ``i``. An empty input returns ``[]`` without calling
    ``transform``.

    Args:
        items: Elements to transform.
        transform: ``(item, index, items)``, sync or async.
        context: Bound as the first argument of ``transform`` when not None.
    """
    snapshot = tuple(items)
    if not snapshot:
        return []

    log = get_logger(__name__).bind(op='map', count=len(snapshot))
    log.debug('seq.map.start')
    call = adapt_call(transform, context, 3)

    async def place(out: list[Any], item: T, index: int, source: Sequence[T]) -> list[Any]:
        out[index] = await maybe_await(call(item, index, source))
        return out

    results: list[U] = await fold(snapshot, place, [None] * len(snapshot))
    log.debug('seq.map.done')
    return results


async def for_each[T](
    items: Iterable[T],
    callback: Transform[T, Any] | Callable[..., Any],
    context: object | None = None,
) -> None:
    """Call ``callback`` once per element, in order, awaiting each call.

    Return values of ``callback`` are discarded.

    Args:
        items: Elements to walk.
        callback: ``(item, index, items)``, sync or async.
        context: Bound as the first argument of ``callback`` when not None.
    """
    snapshot = tuple(items)
    if not snapshot:
        return

    log = get_logger(__name__).bind(op='for_each', count=len(snapshot))
    log.debug('seq.for_each.start')
    call = adapt_call(callback, context, 3)
    for index, item in enumerate(snapshot):
        try:
            await maybe_await(call(item, index, snapshot))
        except Exception as exc:
            log.debug('seq.step.failed', index=index, error=repr(exc))
            raise
        await _checkpoint()
    log.debug('seq.for_each.done')
