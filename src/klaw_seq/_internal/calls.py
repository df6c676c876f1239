"""Calling user functions that may be sync or async.

Reducers, transforms and callbacks are accepted in whatever shape the caller
has at hand: plain functions, coroutine functions, callables returning any
awaitable, with or without the trailing ``index`` / ``items`` parameters.
"""

from __future__ import annotations

import inspect
import types
from collections.abc import Awaitable, Callable
from typing import Any

__all__ = ['adapt_call', 'maybe_await', 'positional_arity']

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


async def maybe_await[T](value: T | Awaitable[T]) -> T:
    """Await ``value`` if it is awaitable, otherwise return it as is."""
    if inspect.isawaitable(value):
        return await value
    return value  # type: ignore[return-value]


def positional_arity(fn: Callable[..., Any]) -> int | None:
    """Count the positional parameters ``fn`` accepts.

    Returns None when ``fn`` takes ``*args`` or its signature cannot be
    inspected.
    """
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        return None

    count = 0
    for parameter in signature.parameters.values():
        if parameter.kind is inspect.Parameter.VAR_POSITIONAL:
            return None
        if parameter.kind in _POSITIONAL:
            count += 1
    return count


def _is_builtin(fn: Callable[..., Any]) -> bool:
    """True for callables implemented in C: builtin functions, methods and types."""
    if inspect.isbuiltin(fn) or inspect.ismethoddescriptor(fn):
        return True
    return isinstance(fn, type) and fn.__module__ == 'builtins'


def _builtin_arity(fn: Callable[..., Any], min_args: int, max_args: int) -> int:
    """Number of leading arguments to pass a builtin.

    Only required positionals count: optional ones such as ``int(x, base)``
    or ``round(number, ndigits)`` mean something unrelated to an index.
    """
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        return min_args

    required = 0
    for parameter in signature.parameters.values():
        if parameter.kind is inspect.Parameter.VAR_POSITIONAL:
            return min_args
        if parameter.kind in _POSITIONAL and parameter.default is inspect.Parameter.empty:
            required += 1
    return min(max(required, min_args), max_args)


def _call_arity(fn: Callable[..., Any], min_args: int, max_args: int) -> int:
    """Number of leading arguments to pass ``fn`` out of ``max_args``."""
    if _is_builtin(fn):
        return _builtin_arity(fn, min_args, max_args)
    try:
        inspect.signature(fn)
    except (TypeError, ValueError):
        return min_args
    arity = positional_arity(fn)
    return max_args if arity is None else arity


def adapt_call(
    fn: Callable[..., Any],
    context: object | None,
    max_args: int,
    min_args: int = 1,
) -> Callable[..., Any]:
    """Bind ``fn`` to ``context`` and trim calls to the arguments it accepts.

    Python callables get one argument per declared positional parameter, or
    all of them when they take ``*args``. Builtins and callables without a
    readable signature get ``min_args``, or more when a builtin requires it.
    Bound methods and builtins already have a receiver and ignore ``context``.

    Args:
        fn: User callable.
        context: Object to bind as the first argument, or None for no binding.
        max_args: Number of positional arguments the engine passes.
        min_args: Leading arguments every call needs: the item, or the
            accumulator and the item.

    Returns:
        A callable taking ``max_args`` positional arguments.
    """
    if not callable(fn):
        msg = f'{type(fn).__name__!r} object is not callable'
        raise TypeError(msg)

    if context is not None and not (inspect.ismethod(fn) or _is_builtin(fn)):
        target = types.MethodType(fn, context)
    else:
        target = fn

    arity = _call_arity(target, min_args, max_args)
    if arity >= max_args:
        return target

    def trimmed(*args: Any) -> Any:
        return target(*args[:arity])

    return trimmed
