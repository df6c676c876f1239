"""Error types: dual struct+exception for Result-style and raise-based code."""

from __future__ import annotations

import msgspec

__all__ = [
    'EmptyReduce',
    'EmptyReduceError',
    'PendingNotSettled',
    'PendingNotSettledError',
]


class EmptyReduce(msgspec.Struct, frozen=True, gc=False):
    """Reduce of an empty sequence without an initial value - struct variant."""

    op: str = 'reduce'

    def to_exception(self) -> EmptyReduceError:
        """Convert to exception for raise-based code."""
        return EmptyReduceError(self.op)


class EmptyReduceError(TypeError):
    """Reduce of an empty sequence without an initial value - exception variant.

    Subclasses TypeError, matching ``functools.reduce`` on an empty iterable.
    """

    def __init__(self, op: str = 'reduce') -> None:
        self.op = op
        super().__init__(f'{op}() of empty sequence with no initial value')

    def to_struct(self) -> EmptyReduce:
        """Convert to struct for Result-based code."""
        return EmptyReduce(self.op)


class PendingNotSettled(msgspec.Struct, frozen=True, gc=False):
    """Pending value read before it settled - struct variant."""

    def to_exception(self) -> PendingNotSettledError:
        """Convert to exception for raise-based code."""
        return PendingNotSettledError()


class PendingNotSettledError(RuntimeError):
    """Pending value read before it settled - exception variant."""

    def __init__(self) -> None:
        super().__init__('Pending value has not settled yet; await it first')

    def to_struct(self) -> PendingNotSettled:
        """Convert to struct for Result-based code."""
        return PendingNotSettled()
