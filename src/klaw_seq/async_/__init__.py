"""Async building blocks: AsyncSeq, Pending and the sequential engine.

- AsyncSeq: ordered sequence with async reduce, map and for-each
- Pending: lazily started, run-once, multi-await async value
- fold / map_ordered / for_each: the same walks over a plain sequence

Examples:
    >>> from klaw_seq.async_ import AsyncSeq, fold
    >>>
    >>> async def main():
    ...     doubled = await AsyncSeq(1, 2, 3).async_map(lambda x: x * 2)
    ...     total = await fold(doubled, lambda acc, x: acc + x, 0)
"""

from klaw_seq.async_.fold import MISSING, fold, for_each, map_ordered
from klaw_seq.async_.pending import Pending
from klaw_seq.async_.seq import AsyncSeq

__all__ = [
    'MISSING',
    'AsyncSeq',
    'Pending',
    'fold',
    'for_each',
    'map_ordered',
]
