"""klaw-seq: ordered async reduce, map and for-each for Python 3.13+.

Flat imports (preferred):
    from klaw_seq import AsyncSeq, Pending, EmptyReduceError

Submodule imports (for organization):
    from klaw_seq.async_ import AsyncSeq, fold, map_ordered, for_each
    from klaw_seq.errors import EmptyReduce, EmptyReduceError
"""

# Async
from klaw_seq.async_ import MISSING, AsyncSeq, Pending, fold, for_each, map_ordered

# Config
from klaw_seq._config import SeqConfig, get_config, init

# Logging
from klaw_seq._logging import (
    add_log_hook,
    clear_log_hooks,
    configure_logging,
    get_logger,
    remove_log_hook,
)

# Errors
from klaw_seq.errors import (
    EmptyReduce,
    EmptyReduceError,
    PendingNotSettled,
    PendingNotSettledError,
)

__all__ = [
    'MISSING',
    'AsyncSeq',
    'EmptyReduce',
    'EmptyReduceError',
    'Pending',
    'PendingNotSettled',
    'PendingNotSettledError',
    'SeqConfig',
    'add_log_hook',
    'clear_log_hooks',
    'configure_logging',
    'fold',
    'for_each',
    'get_config',
    'get_logger',
    'init',
    'map_ordered',
    'remove_log_hook',
]
