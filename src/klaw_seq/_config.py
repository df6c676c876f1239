"""Library configuration: SeqConfig and initialization."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from klaw_seq._logging import configure_logging

__all__ = [
    'SeqConfig',
    'get_config',
    'init',
]

_FALSY = frozenset({'0', 'false', 'no', 'off'})
_TRUTHY = frozenset({'1', 'true', 'yes', 'on'})


@dataclass(frozen=True)
class SeqConfig:
    """Configuration for klaw-seq.

    Attributes:
        log_level: Logging level (e.g., "DEBUG", "INFO"). None = silent.
        cooperative: Yield to the event loop between elements of a walk.
        json_output: Render logs as JSON (True) or console text (False).
    """

    log_level: str | None = None
    cooperative: bool = True
    json_output: bool = True


# Set by init()
_config: SeqConfig | None = None
_DEFAULT_CONFIG = SeqConfig()


def _detect_log_level() -> str | None:
    """Read KLAW_SEQ_LOG_LEVEL, ignoring empty values."""
    level = os.environ.get('KLAW_SEQ_LOG_LEVEL', '').strip()
    return level.upper() or None


def _detect_cooperative(default: bool = True) -> bool:
    """Read KLAW_SEQ_COOPERATIVE, falling back to ``default``."""
    raw = os.environ.get('KLAW_SEQ_COOPERATIVE', '').strip().lower()
    if not raw:
        return default
    if raw in _FALSY:
        return False
    if raw in _TRUTHY:
        return True
    logging.warning("Unknown KLAW_SEQ_COOPERATIVE value '%s', keeping %s", raw, default)
    return default


def init(
    log_level: str | None = None,
    *,
    cooperative: bool | None = None,
    json_output: bool = True,
) -> SeqConfig:
    """Initialize klaw-seq with the given configuration.

    Args:
        log_level: Logging level ("DEBUG", "INFO", etc.). Falls back to
            KLAW_SEQ_LOG_LEVEL; None = silent.
        cooperative: Yield between elements. Falls back to
            KLAW_SEQ_COOPERATIVE, then True.
        json_output: Render logs as JSON.

    Returns:
        The SeqConfig that was set.

    Example:
        ```python
        import klaw_seq

        klaw_seq.init(log_level='DEBUG', json_output=False)
        ```
    """
    global _config  # noqa: PLW0603

    resolved_level = log_level if log_level is not None else _detect_log_level()
    resolved_cooperative = _detect_cooperative() if cooperative is None else cooperative

    _config = SeqConfig(
        log_level=resolved_level,
        cooperative=resolved_cooperative,
        json_output=json_output,
    )

    if resolved_level is not None:
        configure_logging(resolved_level, json_output=json_output)

    return _config


def get_config() -> SeqConfig:
    """Get the current configuration.

    Raises:
        RuntimeError: If init() has not been called.
    """
    if _config is None:
        msg = 'klaw-seq not initialized. Call klaw_seq.init() first.'
        raise RuntimeError(msg)
    return _config


def _active_config() -> SeqConfig:
    """Configuration the engine runs with: init()'s, else defaults."""
    return _config if _config is not None else _DEFAULT_CONFIG


def _reset() -> None:
    """Forget any init() call. Test helper."""
    global _config  # noqa: PLW0603
    _config = None
