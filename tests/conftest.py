"""Pytest configuration and shared fixtures for klaw-seq tests."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from klaw_seq import _config, clear_log_hooks

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture(autouse=True)
def reset_state() -> Generator[None]:
    """Forget init() and log hooks around each test."""
    _config._reset()
    clear_log_hooks()
    yield
    _config._reset()
    clear_log_hooks()


class Recorder:
    """Callable that records every call and returns a configurable value."""

    def __init__(self, returns: Any = None) -> None:
        self.calls: list[tuple[Any, ...]] = []
        self.returns = returns

    def __call__(self, *args: Any) -> Any:
        self.calls.append(args)
        return self.returns

    @property
    def count(self) -> int:
        return len(self.calls)


@pytest.fixture
def recorder() -> Recorder:
    """Fresh call recorder."""
    return Recorder()


@pytest.fixture
def sample_items() -> list[int]:
    """Sample elements for testing."""
    return [1, 2, 3, 4, 5]
