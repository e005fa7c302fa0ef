"""Shared test fixtures."""

import threading

import pytest

from lens.recurring.runner import RecurringRunner


class Counter:
    """Thread-safe call counter used as a runner callback."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.count = 0

    def __call__(self) -> None:
        with self._lock:
            self.count += 1


@pytest.fixture
def counter() -> Counter:
    return Counter()


@pytest.fixture
def runner_factory():
    """Build runners and dispose every one of them after the test."""
    created: list[RecurringRunner] = []

    def _make(callback, interval, **kwargs) -> RecurringRunner:
        runner = RecurringRunner(callback, interval, **kwargs)
        created.append(runner)
        return runner

    yield _make
    for runner in created:
        runner.dispose()
