"""Pytest fixtures for taskgate tests."""

from typing import Any

import pytest


class DeferredWorker:
    """Worker that holds completions until the test releases them."""

    def __init__(self):
        self.started: list[Any] = []
        self.completions: dict[Any, Any] = {}

    def __call__(self, task, done):
        self.started.append(task)
        self.completions[task] = done

    def finish(self, task, *results):
        self.completions.pop(task)(*results)


class HookRecorder:
    """Records hook firings in order as (name, running, length) tuples."""

    def __init__(self):
        self.events: list[tuple[str, int, int]] = []

    def hook(self, name):
        def _record(queue):
            self.events.append((name, queue.running, queue.length))

        return _record

    def names(self) -> list[str]:
        return [name for name, _, _ in self.events]

    def count(self, name) -> int:
        return self.names().count(name)


@pytest.fixture
def sync_worker():
    """Synchronous worker recording input and completing with (lower, upper)."""

    class SyncWorker:
        def __init__(self):
            self.seen: list[str] = []

        def __call__(self, task, done):
            self.seen.append(task)
            done(task.lower(), task.upper())

    return SyncWorker()


@pytest.fixture
def deferred_worker():
    return DeferredWorker()


@pytest.fixture
def hooks():
    return HookRecorder()
