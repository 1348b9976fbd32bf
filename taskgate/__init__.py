"""taskgate: bounded-concurrency task queue with lifecycle hooks."""

from taskgate.aio import DrainSignal, coroutine_worker, push_async
from taskgate.buffer import PendingBuffer, PendingEntry
from taskgate.errors import (
    BusyError,
    ConfigurationError,
    InvalidCallbackError,
    InvalidConfigurationError,
    QueueError,
)
from taskgate.queue import AsyncQueue
from taskgate.settings import QueueSettings

__all__ = [
    "AsyncQueue",
    "BusyError",
    "ConfigurationError",
    "DrainSignal",
    "InvalidCallbackError",
    "InvalidConfigurationError",
    "PendingBuffer",
    "PendingEntry",
    "QueueError",
    "QueueSettings",
    "coroutine_worker",
    "push_async",
]

__version__ = "0.1.0"
