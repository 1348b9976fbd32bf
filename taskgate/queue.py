"""Bounded-concurrency task queue with lifecycle hooks.

A single worker routine processes submitted tasks with at most ``concurrency``
of them in flight. Tasks beyond the limit wait in FIFO order and are admitted
as running tasks complete.

Hooks:
- ``on_saturated`` fires when a submission brings the running count up to the
  concurrency limit.
- ``on_empty`` fires when a dispatch takes the last pending task.
- ``on_drain`` fires when a completion leaves nothing pending and nothing running.

Workers, callbacks and hooks must not raise past the queue. The queue does not
catch their errors, and a raise that escapes before the completion bookkeeping
runs leaves the running count elevated.
"""

from __future__ import annotations

import logging
import math
from collections import deque
from numbers import Real
from typing import Any, Callable, cast

from taskgate.buffer import PendingBuffer, PendingEntry
from taskgate.errors import BusyError, ConfigurationError, InvalidCallbackError, InvalidConfigurationError
from taskgate.settings import QueueSettings

logger = logging.getLogger(__name__)

Completion = Callable[..., None]
Worker = Callable[[Any, Completion], Any]
Hook = Callable[["AsyncQueue"], Any]


class AsyncQueue:
    """FIFO queue that hands tasks to a worker under a concurrency limit."""

    def __init__(
        self,
        worker: Worker | None = None,
        *,
        concurrency: int | None = None,
        on_drain: Hook | None = None,
        on_empty: Hook | None = None,
        on_saturated: Hook | None = None,
        settings: QueueSettings | None = None,
    ):
        """Create a queue.

        Args:
            worker: Routine called as ``worker(task, completion)``; mandatory
            concurrency: Max in-flight tasks, 0 for unbounded (default: settings, 1)
            on_drain: Hook called when all work has finished
            on_empty: Hook called when the last pending task is dispatched
            on_saturated: Hook called when a push fills the last free slot
            settings: Source of defaults for omitted arguments
        """
        self._worker: Worker | None = None
        self._concurrency = 1
        self._on_drain: Hook | None = None
        self._on_empty: Hook | None = None
        self._on_saturated: Hook | None = None

        self._pending = PendingBuffer()
        self._running = 0
        self._dispatch_requests: deque[bool] = deque()
        self._dispatching = False

        if concurrency is None:
            concurrency = (settings or QueueSettings()).concurrency

        self.concurrency = concurrency
        self.worker = worker
        self.on_drain = on_drain
        self.on_empty = on_empty
        self.on_saturated = on_saturated

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(concurrency={self._concurrency}, "
            f"running={self._running}, pending={len(self._pending)})"
        )

    def __len__(self) -> int:
        return len(self._pending)

    @property
    def running(self) -> int:
        """Number of admitted tasks that have not completed yet."""
        return self._running

    @property
    def length(self) -> int:
        """Number of tasks waiting for admission."""
        return len(self._pending)

    @property
    def is_idle(self) -> bool:
        return self._running == 0 and not self._pending

    # Guarded configuration

    @property
    def worker(self) -> Worker:
        return cast(Worker, self._worker)

    @worker.setter
    def worker(self, value: Worker | None) -> None:
        self._worker = self._replace_routine("worker", value, allow_none=False)

    @property
    def concurrency(self) -> int:
        return self._concurrency

    @concurrency.setter
    def concurrency(self, value: int | float | None) -> None:
        if value is None:
            value = 1
        if isinstance(value, bool) or not isinstance(value, Real):
            raise InvalidConfigurationError(f"concurrency must be a number, got {type(value).__name__}")
        if not math.isfinite(value) or value < 0:
            raise InvalidConfigurationError(f"concurrency must be a finite number >= 0, got {value!r}")
        self._ensure_idle("concurrency")
        self._concurrency = int(value)
        logger.debug("concurrency set to %d", self._concurrency)

    @property
    def on_saturated(self) -> Hook | None:
        return self._on_saturated

    @on_saturated.setter
    def on_saturated(self, value: Hook | None) -> None:
        self._on_saturated = self._replace_routine("on_saturated", value, allow_none=True)

    @property
    def on_empty(self) -> Hook | None:
        return self._on_empty

    @on_empty.setter
    def on_empty(self, value: Hook | None) -> None:
        self._on_empty = self._replace_routine("on_empty", value, allow_none=True)

    @property
    def on_drain(self) -> Hook | None:
        return self._on_drain

    @on_drain.setter
    def on_drain(self, value: Hook | None) -> None:
        self._on_drain = self._replace_routine("on_drain", value, allow_none=True)

    def _replace_routine(self, field_name: str, value: Any, *, allow_none: bool) -> Any:
        """Validate a routine-valued field and check the busy guard."""
        if value is None and not allow_none:
            raise ConfigurationError(f"{field_name} must not be None")
        if value is not None and not callable(value):
            raise InvalidConfigurationError(f"{field_name} must be callable, got {type(value).__name__}")
        self._ensure_idle(field_name)
        logger.debug("%s set to %r", field_name, value)
        return value

    def _ensure_idle(self, field_name: str) -> None:
        if self._running > 0:
            raise BusyError(field_name, self._running)

    # Submission and dispatch

    def push(self, task: Any, callback: Callable[..., Any] | None = None) -> AsyncQueue:
        """Submit a task, optionally with a callback receiving the worker's results.

        The task starts before this returns if a slot is free. With a worker
        that completes synchronously, the whole completion chain unwinds
        before this returns.

        Returns:
            The queue itself, for chaining
        """
        if callback is not None and not callable(callback):
            raise InvalidCallbackError(f"callback for a task must be callable, got {type(callback).__name__}")

        self._pending.append(task, callback)
        self._attempt_dispatch(from_submission=True)
        return self

    def _admit(self) -> bool:
        return self._concurrency == 0 or self._running < self._concurrency

    def _attempt_dispatch(self, from_submission: bool) -> None:
        """Request a dispatch attempt and run requests until none are left.

        Attempts made while the loop is already running (a worker completing
        synchronously, or a hook pushing more work) are queued and handled by
        the outer loop, so synchronous completion chains never deepen the stack.
        A push that arrives mid-loop while the gate is closed records nothing;
        the completion that frees the slot admits it without firing on_saturated.
        """
        if self._dispatching:
            if from_submission and not self._admit():
                return
            self._dispatch_requests.append(from_submission)
            return

        # Requests left over from a worker that raised run after this one.
        self._dispatch_requests.appendleft(from_submission)

        self._dispatching = True
        try:
            while self._dispatch_requests:
                self._dispatch_one(self._dispatch_requests.popleft())
        finally:
            self._dispatching = False

    def _dispatch_one(self, from_submission: bool) -> None:
        if not self._admit():
            return

        entry = self._pending.pop()
        if entry is None:
            return

        self._running += 1
        logger.debug(
            "dispatching task %r (running=%d, concurrency=%d, pending=%d)",
            entry.task,
            self._running,
            self._concurrency,
            len(self._pending),
        )

        if from_submission and self._running == self._concurrency and self._on_saturated is not None:
            logger.debug("queue saturated at %d running", self._running)
            self._on_saturated(self)

        if not self._pending and self._on_empty is not None:
            logger.debug("pending buffer empty")
            self._on_empty(self)

        self.worker(entry.task, self._completion_for(entry))

    def _completion_for(self, entry: PendingEntry) -> Completion:
        completed = False

        def complete(*results: Any) -> None:
            nonlocal completed
            if completed:
                logger.warning("completion for task %r called more than once; ignoring", entry.task)
                return
            completed = True

            if entry.callback is not None:
                entry.callback(*results)

            self._running -= 1
            logger.debug("task %r completed (running=%d, pending=%d)", entry.task, self._running, len(self._pending))

            if not self._pending and self._running == 0 and self._on_drain is not None:
                logger.debug("queue drained")
                self._on_drain(self)

            self._attempt_dispatch(from_submission=False)

        return complete
