"""asyncio bridge for AsyncQueue.

The queue itself is callback driven and never touches an event loop. These
helpers adapt coroutine functions into workers and expose completions and
drain events as awaitables. All of them must be used from the thread running
the event loop.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable

from taskgate.queue import AsyncQueue, Completion, Hook, Worker

logger = logging.getLogger(__name__)


def coroutine_worker(func: Callable[[Any], Awaitable[Any]]) -> Worker:
    """Wrap ``async def func(task)`` into a queue worker.

    The completion is called with ``(result, None)`` when ``func`` returns and
    with ``(None, exc)`` when it raises or is cancelled, so the slot is always
    released. Errors are handed to the per-task callback, never re-raised.
    """
    in_flight: set[asyncio.Future[Any]] = set()

    def worker(task: Any, done: Completion) -> None:
        future = asyncio.ensure_future(func(task))
        in_flight.add(future)

        def _finish(fut: asyncio.Future[Any]) -> None:
            in_flight.discard(fut)
            if fut.cancelled():
                logger.debug("task %r was cancelled", task)
                done(None, asyncio.CancelledError())
                return

            exc = fut.exception()
            if exc is not None:
                logger.debug("task %r failed: %s", task, exc)
                done(None, exc)
                return

            done(fut.result(), None)

        future.add_done_callback(_finish)

    return worker


def push_async(queue: AsyncQueue, task: Any) -> asyncio.Future[tuple[Any, ...]]:
    """Push a task and return a future for the arguments passed to its completion."""
    loop = asyncio.get_running_loop()
    future: asyncio.Future[tuple[Any, ...]] = loop.create_future()

    def _resolve(*results: Any) -> None:
        if not future.done():
            future.set_result(results)

    queue.push(task, _resolve)
    return future


class DrainSignal:
    """Drain hook that coroutines can await.

    Install it as ``on_drain`` (optionally chaining another hook via ``then``)
    and ``await signal.wait(queue)`` to block until the queue is idle.
    """

    def __init__(self, then: Hook | None = None):
        self.then = then
        self.drain_count = 0
        self._event = asyncio.Event()

    def __call__(self, queue: AsyncQueue) -> None:
        self.drain_count += 1
        self._event.set()
        if self.then is not None:
            self.then(queue)

    async def wait(self, queue: AsyncQueue) -> None:
        """Return once ``queue`` has no pending or running tasks."""
        if queue.is_idle:
            return
        self._event.clear()
        await self._event.wait()
