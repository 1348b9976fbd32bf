"""FIFO buffer of tasks waiting for admission."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Iterator


@dataclass(slots=True)
class PendingEntry:
    """Task waiting in the buffer together with its optional completion callback."""

    task: Any
    callback: Callable[..., Any] | None = None


class PendingBuffer:
    """Unbounded FIFO of pending entries.

    Entries are appended at the tail and removed from the head only; the buffer
    is never reordered.
    """

    def __init__(self) -> None:
        self._entries: deque[PendingEntry] = deque()

    def append(self, task: Any, callback: Callable[..., Any] | None = None) -> PendingEntry:
        """Add a task at the tail of the buffer."""
        entry = PendingEntry(task=task, callback=callback)
        self._entries.append(entry)
        return entry

    def pop(self) -> PendingEntry | None:
        """Remove and return the head entry, or None if the buffer is empty."""
        if not self._entries:
            return None
        return self._entries.popleft()

    def size(self) -> int:
        """Number of entries still waiting for admission."""
        return len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __iter__(self) -> Iterator[PendingEntry]:
        return iter(self._entries)
