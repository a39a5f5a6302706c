"""Small concurrency helpers: a lock wrapper and a counting semaphore."""

from __future__ import annotations

import threading
from typing import Callable, ContextManager, Optional, TypeVar

T = TypeVar("T")


def with_lock(lock: ContextManager[object], fn: Optional[Callable[[], T]]) -> Optional[T]:
    """Run ``fn`` while holding ``lock`` and return its result; do nothing if ``fn`` is None."""
    if fn is None:
        return None
    with lock:
        return fn()


class Semaphore:
    """A semaphore that admits at most ``max_concurrency`` holders at once."""

    def __init__(self, max_concurrency: int) -> None:
        self.max_concurrency = max_concurrency
        self._tickets = threading.BoundedSemaphore(max_concurrency)

    def acquire(self) -> None:
        """Take a ticket, blocking until one is free."""
        self._tickets.acquire()

    def try_acquire(self) -> bool:
        """Take a ticket if one is free right now; report whether it was taken."""
        return self._tickets.acquire(blocking=False)

    def release(self) -> None:
        """Give a ticket back; raises ValueError if none is held."""
        self._tickets.release()

    def __enter__(self) -> "Semaphore":
        self.acquire()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()