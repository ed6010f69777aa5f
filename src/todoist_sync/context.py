"""Cancellation handle passed to every API call."""

import threading
import time
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from todoist_sync.errors import CancellationError


class Context:
    """Cancellation signal with an optional deadline.

    A context can be cancelled from any thread. Callbacks registered with
    ``add_cancel_callback`` run on cancellation, which lets a blocked call
    waiting on the network return as soon as the context is done.
    """

    def __init__(self, deadline: float | None = None) -> None:
        """Initialize context.

        Args:
            deadline: Absolute deadline on the ``time.monotonic()`` clock.
                None means no deadline.
        """
        self._deadline = deadline
        self._cancelled = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: list[Callable[[], Any]] = []

    @classmethod
    def background(cls) -> "Context":
        """Context that is never cancelled unless ``cancel()`` is called."""
        return cls()

    @classmethod
    def with_timeout(cls, seconds: float) -> "Context":
        """Create a context whose deadline is ``seconds`` from now.

        Args:
            seconds: Time budget in seconds.

        Returns:
            New context.
        """
        return cls(deadline=time.monotonic() + seconds)

    @classmethod
    def with_deadline(cls, when: datetime) -> "Context":
        """Create a context expiring at a wall-clock time.

        Args:
            when: Deadline. Naive datetimes are treated as UTC.

        Returns:
            New context.
        """
        if when.tzinfo is None:
            when = when.replace(tzinfo=timezone.utc)
        seconds = (when - datetime.now(timezone.utc)).total_seconds()
        return cls.with_timeout(seconds)

    def cancel(self) -> None:
        """Cancel the context. Safe to call more than once."""
        with self._lock:
            if self._cancelled.is_set():
                return
            self._cancelled.set()
            callbacks, self._callbacks = self._callbacks, []

        for callback in callbacks:
            callback()

    def add_cancel_callback(self, callback: Callable[[], Any]) -> None:
        """Run ``callback`` when the context is cancelled.

        The callback runs on the thread calling ``cancel()``, or immediately
        if the context is already cancelled. Deadlines do not trigger it.
        """
        with self._lock:
            if not self._cancelled.is_set():
                self._callbacks.append(callback)
                return
        callback()

    def remove_cancel_callback(self, callback: Callable[[], Any]) -> None:
        """Forget a callback registered with ``add_cancel_callback``."""
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    @property
    def deadline(self) -> float | None:
        """Monotonic deadline, if any."""
        return self._deadline

    @property
    def expired(self) -> bool:
        """Whether the deadline has elapsed."""
        return self._deadline is not None and time.monotonic() >= self._deadline

    @property
    def cancelled(self) -> bool:
        """Whether the context was cancelled or has expired."""
        return self._cancelled.is_set() or self.expired

    def remaining(self) -> float | None:
        """Seconds left until the deadline, never negative. None without deadline."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def raise_if_cancelled(self) -> None:
        """Raise CancellationError if the context is done.

        Raises:
            CancellationError: If cancelled or past the deadline.
        """
        if self._cancelled.is_set():
            raise CancellationError("context cancelled")
        if self.expired:
            raise CancellationError("context deadline exceeded")

    def __enter__(self) -> "Context":
        return self

    def __exit__(self, *args: Any) -> None:
        self.cancel()
