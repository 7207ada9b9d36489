"""Cancellable delayed calls for search-as-you-type."""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any, Protocol


class TimerHandle(Protocol):
    """The subset of threading.Timer the debouncer relies on."""

    def start(self) -> None: ...

    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], TimerHandle]


class Debouncer:
    """Run callback once input has been quiet for `delay` seconds.

    Each call() cancels the pending timer before scheduling a new one, so an
    older input can never be applied after a newer one.
    """

    def __init__(
        self,
        delay: float,
        callback: Callable[..., Any],
        timer_factory: TimerFactory = threading.Timer,
    ):
        self.delay = delay
        self._callback = callback
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._timer: TimerHandle | None = None
        self._args: tuple = ()
        self._generation = 0

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def call(self, *args: Any) -> None:
        """Schedule callback(*args), replacing any pending call."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            generation = self._generation
            self._args = args
            self._timer = self._timer_factory(self.delay, lambda: self._fire(generation))
            self._timer.start()

    def cancel(self) -> None:
        """Drop the pending call, if any."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            self._generation += 1

    def flush(self) -> bool:
        """Run the pending call now. Returns False if nothing was pending."""
        with self._lock:
            if self._timer is None:
                return False
            generation = self._generation
            self._timer.cancel()
        return self._fire(generation)

    def _fire(self, generation: int) -> bool:
        with self._lock:
            # a timer that lost the race with cancel() or a newer call()
            if generation != self._generation or self._timer is None:
                return False
            self._timer = None
            args = self._args
        self._callback(*args)
        return True
