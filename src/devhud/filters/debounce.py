"""Trailing-edge debouncing for filter commits."""

import threading
from collections.abc import Callable
from typing import Any, Generic, TypeVar

import structlog

from devhud.config import DEFAULT_DEBOUNCE_MS

log = structlog.get_logger()

T = TypeVar("T")

DEFAULT_DEBOUNCE_SECONDS = DEFAULT_DEBOUNCE_MS / 1000

# Same call shape as threading.Timer: factory(interval, function, args=...)
TimerFactory = Callable[..., Any]


class Debouncer(Generic[T]):
    """Run a callback once calls stop arriving for ``wait`` seconds.

    Every ``call`` cancels the pending timer and schedules a new one, so only
    the last value is ever delivered. The handle owner must call ``cancel``
    on teardown.
    """

    def __init__(
        self,
        callback: Callable[[T], None],
        wait: float = DEFAULT_DEBOUNCE_SECONDS,
        timer_factory: TimerFactory = threading.Timer,
    ):
        self.callback = callback
        self.wait = wait
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._timer: Any = None
        self._value: T | None = None
        # Bumped on every schedule/cancel so a stale timer firing is a no-op
        self._generation = 0

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    def call(self, value: T) -> None:
        """Schedule ``callback(value)``, replacing any pending call."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            self._value = value
            timer = self._timer_factory(self.wait, self._fire, args=(self._generation,))
            timer.daemon = True
            self._timer = timer
        timer.start()

    def cancel(self) -> None:
        """Drop the pending call, if any."""
        with self._lock:
            if self._timer is None:
                return
            self._timer.cancel()
            self._timer = None
            self._value = None
            self._generation += 1
        log.debug("Debounced call cancelled")

    def flush(self) -> None:
        """Run the pending call now instead of waiting."""
        with self._lock:
            if self._timer is None:
                return
            self._timer.cancel()
            self._generation += 1
            value = self._value
            self._timer = None
            self._value = None
        self.callback(value)  # type: ignore[arg-type]

    def _fire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self._timer is None:
                return
            value = self._value
            self._timer = None
            self._value = None
        self.callback(value)  # type: ignore[arg-type]
