"""
Cancellable one-shot idle timer.

reset() cancels the pending threading.Timer and schedules a new one; it never
mutates a live timer. Each schedule bumps a generation number that is passed to
the callback, so the owner can ignore a callback from a timer that was already
reset or stopped by the time the owner's lock let it through.

Not thread-safe on its own: the owner (ConnectionLifecycle) calls start/reset/
stop while holding its lock.
"""

import logging
import threading
from collections.abc import Callable

_log = logging.getLogger(__name__)


class IdleTimer:
    def __init__(self, interval_sec: float, callback: Callable[[int], None]) -> None:
        if interval_sec <= 0:
            raise ValueError("interval_sec must be positive")
        self._interval = interval_sec
        self._callback = callback
        self._timer: threading.Timer | None = None
        self._generation = 0

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def active(self) -> bool:
        """True while a callback is scheduled and has not fired yet."""
        return self._timer is not None and self._timer.is_alive()

    def is_current(self, generation: int) -> bool:
        return self._timer is not None and generation == self._generation

    def start(self) -> None:
        """Arm the timer (same as reset; kept for readability at first use)."""
        self.reset()

    def reset(self) -> None:
        self._cancel()
        self._generation += 1
        gen = self._generation
        t = threading.Timer(self._interval, self._fire, args=(gen,))
        t.daemon = True
        t.name = f"dbwrapper-idle-{gen}"
        self._timer = t
        t.start()
        _log.debug("Idle timer armed (generation=%s, %.3fs)", gen, self._interval)

    def stop(self) -> None:
        if self._timer is None:
            return
        self._cancel()
        self._timer = None
        self._generation += 1

    def _cancel(self) -> None:
        if self._timer is not None:
            self._timer.cancel()

    def _fire(self, generation: int) -> None:
        _log.debug("Idle timer expired (generation=%s)", generation)
        self._callback(generation)
