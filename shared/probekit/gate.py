"""Delayed, resettable boolean gate backing the health and readiness probes.

A gate starts out *pending* and flips to *achieved* once ``delay`` seconds
have passed since its most recent :meth:`DelayedGate.reset`. Resetting at any
time forces it back to pending and restarts the window.

Every reset bumps a generation counter and tags the timer it schedules with
that generation. When a timer fires it only flips the gate if the generation
still matches, so a timer that was already running when a newer reset
happened can never mark the gate achieved early. Cancelling the old timer is
an optimisation on top of that check, not something correctness relies on.

Reads (:meth:`is_achieved`, :meth:`remaining`) take no lock. ``reset`` and
the timer callback share one lock around the generation check, the state
write and the timer handle swap.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable

Clock = Callable[[], float]


class DelayedGate:
    """Boolean that becomes true ``delay`` seconds after its last reset.

    Args:
        delay: Seconds to wait after each reset. ``<= 0`` means the gate is
            achieved immediately after every reset and no timer is scheduled.
        clock: Monotonic clock used for deadlines and ``remaining()``.
    """

    def __init__(self, delay: float, *, clock: Clock = time.monotonic) -> None:
        self._delay = float(delay)
        self._clock = clock
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._generation = 0
        self._achieved = False
        self._deadline: float | None = None
        self.reset()

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def deadline(self) -> float | None:
        """Clock value at which the pending transition fires, if any."""
        return self._deadline

    def is_achieved(self) -> bool:
        return self._achieved

    def reset(self) -> None:
        """Force the gate back to pending and restart the delay window."""
        with self._lock:
            self._generation += 1
            generation = self._generation
            self._achieved = False

            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

            if self._delay <= 0:
                self._deadline = None
                self._achieved = True
                return

            self._deadline = self._clock() + self._delay
            timer = threading.Timer(self._delay, self._fire, args=(generation,))
            timer.daemon = True
            self._timer = timer
            timer.start()

    def remaining(self) -> float:
        """Seconds until the gate is expected to flip, or 0.0.

        Advisory only: suitable for ``retry_after`` hints, not for scheduling.
        """
        deadline = self._deadline
        if deadline is None:
            return 0.0
        return max(0.0, deadline - self._clock())

    def remaining_ms(self) -> int:
        return int(self.remaining() * 1000)

    def _fire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            # deadline is cleared first so achieved never coexists with a deadline
            self._deadline = None
            self._achieved = True
            self._timer = None

    def __repr__(self) -> str:
        state = "achieved" if self._achieved else "pending"
        return f"<DelayedGate delay={self._delay}s {state} generation={self._generation}>"
