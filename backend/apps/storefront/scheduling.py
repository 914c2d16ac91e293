from __future__ import annotations

import time
from typing import Callable, Optional


class Debouncer:
    """
    Coalesces bursts of input into a single call.

    The scheduled callback runs at most once per ``interval`` seconds after the
    last ``schedule`` call, and only when the owner polls. Each ``schedule``
    replaces the pending callback and pushes the deadline back, so only the
    latest input is acted upon. The clock is injectable so the contract does
    not depend on any particular timer.
    """

    def __init__(self, interval: float, clock: Optional[Callable[[], float]] = None):
        if interval < 0:
            raise ValueError("Debounce interval must not be negative")
        self.interval = interval
        self.clock = clock or time.monotonic
        self._callback: Optional[Callable[[], None]] = None
        self._deadline: Optional[float] = None

    @property
    def pending(self) -> bool:
        return self._callback is not None

    def schedule(self, callback: Callable[[], None]) -> None:
        self._callback = callback
        self._deadline = self.clock() + self.interval

    def due(self) -> bool:
        return self.pending and self.clock() >= self._deadline

    def poll(self) -> bool:
        """Run the pending callback if its deadline passed. Returns whether it ran."""
        if not self.due():
            return False
        return self.flush()

    def flush(self) -> bool:
        callback = self._callback
        self.cancel()
        if callback is None:
            return False
        callback()
        return True

    def cancel(self) -> None:
        self._callback = None
        self._deadline = None
