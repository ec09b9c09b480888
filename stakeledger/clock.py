"""Time sources for the ledger."""
from __future__ import annotations

import time


class SystemClock:
    """Wall-clock time, truncated to whole seconds."""

    def now(self) -> int:
        return int(time.time())


class ManualClock:
    """A clock that only moves when told to. Used by simulations and tests."""

    def __init__(self, start: int = 0) -> None:
        self._now = int(start)

    def now(self) -> int:
        return self._now

    def advance(self, seconds: int) -> int:
        if seconds < 0:
            raise ValueError("Cannot advance a clock backwards")
        self._now += int(seconds)
        return self._now
