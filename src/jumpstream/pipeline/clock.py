"""Injectable time sources."""

from __future__ import annotations

import time
from typing import Protocol


class Clock(Protocol):
    """Anything that can report the current time in milliseconds."""

    def now_ms(self) -> float: ...


class MonotonicClock:
    """Wall-clock independent time from ``time.monotonic``."""

    def now_ms(self) -> float:
        return time.monotonic() * 1000.0


class ManualClock:
    """Clock advanced explicitly, for deterministic replay and tests."""

    def __init__(self, start_ms: float = 0.0) -> None:
        self._now_ms = start_ms

    def now_ms(self) -> float:
        return self._now_ms

    def set(self, now_ms: float) -> None:
        """Jump to an absolute time."""
        self._now_ms = now_ms

    def advance(self, delta_ms: float) -> float:
        """Move time forward and return the new value."""
        self._now_ms += delta_ms
        return self._now_ms
