# src/logshark/engine/clock.py
"""Clock abstraction for testable time-based flushing.

The batch persister seals a partially filled batch once it has been open for
flush_interval_seconds. Production code uses SystemClock; tests inject
MockClock to age a buffer without sleeping.
"""

from __future__ import annotations

import time
from typing import Protocol


class Clock(Protocol):
    """Abstract monotonic clock."""

    def monotonic(self) -> float:
        """Return monotonic time in seconds (never goes backwards)."""
        ...


class SystemClock:
    """Production clock using time.monotonic()."""

    def monotonic(self) -> float:
        return time.monotonic()


class MockClock:
    """Controllable clock for deterministic testing.

    Example:
        clock = MockClock(start=0.0)
        persister = ConcurrentBatchPersister(store, PersisterConfig(flush_interval_seconds=1.0), clock=clock)

        persister.enqueue(record)   # buffer opened at t=0
        clock.advance(1.5)
        persister.enqueue(record)   # buffer is 1.5s old -> batch sealed
    """

    def __init__(self, start: float = 0.0) -> None:
        self._current = start

    def monotonic(self) -> float:
        return self._current

    def advance(self, seconds: float) -> None:
        """Advance mock time by specified seconds.

        Raises:
            ValueError: If seconds is negative.
        """
        if seconds < 0:
            raise ValueError(f"Cannot advance time by negative amount: {seconds}")
        self._current += seconds


# Default clock for production use
DEFAULT_CLOCK: Clock = SystemClock()
