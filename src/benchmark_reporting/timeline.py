"""Monotonic event timeline for one benchmark session."""

from __future__ import annotations

import time
from collections.abc import Callable, Mapping

from .errors import UsageError

Clock = Callable[[], float]


def now_ms() -> float:
    """Milliseconds on a monotonic clock with an arbitrary fixed epoch."""
    return time.perf_counter_ns() / 1_000_000


# Captured when this module is first imported (process bootstrap).
BOOTSTRAP_TIME: float = now_ms()

FIXED_KEYS = frozenset({"bootstrapTime", "instanceTime", "start", "stop"})


class EventTimeline:
    """Named timestamps relative to process start.

    `start` and `stop` stay at 0.0 until written. Caller-supplied points live
    in their own mapping and are merged into the flat event map on export.
    """

    def __init__(self, *, clock: Clock = now_ms, bootstrap_time: float = BOOTSTRAP_TIME) -> None:
        self._clock = clock
        self.bootstrap_time = bootstrap_time
        self.instance_time = clock()
        self.start = 0.0
        self.stop = 0.0
        self._points: dict[str, float] = {}

    def now(self) -> float:
        """Current time on the timeline clock (ms)."""
        return self._clock()

    @property
    def points(self) -> Mapping[str, float]:
        """Snapshot of the caller-supplied data points."""
        return dict(self._points)

    def insert(self, name: str, timestamp: float) -> None:
        """Record (or overwrite) a named data point."""
        if not name:
            raise UsageError("Data point name must not be empty")
        if name in FIXED_KEYS:
            raise UsageError(f"Data point name {name!r} is reserved")
        self._points[name] = timestamp

    def to_events(self) -> dict[str, float]:
        """Flat event name -> millisecond map, as sent over the wire."""
        events = {
            "bootstrapTime": self.bootstrap_time,
            "instanceTime": self.instance_time,
            "start": self.start,
            "stop": self.stop,
        }
        events.update(self._points)
        return events
