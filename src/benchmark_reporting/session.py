"""Benchmark session: the start / mark / stop lifecycle of one measured build."""

from __future__ import annotations

import asyncio
import json
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import NoReturn

from config import ReportingConfig

from .errors import UsageError
from .flush import FlushCoordinator, FlushFuture
from .reporter import Reporter
from .sinks import BenchmarkPayload, ReportingSink, select_sink
from .timeline import EventTimeline


class SessionState(str, Enum):
    IDLE = "idle"
    STARTED = "started"
    FLUSHING = "flushing"
    FLUSHED = "flushed"


class BenchmarkSession:
    """Composes an event timeline with a flush coordinator.

    State only changes through `mark_start`, `mark_stop` and the flush
    settling. Usage violations are reported and terminate the process via
    `SystemExit(1)` chained from a `UsageError`.
    """

    def __init__(
        self,
        *,
        reporter: Reporter,
        sink: ReportingSink,
        timeline: EventTimeline | None = None,
        label: str = "benchmark",
    ) -> None:
        self._reporter = reporter
        self._label = label
        self.local_time = datetime.now(tz=timezone.utc).isoformat()
        self.timeline = timeline if timeline is not None else EventTimeline()
        self.coordinator = FlushCoordinator(sink=sink, reporter=reporter)
        self._state = SessionState.IDLE

    @classmethod
    def from_config(cls, config: ReportingConfig, reporter: Reporter) -> BenchmarkSession:
        """Create a session whose sink is selected from configuration."""
        return cls(reporter=reporter, sink=select_sink(config, reporter), label=config.label)

    @property
    def state(self) -> SessionState:
        """Current lifecycle state; FLUSHED once delivery has finished."""
        if self._state is SessionState.FLUSHING and self.coordinator.completed:
            return SessionState.FLUSHED
        return self._state

    def get_data(self) -> BenchmarkPayload:
        """Serialize the session; the session id is generated per call."""
        return BenchmarkPayload(
            time=self.local_time,
            session_id=str(uuid.uuid4()),
            events=json.dumps(self.timeline.to_events()),
        )

    def mark_start(self) -> None:
        """Record the start of the measured interval (once)."""
        if self._state is not SessionState.IDLE:
            self._fatal(UsageError("Should not call mark_start() more than once"))
        self.timeline.start = self.timeline.now()
        self._state = SessionState.STARTED

    def mark_data_point(self, name: str) -> None:
        """Record a named point between start and flush."""
        state = self.state
        if state is SessionState.IDLE:
            self._fatal(UsageError(f"Should not call mark_data_point({name!r}) before mark_start()"))
        if state is SessionState.FLUSHED:
            self._fatal(UsageError(f"Should not call mark_data_point({name!r}) after the session was flushed"))
        try:
            self.timeline.insert(name, self.timeline.now())
        except UsageError as exc:
            self._fatal(exc)

    def mark_stop(self, *, blocking: bool = False) -> FlushFuture:
        """Write `stop` and start the flush; returns the flush future.

        Must be called while an asyncio event loop is running; the session is
        left untouched when it is not.
        """
        if self._state is SessionState.IDLE:
            self._fatal(UsageError("Should not call mark_stop() before calling mark_start()"))
        if self._state is not SessionState.STARTED:
            self._fatal(UsageError("Should not call mark_stop() more than once"))
        try:
            asyncio.get_running_loop()
        except RuntimeError as exc:
            self._fatal(UsageError(f"mark_stop() must be called from a running event loop ({exc})"))
        self.timeline.stop = self.timeline.now()
        self._state = SessionState.FLUSHING
        return self.flush(blocking=blocking)

    def flush(self, *, blocking: bool = False) -> FlushFuture:
        """Return the session's single flush future (idempotent)."""
        if self._state in (SessionState.IDLE, SessionState.STARTED):
            self._fatal(UsageError("Should not call flush() before mark_stop()"))
        return self.coordinator.flush(self.get_data, blocking=blocking)

    def _fatal(self, exc: UsageError) -> NoReturn:
        self._reporter.error(f"{self._label}:", f"Error: {exc}")
        raise SystemExit(exc.exit_code) from exc
