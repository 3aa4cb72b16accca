"""At-most-once flushing of a benchmark session.

`FlushCoordinator.flush()` starts exactly one delivery task per session and
hands the same task back on every later call. A done-callback marks the
flush completed when delivery finished, successfully or with an error. A
cancelled task never completed: the exit guard treats it as delivery that
raced the exit.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable

from .errors import DeliveryError
from .reporter import Reporter
from .sinks import BenchmarkPayload, ReportingSink

FlushFuture = asyncio.Future[str | None]


class FlushCoordinator:
    """Owns the single delivery attempt for a session."""

    def __init__(self, *, sink: ReportingSink, reporter: Reporter) -> None:
        self._sink = sink
        self._reporter = reporter
        self._pending: FlushFuture | None = None
        self._completed = False
        self._delivery_count = 0

    @property
    def sink(self) -> ReportingSink:
        """The sink selected for this session."""
        return self._sink

    @property
    def pending(self) -> FlushFuture | None:
        """The memoized delivery future, or None if flush was never invoked."""
        return self._pending

    @property
    def completed(self) -> bool:
        """True once delivery has finished, successfully or not (never on cancellation)."""
        return self._completed

    @property
    def cancelled(self) -> bool:
        """True if the delivery task was cancelled before it finished."""
        return self._pending is not None and self._pending.cancelled()

    @property
    def delivery_count(self) -> int:
        """Number of delivery attempts started (0 or 1)."""
        return self._delivery_count

    def flush(self, snapshot: Callable[[], BenchmarkPayload], *, blocking: bool = False) -> FlushFuture:
        """Start delivery once; return the same future on every call.

        Must be called while an asyncio event loop is running. With
        `blocking=True` the sink sends on the loop's own thread, which is the
        only option once the interpreter refuses new worker threads.
        """
        if self._pending is not None:
            return self._pending

        loop = asyncio.get_running_loop()
        payload = snapshot()
        self._delivery_count += 1
        task = loop.create_task(self._deliver(payload, blocking=blocking), name="benchmark-flush")
        task.add_done_callback(self._on_settled)
        self._pending = task
        return task

    async def _deliver(self, payload: BenchmarkPayload, *, blocking: bool) -> str | None:
        """Deliver through the sink, announcing remote delivery around the send."""
        if self._sink.remote:
            self._reporter.info("Flushing benchmark data to remote server...")
        try:
            if blocking:
                text = self._sink.send(payload)
            else:
                text = await self._sink.deliver(payload)
        except DeliveryError:
            raise
        except Exception as exc:  # noqa: BLE001 - delivery failures must not escape as anything else
            raise DeliveryError(f"Benchmark delivery raised {type(exc).__name__}: {exc}") from exc
        if self._sink.remote:
            self._reporter.info("Server response:", text)
        return text

    def _on_settled(self, fut: FlushFuture) -> None:
        """Mark completion and surface delivery failures in the log."""
        if fut.cancelled():
            self._reporter.error("Benchmark delivery was cancelled before it completed")
            return
        self._completed = True
        exc = fut.exception()
        if exc is not None:
            self._reporter.error("Benchmark delivery failed:", exc)
