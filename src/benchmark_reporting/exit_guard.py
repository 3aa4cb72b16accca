"""Process-exit safety net for benchmark delivery.

The guard inspects the session when the process is shutting down:

- flush never started: add a "post-build" point, stop (which flushes), wait,
  then exit 1
- flush in flight: wait for it to settle, then exit 1
- flush cancelled before it finished: exit 1 without a second attempt
- flush completed: nothing to do

Exit code 1 in every case but the last makes "delivery raced the exit" visible
to operators even when the delivery itself succeeded.

Two entry points exist. `settle()` is the async-aware shutdown phase and is
meant to be awaited on the host's own event loop before it closes (see
`hooks.run_with_exit_guard`); when it is used, the `atexit` path finds the
session flushed and does nothing. `on_exit()` is the `atexit` fallback and
is best effort only: the interpreter is already finalizing, the host loop is
usually closed, and worker threads are no longer accepted, so a flush it
starts sends inline on the exiting thread. A flush already in flight on a
closed loop cannot be awaited at all. The forced exit code is the
signal of that degraded delivery.
"""

from __future__ import annotations

import asyncio
import atexit
import os
import sys
from collections.abc import Callable

from .reporter import Reporter
from .session import BenchmarkSession, SessionState

EXIT_FAILURE = 1


def _hard_exit(code: int) -> None:
    """Terminate from inside an `atexit` hook, where `sys.exit` has no effect."""
    for stream in (sys.stdout, sys.stderr):
        try:
            stream.flush()
        except (AttributeError, OSError, ValueError):
            pass
    os._exit(code)


class ExitGuard:
    """Reconciles session state at process termination."""

    def __init__(
        self,
        session: BenchmarkSession,
        *,
        reporter: Reporter,
        label: str = "benchmark",
        exit_func: Callable[[int], None] = _hard_exit,
    ) -> None:
        self._session = session
        self._reporter = reporter
        self._label = label
        self._exit_func = exit_func
        self._installed = False

    def install(self) -> None:
        """Register the `atexit` hook (once)."""
        if self._installed:
            return
        atexit.register(self.on_exit)
        self._installed = True

    def uninstall(self) -> None:
        """Remove the `atexit` hook if it was registered."""
        if not self._installed:
            return
        atexit.unregister(self.on_exit)
        self._installed = False

    async def settle(self, *, blocking: bool = False) -> int | None:
        """Bring delivery to a settled state; return 1 if the guard intervened.

        `blocking=True` sends a flush the guard starts itself on the calling
        thread instead of a worker thread.
        """
        session = self._session
        state = session.state
        if state is SessionState.FLUSHED:
            return None

        if state is SessionState.IDLE:
            self._reporter.error(f"{self._label}: Exiting before the benchmark was started; nothing to report")
            return EXIT_FAILURE

        if session.coordinator.cancelled:
            self._report_cancelled()
            return EXIT_FAILURE

        pending = session.coordinator.pending
        if pending is None:
            self._reporter.error(
                f"{self._label}: Process is exiting; not yet flushed, will flush now but it's probably too late..."
            )
            session.mark_data_point("post-build")
            pending = session.mark_stop(blocking=blocking)

        # Failures were already reported by the coordinator when the future settled.
        await asyncio.wait([pending])
        return EXIT_FAILURE

    def on_exit(self) -> None:
        """Synchronous `atexit` entry point (best effort)."""
        session = self._session
        if session.state is SessionState.FLUSHED:
            return

        pending = session.coordinator.pending
        if pending is None:
            # Worker threads are refused during interpreter shutdown; send inline.
            code = asyncio.run(self.settle(blocking=True))
        elif pending.cancelled():
            self._report_cancelled()
            code = EXIT_FAILURE
        elif pending.done():
            # Finished on a loop that stopped before the completion callback ran.
            code = EXIT_FAILURE
        else:
            loop = pending.get_loop()
            if loop.is_closed() or loop.is_running():
                self._reporter.error(
                    f"{self._label}: Process is exiting while benchmark delivery is in flight "
                    "and its event loop is gone; the delivery cannot be awaited"
                )
                code = EXIT_FAILURE
            else:
                code = loop.run_until_complete(self.settle())

        if code:
            self._exit_func(code)

    def _report_cancelled(self) -> None:
        self._reporter.error(f"{self._label}: Benchmark delivery was cancelled before the process exit")
