"""Build lifecycle handlers.

The host build tool calls these at fixed points:

    on_pre_init -> on_pre_bootstrap -> on_pre_build -> on_post_build

The session is passed in explicitly; nothing here lives at module scope.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from config import ReportingConfig

from .exit_guard import ExitGuard
from .reporter import Reporter
from .session import BenchmarkSession

_R = TypeVar("_R")


class BenchmarkReportingHooks:
    """Lifecycle handlers bound to one benchmark session."""

    def __init__(self, session: BenchmarkSession, *, reporter: Reporter, config: ReportingConfig) -> None:
        self.session = session
        self._reporter = reporter
        self._config = config

    def on_pre_init(self) -> None:
        """Announce the target and start the benchmark."""
        self._reporter.info(f"{self._config.label}: Will post benchmark data to", self._config.target)
        self.session.mark_start()
        self.session.mark_data_point("pre-init")

    def on_pre_bootstrap(self) -> None:
        """Mark the start of bootstrap."""
        self.session.mark_data_point("pre-bootstrap")

    def on_pre_build(self) -> None:
        """Mark the start of the build phase."""
        self.session.mark_data_point("pre-build")

    async def on_post_build(self) -> None:
        """Stop the benchmark and wait for delivery.

        The flush outcome (failure or cancellation) is logged by the flush
        coordinator and never raised into the build. Cancelling this hook
        does not cancel the delivery.
        """
        self.session.mark_data_point("post-build")
        await asyncio.wait([self.session.mark_stop()])


def create_session(config: ReportingConfig, reporter: Reporter) -> tuple[BenchmarkSession, ExitGuard]:
    """Build a session and its (not yet installed) exit guard."""
    session = BenchmarkSession.from_config(config, reporter)
    guard = ExitGuard(session, reporter=reporter, label=config.label)
    return session, guard


async def run_with_exit_guard(build: Awaitable[_R], guard: ExitGuard) -> _R:
    """Await the build, then settle delivery on the same event loop.

    Raises `SystemExit(1)` when the guard had to intervene, even if the build
    itself succeeded.
    """
    try:
        result = await build
    finally:
        code = await guard.settle()
        if code:
            raise SystemExit(code)
    return result
