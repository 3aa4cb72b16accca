"""Demo entrypoint wiring a benchmark session into a simulated build.

This module intentionally contains a small, end-to-end "smoke test" that:

- Loads configuration from environment (`BENCHMARK_REPORTING_URL`).
- Creates the session and installs the exit guard.
- Calls the lifecycle hooks around a fake build and reports the timeline.

It is **not** a build tool; it is a manual integration harness for the
reporting plumbing.
"""

from __future__ import annotations

import asyncio
import os

from benchmark_reporting import (
    BenchmarkReportingHooks,
    LoggingReporter,
    create_session,
    run_with_exit_guard,
    setup_logging,
)
from config import load_config


async def _fake_build(hooks: BenchmarkReportingHooks, *, build_s: float) -> None:
    """Walk the lifecycle hooks with a short sleep standing in for the build."""
    hooks.on_pre_init()
    hooks.on_pre_bootstrap()
    await asyncio.sleep(build_s / 2)
    hooks.on_pre_build()
    await asyncio.sleep(build_s / 2)
    await hooks.on_post_build()


def main() -> None:
    """CLI entrypoint for running the demo with `python src/main.py`."""
    setup_logging()
    cfg = load_config()
    reporter = LoggingReporter()

    session, guard = create_session(cfg, reporter)
    guard.install()

    hooks = BenchmarkReportingHooks(session, reporter=reporter, config=cfg)
    build_s = float(os.getenv("DEMO_BUILD_SECONDS", "0.2"))
    asyncio.run(run_with_exit_guard(_fake_build(hooks, build_s=build_s), guard))


if __name__ == "__main__":
    main()
