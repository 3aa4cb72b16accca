from __future__ import annotations

from typing import Any

import pytest


class RecordingReporter:
    """Reporter that keeps every message for assertions."""

    def __init__(self) -> None:
        self.infos: list[tuple[Any, ...]] = []
        self.errors: list[tuple[Any, ...]] = []

    def info(self, *parts: Any) -> None:
        self.infos.append(parts)

    def error(self, *parts: Any) -> None:
        self.errors.append(parts)


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture(autouse=True)
def _no_threads_in_unit_tests(request: pytest.FixtureRequest, monkeypatch: pytest.MonkeyPatch):
    """Run `asyncio.to_thread` inline for unit tests.

    The remote sink uses `asyncio.to_thread` for the blocking POST. In unit
    tests, this can create threadpool workers that keep the Python process
    alive longer than expected under some runtimes.

    Tests marked `real_threads` keep the real worker-thread dispatch.
    """

    async def _to_thread(func, /, *args, **kwargs):  # noqa: ANN001, D401
        return func(*args, **kwargs)

    if request.node.get_closest_marker("real_threads") is None:
        monkeypatch.setattr("benchmark_reporting.sinks.asyncio.to_thread", _to_thread)
    yield


@pytest.fixture(autouse=True)
def _no_reporting_env(monkeypatch: pytest.MonkeyPatch):
    """Keep a developer's reporting settings out of the tests."""
    monkeypatch.delenv("BENCHMARK_REPORTING_URL", raising=False)
    monkeypatch.delenv("BENCHMARK_REPORTING_TIMEOUT", raising=False)
    monkeypatch.setattr("config.dotenv.load_dotenv", lambda *a, **k: False)
    yield
