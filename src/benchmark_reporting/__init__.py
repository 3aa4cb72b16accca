"""Benchmark reporting for build processes.

This package records a timeline of named timestamps across a build and
delivers it, at most once, to a reporting sink before the process exits:

- `BenchmarkSession` drives the start / mark / stop lifecycle.
- `FlushCoordinator` owns the single delivery attempt.
- `RemoteReportingSink` / `LocalReportingSink` deliver the payload.
- `ExitGuard` forces delivery (and exit code 1) if shutdown came too early.
"""

from .errors import BenchmarkReportingError, DeliveryError, UsageError
from .exit_guard import ExitGuard
from .flush import FlushCoordinator
from .hooks import BenchmarkReportingHooks, create_session, run_with_exit_guard
from .reporter import LoggingReporter, Reporter, setup_logging
from .session import BenchmarkSession, SessionState
from .sinks import BenchmarkPayload, LocalReportingSink, RemoteReportingSink, ReportingSink, select_sink
from .timeline import EventTimeline

__all__ = [
    "BenchmarkPayload",
    "BenchmarkReportingError",
    "BenchmarkReportingHooks",
    "BenchmarkSession",
    "DeliveryError",
    "EventTimeline",
    "ExitGuard",
    "FlushCoordinator",
    "LocalReportingSink",
    "LoggingReporter",
    "RemoteReportingSink",
    "Reporter",
    "ReportingSink",
    "SessionState",
    "UsageError",
    "create_session",
    "run_with_exit_guard",
    "select_sink",
    "setup_logging",
]
