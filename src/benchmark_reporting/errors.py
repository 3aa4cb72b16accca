"""Error types for benchmark reporting."""

from __future__ import annotations


class BenchmarkReportingError(Exception):
    """Base error for all benchmark reporting operations."""


class UsageError(BenchmarkReportingError):
    """A lifecycle method was called out of order (e.g. double start).

    These are programming errors; the session reports them and terminates
    the process with `exit_code`.
    """

    exit_code = 1


class DeliveryError(BenchmarkReportingError):
    """Benchmark data could not be delivered to the remote endpoint."""

    def __init__(self, message: str, *, status_code: int | None = None, body: str | None = None):
        """Create an error capturing the HTTP status code and response body (if any)."""
        self.status_code = status_code
        self.body = body
        super().__init__(message)
