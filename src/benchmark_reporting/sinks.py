"""Reporting sinks (delivery targets for a flushed session).

- `RemoteReportingSink` POSTs the payload to an HTTP endpoint.
- `LocalReportingSink` dumps the payload to the reporter (CLI output).

The HTTP call uses `requests` executed in a thread so the event loop stays
unblocked while the POST is in flight.
"""

from __future__ import annotations

import asyncio
from typing import Any, Protocol

import requests  # type: ignore
from pydantic import BaseModel, ConfigDict, Field

from config import ReportingConfig

from .errors import DeliveryError
from .reporter import Reporter


class BenchmarkPayload(BaseModel):
    """Wire payload for one delivery attempt."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    # ISO-8601 wall-clock time of session construction.
    time: str
    session_id: str = Field(alias="sessionId")
    # JSON-encoded event name -> millisecond map.
    events: str

    def to_wire(self) -> dict[str, Any]:
        """Return the JSON body using wire field names."""
        return self.model_dump(by_alias=True)


class ReportingSink(Protocol):
    """Delivers a finished session payload.

    `remote` tells the flush coordinator whether to announce network delivery.
    `send` is the blocking form of `deliver`, used when no worker thread can
    be started (interpreter shutdown).
    """

    remote: bool

    async def deliver(self, payload: BenchmarkPayload) -> str | None:
        """Deliver the payload, returning the response text (if any)."""

    def send(self, payload: BenchmarkPayload) -> str | None:
        """Deliver the payload on the calling thread."""


class LocalReportingSink:
    """Writes the payload to the reporter's info channel; never fails."""

    remote = False

    def __init__(self, reporter: Reporter) -> None:
        self._reporter = reporter

    async def deliver(self, payload: BenchmarkPayload) -> str | None:
        """Log the payload."""
        return self.send(payload)

    def send(self, payload: BenchmarkPayload) -> str | None:
        """Log the payload."""
        self._reporter.info("Benchmarking data:")
        self._reporter.info(payload)
        return None


class RemoteReportingSink:
    """POSTs the payload as JSON to a configured endpoint (no retries)."""

    remote = True

    def __init__(self, endpoint: str, *, timeout_s: float = 30.0) -> None:
        self.endpoint = endpoint
        self.timeout_s = timeout_s

    async def deliver(self, payload: BenchmarkPayload) -> str | None:
        """Send the payload from a worker thread and return the response body.

        Raises:
        - `DeliveryError` for any failure, including a refused worker thread
        """
        try:
            return await asyncio.to_thread(self.send, payload)
        except DeliveryError:
            raise
        except Exception as exc:  # noqa: BLE001 - every delivery failure is a DeliveryError
            raise DeliveryError(f"POST {self.endpoint} could not be dispatched: {exc}") from exc

    def send(self, payload: BenchmarkPayload) -> str:
        """Execute the HTTP request synchronously and return the fully-read body.

        Raises:
        - `DeliveryError` for transport failures and non-2xx responses
        """
        try:
            resp = requests.post(
                self.endpoint,
                headers={"content-type": "application/json"},
                json=payload.to_wire(),
                timeout=self.timeout_s,
            )
            text = resp.text
        except requests.RequestException as exc:
            raise DeliveryError(f"POST {self.endpoint} failed: {exc}") from exc

        if 200 <= resp.status_code < 300:
            return text
        raise DeliveryError(
            f"POST {self.endpoint} returned HTTP {resp.status_code}",
            status_code=resp.status_code,
            body=text,
        )


def select_sink(config: ReportingConfig, reporter: Reporter) -> ReportingSink:
    """Pick the sink for a session from configuration."""
    if config.endpoint is not None:
        return RemoteReportingSink(config.endpoint, timeout_s=config.timeout_s)
    return LocalReportingSink(reporter)
