"""Reporter capability used for all user-visible output.

The host build tool normally supplies its own reporter; `LoggingReporter`
is the stand-in used when running outside such a host.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

from pydantic import BaseModel

LOGGER_NAME = "benchmark_reporting"


class Reporter(Protocol):
    def info(self, *parts: Any) -> None:
        """Emit an informational message."""

    def error(self, *parts: Any) -> None:
        """Emit an error message."""


def _render(part: Any) -> str:
    if isinstance(part, BaseModel):
        return part.model_dump_json(by_alias=True)
    if isinstance(part, Mapping):
        return json.dumps(dict(part), separators=(",", ":"), default=str)
    return str(part)


class LoggingReporter:
    """Reporter backed by the standard `logging` module."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        """Create a reporter writing to `logger` (the package logger by default)."""
        self._logger = logger or logging.getLogger(LOGGER_NAME)

    def info(self, *parts: Any) -> None:
        """Log the space-joined parts at INFO."""
        self._logger.info(" ".join(_render(p) for p in parts))

    def error(self, *parts: Any) -> None:
        """Log the space-joined parts at ERROR."""
        self._logger.error(" ".join(_render(p) for p in parts))


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Attach a console handler to the package logger (once)."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    if not logger.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
        logger.addHandler(console_handler)

    return logger
