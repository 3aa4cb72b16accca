"""Configuration loading and validation.

This module is responsible for:

- Loading `.env` into the process environment (without overriding existing vars).
- Converting environment variables into a strongly-typed Pydantic model.
- Selecting the reporting target: a remote endpoint or the CLI log.
"""

import os
from typing import TypeVar

import dotenv
from pydantic import BaseModel, Field, field_validator

_T = TypeVar("_T", int, float)

# Literal value of BENCHMARK_REPORTING_URL meaning "dump to the CLI".
CLI_SENTINEL = "cli"

DEFAULT_LABEL = "gatsby-plugin-benchmark-reporting"


def _get_env_number(name: str, default: _T, cast: type[_T]) -> _T:
    """Read an int/float env var with a default."""
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return cast(raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be a {cast.__name__}. Got: {raw!r}") from exc


class ReportingConfig(BaseModel):
    """Where and how benchmark data gets reported."""

    endpoint: str | None = Field(default=None, description="HTTP endpoint receiving benchmark data")
    timeout_s: float = Field(default=30.0, description="Timeout for the report POST (seconds)")
    label: str = Field(default=DEFAULT_LABEL, description="Prefix used in reporter messages")

    @property
    def use_remote(self) -> bool:
        """True when benchmark data is posted to a remote endpoint."""
        return self.endpoint is not None

    @property
    def target(self) -> str:
        """Human-readable reporting target."""
        return self.endpoint if self.endpoint is not None else "the CLI"

    @field_validator("endpoint")
    def normalize_endpoint(cls, v: str | None) -> str | None:
        """Map blank values and the CLI sentinel to "no endpoint"."""
        if v is None:
            return None
        v = v.strip()
        if not v or v == CLI_SENTINEL:
            return None
        return v

    @field_validator("timeout_s")
    def validate_timeout(cls, v: float) -> float:
        """Timeout must be positive."""
        if v <= 0:
            raise ValueError(f"BENCHMARK_REPORTING_TIMEOUT must be > 0. Got: {v}")
        return v


def load_config() -> ReportingConfig:
    """Load reporting configuration from environment variables.

    Notes:
    - Calls `dotenv.load_dotenv()` so local `.env` values are visible to the process.
    - An absent, empty or `cli` endpoint is not an error; it selects CLI output.
    """
    dotenv.load_dotenv()

    return ReportingConfig(
        endpoint=os.getenv("BENCHMARK_REPORTING_URL"),
        timeout_s=_get_env_number("BENCHMARK_REPORTING_TIMEOUT", 30.0, float),
    )
