"""Probe service — environment-based configuration.

Settings are built by ``app.main.create_app`` / ``app.main.run`` rather than
at import time so that a bad environment is reported as a configuration
error instead of an import traceback.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from probekit.config import BaseServiceSettings
from probekit.durations import parse_duration


class ProbeServiceSettings(BaseServiceSettings):
    """Settings specific to the probe service."""

    # Applied to both the health and the readiness gate
    startup_delay: float = Field(default=30.0, ge=0)

    @field_validator("startup_delay", mode="before")
    @classmethod
    def _parse_startup_delay(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_duration(value)
        return value
