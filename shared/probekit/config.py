"""Base configuration using Pydantic Settings.

Values are loaded from environment variables and ``.env`` files. Durations
accept Go-style strings (``30s``, ``1m30s``, ``250ms``) or bare seconds.
Invalid values raise ``pydantic.ValidationError`` at construction time.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from probekit.durations import parse_duration
from probekit.logging import normalize_level


class BaseServiceSettings(BaseSettings):
    """Settings common to any service built on probekit."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    # ── General ───────────────────────────────
    environment: str = "production"
    debug: bool = False
    log_level: str = "INFO"
    service_name: str = Field(default="simple-api", min_length=1)
    version: str = Field(default="0.1.0", min_length=1)

    # ── HTTP server ───────────────────────────
    port: int = Field(default=8080, ge=1, le=65535)
    shutdown_wait: float = Field(default=10.0, ge=0)
    read_timeout: float = Field(default=15.0, ge=0)
    write_timeout: float = Field(default=15.0, ge=0)
    idle_timeout: float = Field(default=60.0, ge=0)
    max_body_bytes: int = Field(default=1 << 20, ge=0)

    @model_validator(mode="before")
    @classmethod
    def _drop_blank_values(cls, data: Any) -> Any:
        # whitespace-only values fall back to the field default
        if isinstance(data, dict):
            return {
                key: value
                for key, value in data.items()
                if not (isinstance(value, str) and not value.strip())
            }
        return data

    @field_validator(
        "shutdown_wait", "read_timeout", "write_timeout", "idle_timeout", mode="before"
    )
    @classmethod
    def _parse_duration(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_duration(value)
        return value

    @field_validator("service_name", "version", mode="before")
    @classmethod
    def _strip(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_level(cls, value: Any) -> Any:
        if isinstance(value, str):
            return normalize_level(value)
        return value

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def json_logs(self) -> bool:
        return self.is_production
