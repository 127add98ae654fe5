"""Shared pytest fixtures and configuration."""
import time

import pytest


def wait_until(predicate, timeout=3.0, interval=0.01):
    """Poll ``predicate`` until it returns truthy or ``timeout`` elapses."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return bool(predicate())


@pytest.fixture
def wait_for():
    return wait_until


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """Keep the developer's environment and any .env file out of settings."""
    for name in (
        "PORT",
        "STARTUP_DELAY",
        "SERVICE_NAME",
        "VERSION",
        "SHUTDOWN_WAIT",
        "READ_TIMEOUT",
        "WRITE_TIMEOUT",
        "IDLE_TIMEOUT",
        "MAX_BODY_BYTES",
        "LOG_LEVEL",
        "ENVIRONMENT",
        "DEBUG",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
