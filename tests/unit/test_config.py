"""Unit tests for service settings."""
import pytest
from pydantic import ValidationError

from app.core.config import ProbeServiceSettings


@pytest.mark.unit
class TestDefaults:
    """Test defaults when the environment is empty."""

    def test_defaults(self):
        cfg = ProbeServiceSettings()
        assert cfg.port == 8080
        assert cfg.startup_delay == 30.0
        assert cfg.service_name == "simple-api"
        assert cfg.version == "0.1.0"
        assert cfg.shutdown_wait == 10.0
        assert cfg.read_timeout == 15.0
        assert cfg.write_timeout == 15.0
        assert cfg.idle_timeout == 60.0
        assert cfg.max_body_bytes == 1 << 20
        assert cfg.log_level == "INFO"

    def test_json_logs_in_production(self):
        assert ProbeServiceSettings().json_logs is True
        assert ProbeServiceSettings(environment="development").json_logs is False


@pytest.mark.unit
class TestEnvironment:
    """Test values read from environment variables."""

    def test_reads_env(self, monkeypatch):
        monkeypatch.setenv("PORT", "9090")
        monkeypatch.setenv("STARTUP_DELAY", "1m30s")
        monkeypatch.setenv("SERVICE_NAME", "  probe-demo ")
        monkeypatch.setenv("MAX_BODY_BYTES", "512")
        monkeypatch.setenv("IDLE_TIMEOUT", "250ms")
        cfg = ProbeServiceSettings()
        assert cfg.port == 9090
        assert cfg.startup_delay == 90.0
        assert cfg.service_name == "probe-demo"
        assert cfg.max_body_bytes == 512
        assert cfg.idle_timeout == pytest.approx(0.25)

    def test_bare_number_delay_is_seconds(self, monkeypatch):
        monkeypatch.setenv("STARTUP_DELAY", "2")
        assert ProbeServiceSettings().startup_delay == 2.0

    def test_blank_values_use_defaults(self, monkeypatch):
        monkeypatch.setenv("SERVICE_NAME", "   ")
        monkeypatch.setenv("STARTUP_DELAY", "")
        cfg = ProbeServiceSettings()
        assert cfg.service_name == "simple-api"
        assert cfg.startup_delay == 30.0

    @pytest.mark.parametrize(
        "raw, expected",
        [("debug", "DEBUG"), ("warn", "WARNING"), ("Warning", "WARNING"), ("ERROR", "ERROR"), ("verbose", "INFO")],
    )
    def test_log_level_normalized(self, monkeypatch, raw, expected):
        monkeypatch.setenv("LOG_LEVEL", raw)
        assert ProbeServiceSettings().log_level == expected


@pytest.mark.unit
class TestValidation:
    """Test that invalid values are rejected."""

    @pytest.mark.parametrize(
        "name, value",
        [
            ("PORT", "0"),
            ("PORT", "70000"),
            ("PORT", "http"),
            ("STARTUP_DELAY", "-5s"),
            ("STARTUP_DELAY", "soon"),
            ("SHUTDOWN_WAIT", "-1"),
            ("MAX_BODY_BYTES", "-1"),
        ],
    )
    def test_invalid_values_raise(self, monkeypatch, name, value):
        monkeypatch.setenv(name, value)
        with pytest.raises(ValidationError):
            ProbeServiceSettings()

    def test_zero_body_limit_allowed(self):
        assert ProbeServiceSettings(max_body_bytes=0).max_body_bytes == 0
