"""Tests for environment-driven settings."""

import pytest

from pistats.config import DEFAULT_THERMAL_PATH, Settings, get_settings, load_settings

ENV_VARS = (
    "PISTATS_HOST",
    "PISTATS_PORT",
    "PISTATS_LOG_LEVEL",
    "PISTATS_INTERVAL",
    "PISTATS_CPU_SAMPLE_SECONDS",
    "PISTATS_DISK_PATH",
    "PISTATS_THERMAL_PATH",
    "PISTATS_FAN_GLOB",
    "PISTATS_ALL_PARTITIONS",
    "PISTATS_URL",
    "PISTATS_WATCH_INTERVAL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults():
    """Test settings fall back to the documented defaults."""
    settings = load_settings()

    assert settings.port == 7000
    assert settings.interval == 1.0
    assert settings.cpu_sample_seconds == 1.0
    assert settings.thermal_path == DEFAULT_THERMAL_PATH
    assert settings.all_partitions is True


def test_environment_overrides(monkeypatch):
    """Test environment variables override defaults."""
    monkeypatch.setenv("PISTATS_PORT", "8081")
    monkeypatch.setenv("PISTATS_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("PISTATS_INTERVAL", "2.5")
    monkeypatch.setenv("PISTATS_ALL_PARTITIONS", "no")
    monkeypatch.setenv("PISTATS_DISK_PATH", "/srv")

    settings = load_settings()

    assert settings.port == 8081
    assert settings.log_level == "debug"
    assert settings.interval == 2.5
    assert settings.all_partitions is False
    assert settings.disk_path == "/srv"


def test_cpu_sample_capped_at_interval(monkeypatch):
    """Test the blocking CPU sample never outlasts the interval."""
    monkeypatch.setenv("PISTATS_INTERVAL", "0.5")
    monkeypatch.setenv("PISTATS_CPU_SAMPLE_SECONDS", "3")

    assert load_settings().cpu_sample_seconds == 0.5


def test_interval_floor(monkeypatch):
    """Test tiny intervals are raised to the minimum."""
    monkeypatch.setenv("PISTATS_INTERVAL", "0.001")

    assert load_settings().interval == 0.1


def test_invalid_number_raises(monkeypatch):
    """Test malformed numbers fail fast."""
    monkeypatch.setenv("PISTATS_PORT", "seven-thousand")

    with pytest.raises(ValueError):
        load_settings()


def test_get_settings_is_cached():
    """Test get_settings returns the same instance."""
    assert get_settings() is get_settings()
    assert isinstance(get_settings(), Settings)
