"""Runtime configuration helpers."""
from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

DEFAULT_THERMAL_PATH = "/sys/class/thermal/thermal_zone0/temp"
DEFAULT_FAN_GLOB = "/sys/class/hwmon/hwmon*/fan1_input"
MIN_INTERVAL_SECONDS = 0.1

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 7000
    log_level: str = "info"
    interval: float = 1.0
    cpu_sample_seconds: float = 1.0
    disk_path: str = "/"
    thermal_path: str = DEFAULT_THERMAL_PATH
    fan_glob: str = DEFAULT_FAN_GLOB
    all_partitions: bool = True
    watch_url: str = "http://127.0.0.1:7000/stats"
    watch_interval: float = 5.0


def _default_disk_path() -> str:
    if os.name == "nt":
        return os.getenv("SystemDrive", "C:") + "\\"
    return "/"


def _get_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in _TRUTHY


def load_settings() -> Settings:
    """Read settings from environment variables with sensible defaults."""
    interval = max(MIN_INTERVAL_SECONDS, float(os.getenv("PISTATS_INTERVAL", "1.0")))
    cpu_sample = max(MIN_INTERVAL_SECONDS, float(os.getenv("PISTATS_CPU_SAMPLE_SECONDS", "1.0")))

    return Settings(
        host=os.getenv("PISTATS_HOST", "0.0.0.0"),
        port=int(os.getenv("PISTATS_PORT", "7000")),
        log_level=os.getenv("PISTATS_LOG_LEVEL", "info").lower(),
        interval=interval,
        # The CPU sample blocks the cycle, so it may not outlast the cadence.
        cpu_sample_seconds=min(cpu_sample, interval),
        disk_path=os.getenv("PISTATS_DISK_PATH") or _default_disk_path(),
        thermal_path=os.getenv("PISTATS_THERMAL_PATH", DEFAULT_THERMAL_PATH),
        fan_glob=os.getenv("PISTATS_FAN_GLOB", DEFAULT_FAN_GLOB),
        all_partitions=_get_bool("PISTATS_ALL_PARTITIONS", True),
        watch_url=os.getenv("PISTATS_URL", "http://127.0.0.1:7000/stats"),
        watch_interval=float(os.getenv("PISTATS_WATCH_INTERVAL", "5.0")),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, loaded once."""
    return load_settings()
