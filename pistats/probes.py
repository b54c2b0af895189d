"""Probes for host system metrics.

Every probe is a plain query against the current OS state. A probe either
returns its value or raises :class:`ProbeUnavailable`; choosing a fallback is
left to the caller.
"""
from __future__ import annotations

import datetime as dt
import glob
import logging
import socket
import time
from pathlib import Path
from typing import Dict, List, Tuple

import psutil

from .config import DEFAULT_FAN_GLOB, DEFAULT_THERMAL_PATH, Settings
from .models import DiskMount

logger = logging.getLogger(__name__)

BYTES_PER_GB = 1024 ** 3


class ProbeUnavailable(Exception):
    """A single metric domain could not be read this cycle."""

    def __init__(self, domain: str, cause: object) -> None:
        super().__init__(f"{domain} probe unavailable: {cause}")
        self.domain = domain
        self.cause = cause


def human_readable_duration(seconds: float) -> str:
    seconds = int(max(0, seconds))
    delta = dt.timedelta(seconds=seconds)
    days = delta.days
    hours, remainder = divmod(delta.seconds, 3600)
    minutes, _ = divmod(remainder, 60)
    parts = []
    if days:
        parts.append(f"{days}d")
    if hours:
        parts.append(f"{hours}h")
    if minutes or not parts:
        parts.append(f"{minutes}m")
    return " ".join(parts)


def cpu_percent(sample_seconds: float = 1.0) -> float:
    """Utilization across all cores, observed over a blocking sample window."""
    try:
        return float(psutil.cpu_percent(interval=sample_seconds))
    except (OSError, psutil.Error) as exc:
        raise ProbeUnavailable("cpu", exc) from exc


def memory_percent() -> float:
    try:
        return float(psutil.virtual_memory().percent)
    except (OSError, psutil.Error) as exc:
        raise ProbeUnavailable("memory", exc) from exc


def disk_percent(path: str = "/") -> float:
    try:
        return float(psutil.disk_usage(path).percent)
    except (OSError, psutil.Error) as exc:
        raise ProbeUnavailable("disk", exc) from exc


def _read_sensor(domain: str, path: str) -> str:
    try:
        return Path(path).read_text(encoding="utf-8", errors="ignore").strip()
    except OSError as exc:
        raise ProbeUnavailable(domain, exc) from exc


def cpu_temperature(path: str = DEFAULT_THERMAL_PATH) -> float:
    """CPU temperature in Celsius from a millidegree thermal pseudo-file."""
    raw = _read_sensor("temperature", path)
    try:
        return float(raw) / 1000.0
    except ValueError as exc:
        raise ProbeUnavailable("temperature", exc) from exc


def fan_rpm(pattern: str = DEFAULT_FAN_GLOB) -> int:
    matches = sorted(glob.glob(pattern))
    if not matches:
        raise ProbeUnavailable("fan", f"no file matches {pattern}")
    raw = _read_sensor("fan", matches[0])
    try:
        return int(raw)
    except ValueError as exc:
        raise ProbeUnavailable("fan", exc) from exc


def net_counters() -> Tuple[int, int]:
    """Total ``(bytes_received, bytes_sent)`` across all interfaces."""
    try:
        counters = psutil.net_io_counters()
    except (OSError, psutil.Error) as exc:
        raise ProbeUnavailable("network", exc) from exc
    if counters is None:
        raise ProbeUnavailable("network", "no network interfaces reported")
    return int(counters.bytes_recv), int(counters.bytes_sent)


def uptime_seconds() -> float:
    try:
        boot_timestamp = psutil.boot_time()
    except (OSError, psutil.Error) as exc:
        raise ProbeUnavailable("uptime", exc) from exc
    return max(0.0, time.time() - boot_timestamp)


def interface_addresses() -> Dict[str, str]:
    """Map each interface to the first IPv4 address it carries."""
    try:
        addrs = psutil.net_if_addrs()
    except (OSError, psutil.Error) as exc:
        raise ProbeUnavailable("interfaces", exc) from exc

    addresses: Dict[str, str] = {}
    for name, entries in addrs.items():
        inet_info = next((addr for addr in entries if addr.family == socket.AF_INET), None)
        if inet_info is not None:
            addresses[name] = inet_info.address.split("/")[0]
    return addresses


def disk_mounts(all_partitions: bool = True) -> List[DiskMount]:
    """Usage of every mount that answers; mounts that fail are skipped."""
    try:
        partitions = psutil.disk_partitions(all=all_partitions)
    except (OSError, psutil.Error) as exc:
        raise ProbeUnavailable("partitions", exc) from exc

    mounts: List[DiskMount] = []
    for partition in partitions:
        try:
            usage = psutil.disk_usage(partition.mountpoint)
        except (OSError, psutil.Error) as exc:
            logger.debug("Skipping mount %s: %s", partition.mountpoint, exc)
            continue
        mounts.append(
            DiskMount(
                mountpoint=partition.mountpoint,
                total_gb=usage.total / BYTES_PER_GB,
                used_percent=float(usage.percent),
            )
        )
    return mounts


class HostProbes:
    """The probe set bound to the configured sensor paths and sample window."""

    def __init__(
        self,
        cpu_sample_seconds: float = 1.0,
        disk_path: str = "/",
        thermal_path: str = DEFAULT_THERMAL_PATH,
        fan_glob: str = DEFAULT_FAN_GLOB,
        all_partitions: bool = True,
    ) -> None:
        self.cpu_sample_seconds = cpu_sample_seconds
        self.disk_path = disk_path
        self.thermal_path = thermal_path
        self.fan_glob = fan_glob
        self.all_partitions = all_partitions

    @classmethod
    def from_settings(cls, settings: Settings) -> "HostProbes":
        return cls(
            cpu_sample_seconds=settings.cpu_sample_seconds,
            disk_path=settings.disk_path,
            thermal_path=settings.thermal_path,
            fan_glob=settings.fan_glob,
            all_partitions=settings.all_partitions,
        )

    def cpu_percent(self) -> float:
        return cpu_percent(self.cpu_sample_seconds)

    def memory_percent(self) -> float:
        return memory_percent()

    def disk_percent(self) -> float:
        return disk_percent(self.disk_path)

    def cpu_temperature(self) -> float:
        return cpu_temperature(self.thermal_path)

    def net_counters(self) -> Tuple[int, int]:
        return net_counters()

    def uptime(self) -> str:
        return human_readable_duration(uptime_seconds())

    def fan_rpm(self) -> int:
        return fan_rpm(self.fan_glob)

    def interface_addresses(self) -> Dict[str, str]:
        return interface_addresses()

    def disk_mounts(self) -> List[DiskMount]:
        return disk_mounts(self.all_partitions)
