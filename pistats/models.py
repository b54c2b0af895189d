"""Immutable snapshot records published by the collector."""
from __future__ import annotations

import datetime as dt
import types
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple


# Value substituted for each field when its probe is unavailable for a cycle.
# Temperature and fan speed cannot tell "unavailable" apart from a real zero.
FIELD_DEFAULTS: Dict[str, Any] = {
    "cpu_usage_percent": 0.0,
    "ram_usage_percent": 0.0,
    "disk_usage_percent": 0.0,
    "cpu_temperature_celsius": 0.0,
    "net_rx_bytes": 0,
    "net_tx_bytes": 0,
    "net_rx_rate": 0.0,
    "net_tx_rate": 0.0,
    "uptime": "N/A",
    "fan_rpm": 0,
    "network_ips": {},
    "disk_mounts": (),
}


@dataclass(frozen=True)
class DiskMount:
    mountpoint: str
    total_gb: float
    used_percent: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mountpoint": self.mountpoint,
            "total_gb": self.total_gb,
            "used_percent": self.used_percent,
        }


def format_timestamp(value: Optional[dt.datetime]) -> str:
    """Render an RFC 3339 timestamp with second precision, "" when unset."""
    if value is None:
        return ""
    if value.tzinfo is None:
        value = value.replace(tzinfo=dt.timezone.utc)
    if value.utcoffset() == dt.timedelta(0):
        return value.strftime("%Y-%m-%dT%H:%M:%SZ")
    return value.isoformat(timespec="seconds")


@dataclass(frozen=True)
class Snapshot:
    """One fully populated record of every collected metric."""

    cpu_usage_percent: float
    ram_usage_percent: float
    disk_usage_percent: float
    cpu_temperature_celsius: float
    net_rx_bytes: int
    net_tx_bytes: int
    net_rx_rate: float
    net_tx_rate: float
    uptime: str
    fan_rpm: int
    last_updated: Optional[dt.datetime]
    network_ips: Mapping[str, str] = field(default_factory=dict)
    disk_mounts: Tuple[DiskMount, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "network_ips", types.MappingProxyType(dict(self.network_ips)))
        object.__setattr__(self, "disk_mounts", tuple(self.disk_mounts))

    @classmethod
    def empty(cls) -> "Snapshot":
        """Zero-valued snapshot served until the first cycle completes."""
        values = dict(FIELD_DEFAULTS)
        values["network_ips"] = {}
        return cls(last_updated=None, **values)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the ``GET /stats`` payload."""
        return {
            "cpu_usage_percent": self.cpu_usage_percent,
            "ram_usage_percent": self.ram_usage_percent,
            "disk_usage_percent": self.disk_usage_percent,
            "cpu_temp_celsius": self.cpu_temperature_celsius,
            "net_rx_bytes": self.net_rx_bytes,
            "net_tx_bytes": self.net_tx_bytes,
            "net_rx_speed": self.net_rx_rate,
            "net_tx_speed": self.net_tx_rate,
            "uptime": self.uptime,
            "last_updated": format_timestamp(self.last_updated),
            "fan_rpm": self.fan_rpm,
            "network_ips": dict(self.network_ips),
            "disk_mounts": [mount.to_dict() for mount in self.disk_mounts],
        }
