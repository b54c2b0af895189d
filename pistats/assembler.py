"""Builds one snapshot per collection cycle."""
from __future__ import annotations

import copy
import datetime as dt
import logging
import time
from typing import Any, Callable, Optional

from .models import FIELD_DEFAULTS, Snapshot
from .probes import ProbeUnavailable
from .rates import RateTracker
from .store import SnapshotStore

logger = logging.getLogger(__name__)


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class SnapshotAssembler:
    """Runs every probe, derives network rates and publishes the result.

    A probe failure only costs its own field(s) for the current cycle: the
    field falls back to its entry in ``FIELD_DEFAULTS`` and the remaining
    probes still run.
    """

    def __init__(
        self,
        probes: Any,
        tracker: RateTracker,
        store: SnapshotStore,
        clock: Callable[[], float] = time.monotonic,
        wall_clock: Callable[[], dt.datetime] = _utcnow,
    ) -> None:
        self._probes = probes
        self._tracker = tracker
        self._store = store
        self._clock = clock
        self._wall_clock = wall_clock

    def _probe(self, domain: str, call: Callable[[], Any], fallback: Any) -> Any:
        try:
            return call()
        except ProbeUnavailable as exc:
            logger.warning("Error getting %s: %s", domain, exc.cause)
        except Exception:  # pylint: disable=broad-except
            logger.exception("Unexpected failure in %s probe", domain)
        return copy.copy(fallback)

    def _default(self, field: str) -> Any:
        return FIELD_DEFAULTS[field]

    def run_cycle(self) -> Snapshot:
        probes = self._probes
        started_at = self._wall_clock()

        cpu = self._probe("CPU usage", probes.cpu_percent, self._default("cpu_usage_percent"))
        ram = self._probe("memory usage", probes.memory_percent, self._default("ram_usage_percent"))
        disk = self._probe("disk usage", probes.disk_percent, self._default("disk_usage_percent"))
        temperature = self._probe(
            "CPU temperature", probes.cpu_temperature, self._default("cpu_temperature_celsius")
        )

        counters: Optional[tuple] = self._probe("network IO", probes.net_counters, None)
        if counters is None:
            # The tracker keeps its last good sample across a failed read.
            rx_bytes = self._default("net_rx_bytes")
            tx_bytes = self._default("net_tx_bytes")
            rx_rate = self._default("net_rx_rate")
            tx_rate = self._default("net_tx_rate")
        else:
            rx_bytes, tx_bytes = counters
            rx_rate, tx_rate = self._tracker.compute_rate(rx_bytes, tx_bytes, self._clock())

        uptime = self._probe("uptime", probes.uptime, self._default("uptime"))
        fan = self._probe("fan RPM", probes.fan_rpm, self._default("fan_rpm"))
        network_ips = self._probe(
            "network interfaces", probes.interface_addresses, self._default("network_ips")
        )
        mounts = self._probe("disk partitions", probes.disk_mounts, self._default("disk_mounts"))

        snapshot = Snapshot(
            cpu_usage_percent=cpu,
            ram_usage_percent=ram,
            disk_usage_percent=disk,
            cpu_temperature_celsius=temperature,
            net_rx_bytes=rx_bytes,
            net_tx_bytes=tx_bytes,
            net_rx_rate=rx_rate,
            net_tx_rate=tx_rate,
            uptime=uptime,
            fan_rpm=fan,
            last_updated=started_at,
            network_ips=network_ips,
            disk_mounts=mounts,
        )
        self._store.write(snapshot)
        logger.info("System stats updated successfully.")
        return snapshot
