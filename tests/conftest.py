"""Shared fixtures for the pistats tests."""

import pytest

from pistats.models import DiskMount
from pistats.probes import ProbeUnavailable


class FakeProbes:
    """Probe set returning canned values; domains listed in ``failing`` raise."""

    def __init__(self, failing=(), counters=(1000, 2000)):
        self.failing = set(failing)
        self.counters = counters
        self.calls = []

    def _value(self, domain, value):
        self.calls.append(domain)
        if domain in self.failing:
            raise ProbeUnavailable(domain, "simulated failure")
        return value

    def cpu_percent(self):
        return self._value("cpu", 12.5)

    def memory_percent(self):
        return self._value("memory", 40.0)

    def disk_percent(self):
        return self._value("disk", 55.5)

    def cpu_temperature(self):
        return self._value("temperature", 48.3)

    def net_counters(self):
        return self._value("network", self.counters)

    def uptime(self):
        return self._value("uptime", "1d 2h 3m")

    def fan_rpm(self):
        return self._value("fan", 2400)

    def interface_addresses(self):
        return self._value("interfaces", {"eth0": "192.168.1.10", "lo": "127.0.0.1"})

    def disk_mounts(self):
        return self._value(
            "partitions",
            [
                DiskMount(mountpoint="/", total_gb=29.5, used_percent=55.5),
                DiskMount(mountpoint="/boot", total_gb=0.25, used_percent=20.0),
            ],
        )


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start=100.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def fake_probes():
    return FakeProbes()


@pytest.fixture
def fake_clock():
    return FakeClock()
