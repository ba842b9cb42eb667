"""Shared pytest fixtures for diskpanel tests."""

from collections import namedtuple

import pytest

from diskpanel.monitors.disk import CollectionResult, DeviceCounters, MountUsage


sdiskio = namedtuple("sdiskio", ["read_count", "write_count", "read_bytes", "write_bytes"])
sdiskpart = namedtuple("sdiskpart", ["device", "mountpoint", "fstype", "opts"])
sdiskusage = namedtuple("sdiskusage", ["total", "used", "free", "percent"])


def io(read_bytes, write_bytes):
    """psutil-style per-disk counters; op counts deliberately differ from bytes."""
    return sdiskio(read_count=7, write_count=3, read_bytes=read_bytes, write_bytes=write_bytes)


def part(device, mountpoint, fstype="ext4"):
    return sdiskpart(device=device, mountpoint=mountpoint, fstype=fstype, opts="rw")


def usage(percent, free):
    return sdiskusage(total=free * 2, used=free, free=free, percent=percent)


class FakeDiskBackend:
    """Stand-in for the psutil disk API."""

    def __init__(self):
        self.counters = {}
        self.partitions = []
        self.usage = {}
        self.counter_error = None
        self.partition_error = None

    def mount(self, device, mountpoint, percent=50.0, free=1024):
        self.partitions.append(part(device, mountpoint))
        self.usage[mountpoint] = usage(percent, free)

    def set_counters(self, **devices):
        self.counters = {name: io(*values) for name, values in devices.items()}

    def disk_io_counters(self, perdisk=False):
        if self.counter_error:
            raise self.counter_error
        return self.counters

    def disk_partitions(self, all=False):
        if self.partition_error:
            raise self.partition_error
        return list(self.partitions)

    def disk_usage(self, path):
        value = self.usage[path]
        if isinstance(value, Exception):
            raise value
        return value


@pytest.fixture
def backend():
    """Backend with sda mounted on / and sdc on /data."""
    fake = FakeDiskBackend()
    fake.mount("/dev/sda", "/", percent=42.0, free=10 * 1024 ** 3)
    fake.mount("/dev/sdc", "/data", percent=10.0, free=500 * 1024 ** 2)
    fake.set_counters(sda=(1000, 500), sdc=(200, 100))
    return fake


@pytest.fixture
def make_result():
    """Build a CollectionResult from {name: (read, write)} and [(device, mountpoint)]."""
    def _make_result(counters, mounts, percent=50.0, free=1024):
        return CollectionResult(
            counters={name: DeviceCounters(*values) for name, values in counters.items()},
            mounts=[MountUsage(device, mountpoint, "ext4", percent, free) for device, mountpoint in mounts],
            degraded=[],
        )
    return _make_result
