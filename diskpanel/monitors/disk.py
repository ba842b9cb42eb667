"""Disk statistics collection module."""
import logging
from pathlib import PurePath
from typing import Dict, List, Mapping, NamedTuple, Optional

import psutil


logger = logging.getLogger(__name__)

# Device names that do not match the name the kernel reports I/O counters
# under. Keys are the last path segment of the mounted device.
DEVICE_ALIASES: Dict[str, str] = {
    "cryptroot": "dm-0",
}


class CollectionError(Exception):
    """Raised when the OS cannot report disk statistics at all."""


class DeviceCounters(NamedTuple):
    """Cumulative I/O byte counters for one block device."""
    read_bytes: int
    write_bytes: int


class MountUsage(NamedTuple):
    """Usage figures for one mounted physical partition."""
    device: str
    mountpoint: str
    fstype: str
    used_percent: float
    bytes_free: int


class DegradedMount(NamedTuple):
    """A mount whose usage query failed during a poll."""
    device: str
    mountpoint: str
    reason: str


class CollectionResult(NamedTuple):
    """Raw output of a single poll."""
    counters: Dict[str, DeviceCounters]
    mounts: List[MountUsage]
    degraded: List[DegradedMount]


def device_name(device_path: str, aliases: Optional[Mapping[str, str]] = None) -> str:
    """
    Derive the logical device name used to join counters with usage.

    Args:
        device_path: Device path as reported by the partition listing
        aliases: Mapping of leaf names to the name the kernel counts I/O under

    Returns:
        Leaf name of the path, remapped through the alias table
    """
    name = PurePath(device_path).name or device_path
    if aliases is None:
        aliases = DEVICE_ALIASES
    return aliases.get(name, name)


class StatsCollector:
    """Query per-device I/O counters and per-mount usage from the OS."""

    def __init__(self, backend=psutil, aliases: Optional[Mapping[str, str]] = None):
        """
        Initialize the collector.

        Args:
            backend: Object providing disk_io_counters, disk_partitions and
                disk_usage with psutil's signatures
            aliases: Extra device aliases merged over DEVICE_ALIASES
        """
        self.backend = backend
        self.aliases = dict(DEVICE_ALIASES)
        if aliases:
            self.aliases.update(aliases)

    def device_name(self, device_path: str) -> str:
        return device_name(device_path, self.aliases)

    def get_io_counters(self) -> Dict[str, DeviceCounters]:
        """
        Get cumulative read/write byte counters per block device.

        Returns:
            Dictionary mapping device name to its counters

        Raises:
            CollectionError: If the counters cannot be read
        """
        try:
            per_disk = self.backend.disk_io_counters(perdisk=True)
        except (OSError, RuntimeError, NotImplementedError, psutil.Error) as e:
            raise CollectionError(f"disk I/O counters unavailable: {e}") from e

        if not per_disk:
            raise CollectionError("disk I/O counters unavailable on this platform")

        return {
            name: DeviceCounters(counters.read_bytes, counters.write_bytes)
            for name, counters in per_disk.items()
        }

    def get_partitions(self) -> List:
        """
        Get the mounted physical partitions.

        Raises:
            CollectionError: If the partition table cannot be listed
        """
        try:
            return list(self.backend.disk_partitions(all=False))
        except (OSError, RuntimeError, NotImplementedError, psutil.Error) as e:
            raise CollectionError(f"partition listing failed: {e}") from e

    def get_usage(self, partitions: List):
        """
        Get usage figures for every partition, isolating per-mount failures.

        Args:
            partitions: Partitions as returned by get_partitions

        Returns:
            Tuple of (successful usages, degraded mounts)
        """
        mounts = []
        degraded = []
        for partition in partitions:
            try:
                usage = self.backend.disk_usage(partition.mountpoint)
            except (OSError, psutil.Error) as e:
                logger.warning("usage query failed for %s on %s: %s",
                               partition.device, partition.mountpoint, e)
                degraded.append(DegradedMount(partition.device, partition.mountpoint, str(e)))
                continue

            mounts.append(MountUsage(
                device=partition.device,
                mountpoint=partition.mountpoint,
                fstype=getattr(partition, "fstype", ""),
                used_percent=float(usage.percent),
                bytes_free=int(usage.free),
            ))

        return mounts, degraded

    def collect(self) -> CollectionResult:
        """
        Take one raw sample of counters and usage.

        Returns:
            CollectionResult with counters, usable mounts and degraded mounts

        Raises:
            CollectionError: If counters or the partition listing are unavailable
        """
        counters = self.get_io_counters()
        mounts, degraded = self.get_usage(self.get_partitions())
        return CollectionResult(counters, mounts, degraded)
