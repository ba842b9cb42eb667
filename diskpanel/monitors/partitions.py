"""Per-device partition state and poll-to-poll deltas."""
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from .disk import CollectionResult, DeviceCounters, device_name


logger = logging.getLogger(__name__)


class MissingCountersError(LookupError):
    """A mounted device has no matching I/O counters."""

    def __init__(self, name: str):
        super().__init__(f"no I/O counters for device {name!r}")
        self.name = name


@dataclass(frozen=True)
class Partition:
    """Joined I/O and usage snapshot of one device at the latest poll."""
    name: str
    mountpoint: str
    bytes_read: int
    bytes_written: int
    bytes_read_recently: int
    bytes_written_recently: int
    used_percent: float
    bytes_free: int

    def to_dict(self) -> Dict:
        return {
            "name": self.name,
            "mountpoint": self.mountpoint,
            "bytes_read": self.bytes_read,
            "bytes_written": self.bytes_written,
            "bytes_read_recently": self.bytes_read_recently,
            "bytes_written_recently": self.bytes_written_recently,
            "used_percent": self.used_percent,
            "bytes_free": self.bytes_free,
        }


def delta(current: int, previous: int) -> int:
    """Counter difference, clamped at zero for resets and wraparound."""
    return max(0, current - previous)


def lookup_counters(counters: Mapping[str, DeviceCounters], name: str) -> DeviceCounters:
    try:
        return counters[name]
    except KeyError:
        raise MissingCountersError(name) from None


def build_partitions(prior: Mapping[str, Partition], result: CollectionResult,
                     aliases: Optional[Mapping[str, str]] = None) -> Tuple[Dict[str, Partition], List[str]]:
    """
    Join one poll's counters and usage into a fresh partition map.

    Args:
        prior: Partitions from the previous poll, used only as the delta baseline
        result: Raw sample from the collector
        aliases: Device alias table passed to device_name

    Returns:
        Tuple of (new partitions keyed by name, names skipped this poll)
    """
    partitions: Dict[str, Partition] = {}
    skipped: List[str] = []

    for mount in result.mounts:
        name = device_name(mount.device, aliases)
        if name in partitions:
            # another mount of a device already joined this poll
            logger.debug("skipping duplicate mount %s of %s", mount.mountpoint, name)
            continue

        try:
            counters = lookup_counters(result.counters, name)
        except MissingCountersError as e:
            logger.warning("dropping %s from this poll: %s", mount.mountpoint, e)
            skipped.append(name)
            continue

        previous = prior.get(name)
        if previous is None:
            read_recently = written_recently = 0
        else:
            read_recently = delta(counters.read_bytes, previous.bytes_read)
            written_recently = delta(counters.write_bytes, previous.bytes_written)

        partitions[name] = Partition(
            name=name,
            mountpoint=mount.mountpoint,
            bytes_read=counters.read_bytes,
            bytes_written=counters.write_bytes,
            bytes_read_recently=read_recently,
            bytes_written_recently=written_recently,
            used_percent=mount.used_percent,
            bytes_free=mount.bytes_free,
        )

    return partitions, skipped


class PartitionStore:
    """Owns the partition map of the latest successful poll."""

    def __init__(self, aliases: Optional[Mapping[str, str]] = None):
        self.aliases = aliases
        self._partitions: Dict[str, Partition] = {}
        self.skipped: List[str] = []

    def update(self, result: CollectionResult) -> Mapping[str, Partition]:
        """
        Replace the stored partitions with those built from a new sample.

        Args:
            result: Raw sample from the collector

        Returns:
            Read-only view of the new partitions
        """
        partitions, skipped = build_partitions(self._partitions, result, self.aliases)
        self._partitions = partitions
        self.skipped = skipped
        return self.snapshot()

    def snapshot(self) -> Mapping[str, Partition]:
        return MappingProxyType(self._partitions)

    def __len__(self) -> int:
        return len(self._partitions)
