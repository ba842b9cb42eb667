"""Disk usage panel: poll, diff and draw."""
import logging
from fractions import Fraction
from typing import List, Mapping, Optional

from ..config import Config
from ..monitors.disk import CollectionError, DegradedMount, StatsCollector
from ..monitors.partitions import Partition, PartitionStore
from ..ui.buffer import FrameBuffer, Rect
from ..ui.colorscheme import Colorscheme
from ..ui.disk_table import ByteFormat, RenderError, render_table


logger = logging.getLogger(__name__)

PLACEHOLDER = "…"


class DiskWidget:
    """Self-updating table of per-device disk usage and throughput."""

    def __init__(self, colorscheme: Colorscheme, collector: Optional[StatsCollector] = None,
                 update_interval: Fraction = Fraction(1),
                 byte_format: ByteFormat = ByteFormat.HUMAN_SCALED,
                 title: str = "Disk Usage"):
        """
        Initialize the widget.

        Args:
            colorscheme: Styles used when drawing
            collector: Source of raw disk statistics, psutil-backed by default
            update_interval: Seconds between polls
            byte_format: How free space and rates are shown
            title: Panel title
        """
        self.colorscheme = colorscheme
        self.collector = collector or StatsCollector()
        self.update_interval = Fraction(update_interval)
        self.byte_format = byte_format
        self.title = title

        self.store = PartitionStore(self.collector.aliases)
        self.degraded: List[DegradedMount] = []
        self.last_error: Optional[CollectionError] = None

    @classmethod
    def from_config(cls, config: Config, collector: Optional[StatsCollector] = None) -> "DiskWidget":
        """Build a widget from the 'disk' and 'colors' config sections."""
        disk = config.get_disk_config()
        if collector is None:
            collector = StatsCollector(aliases=disk.get("aliases") or {})
        return cls(
            Colorscheme.from_config(config.get_colors()),
            collector=collector,
            update_interval=config.get_update_interval(),
            byte_format=ByteFormat(disk.get("byte_format", ByteFormat.HUMAN_SCALED.value)),
            title=disk.get("title", "Disk Usage"),
        )

    @property
    def partitions(self) -> Mapping[str, Partition]:
        return self.store.snapshot()

    @property
    def skipped(self) -> List[str]:
        return self.store.skipped

    def update(self):
        """Take one poll and replace the partition state.

        A failed poll keeps the previous state on screen.
        """
        try:
            result = self.collector.collect()
        except CollectionError as e:
            logger.error("disk poll failed, keeping last state: %s", e)
            self.last_error = e
            return

        self.last_error = None
        self.degraded = result.degraded
        self.store.update(result)
        logger.debug("disk poll: %d partitions, %d skipped, %d degraded",
                     len(self.store), len(self.store.skipped), len(self.degraded))

    def get_update_interval(self) -> Fraction:
        return self.update_interval

    def draw(self, area: Rect, buffer: FrameBuffer):
        """Render the current snapshot into area of the shared buffer."""
        try:
            render_table(self.partitions, area, buffer, self.colorscheme, self.title,
                         self.byte_format, self.update_interval)
        except RenderError as e:
            logger.debug("disk panel not drawn: %s", e)
            buffer.clear(area)
            if area.width > 0 and area.height > 0:
                buffer.set(area.x, area.y, PLACEHOLDER, self.colorscheme.text, clip=area)
