"""Disk usage table rendering."""
import io
from enum import Enum
from fractions import Fraction
from typing import Callable, List, Mapping, NamedTuple

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..monitors.partitions import Partition
from .block import block
from .buffer import FrameBuffer, Rect
from .colorscheme import Colorscheme


class RenderError(Exception):
    """Raised when the target area cannot hold any table content."""


class ByteFormat(Enum):
    """How byte quantities are written in table cells."""
    RAW_BYTES = "raw_bytes"
    HUMAN_SCALED = "human_scaled"


def format_bytes(bytes_value: float) -> str:
    """Convert bytes to human readable format."""
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if bytes_value < 1024.0:
            return f"{bytes_value:.2f} {unit}"
        bytes_value /= 1024.0
    return f"{bytes_value:.2f} PB"


def format_quantity(bytes_value: float, byte_format: ByteFormat) -> str:
    if byte_format is ByteFormat.RAW_BYTES:
        return str(int(bytes_value))
    return format_bytes(bytes_value)


class Column(NamedTuple):
    header: str
    width: int
    justify: str
    cell: Callable[[Partition, ByteFormat, Fraction], str]


def _rate(value: int, interval: Fraction) -> float:
    return float(Fraction(value) / interval) if interval else float(value)


# Ordered from most to least important; columns are dropped from the end.
COLUMNS: List[Column] = [
    Column("Disk", 20, "left", lambda p, fmt, interval: p.name),
    Column("Mount", 20, "left", lambda p, fmt, interval: str(p.mountpoint)),
    Column("Used", 10, "right", lambda p, fmt, interval: f"{p.used_percent:3.0f}%"),
    Column("Free", 10, "right", lambda p, fmt, interval: format_quantity(p.bytes_free, fmt)),
    Column("R/s", 10, "right",
           lambda p, fmt, interval: format_quantity(_rate(p.bytes_read_recently, interval), fmt)),
    Column("W/s", 10, "right",
           lambda p, fmt, interval: format_quantity(_rate(p.bytes_written_recently, interval), fmt)),
]

COLUMN_SPACING = 1

# top border, header row, bottom border
MIN_HEIGHT = 3

_console = Console(file=io.StringIO(), width=80, color_system="truecolor", force_terminal=True)


def fitting_columns(width: int) -> List[Column]:
    """
    Select the leading columns that fit inside a panel of the given width.

    Raises:
        RenderError: If not even the first column fits
    """
    inner = width - 2
    used = 0
    columns = []
    for column in COLUMNS:
        needed = column.width + (COLUMN_SPACING if columns else 0)
        if used + needed > inner:
            break
        used += needed
        columns.append(column)

    if not columns:
        raise RenderError(f"area width {width} cannot hold the {COLUMNS[0].header} column")
    return columns


def sorted_partitions(partitions: Mapping[str, Partition]) -> List[Partition]:
    return sorted(partitions.values(), key=lambda p: p.name)


def build_table(partitions: Mapping[str, Partition], columns: List[Column], colorscheme: Colorscheme,
                byte_format: ByteFormat, interval: Fraction) -> Table:
    """Create the disk table with fixed column widths."""
    table = Table(
        box=None,
        show_header=True,
        header_style=colorscheme.header,
        show_edge=False,
        pad_edge=False,
        padding=(0, COLUMN_SPACING, 0, 0),
        expand=False,
    )
    for column in columns:
        table.add_column(column.header, width=column.width, justify=column.justify,
                         no_wrap=True, overflow="ellipsis")

    for partition in sorted_partitions(partitions):
        # Text cells, so paths like /media/[backup] are not read as markup
        table.add_row(*(Text(column.cell(partition, byte_format, interval)) for column in columns),
                      style=colorscheme.text)

    return table


def render_table(partitions: Mapping[str, Partition], area: Rect, buffer: FrameBuffer,
                 colorscheme: Colorscheme, title: str = "Disk Usage",
                 byte_format: ByteFormat = ByteFormat.HUMAN_SCALED, interval: Fraction = Fraction(1)):
    """
    Draw the partition table inside a titled border.

    Args:
        partitions: Snapshot of the current partitions, keyed by name
        area: Region of the buffer to draw into; nothing outside it is touched
        buffer: Shared frame buffer
        colorscheme: Styles for text, header and border
        title: Panel title
        byte_format: Raw byte counts or human scaled units
        interval: Poll interval the recent byte counts were measured over

    Raises:
        RenderError: If the area is too small to hold the border and header
    """
    if area.height < MIN_HEIGHT:
        raise RenderError(f"area height {area.height} is below {MIN_HEIGHT}")
    columns = fitting_columns(area.width)

    table = build_table(partitions, columns, colorscheme, byte_format, interval)
    options = _console.options.update(width=area.width, height=area.height)
    lines = _console.render_lines(block(colorscheme, title, table), options)
    buffer.set_lines(lines, area)
