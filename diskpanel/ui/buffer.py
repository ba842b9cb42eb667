"""Terminal frame buffer shared by dashboard panels."""
from typing import Iterable, List, NamedTuple, Optional

from rich.cells import get_character_cell_size
from rich.segment import Segment
from rich.style import Style
from rich.text import Text


class Rect(NamedTuple):
    """Rectangular region of a frame buffer."""
    x: int
    y: int
    width: int
    height: int

    @property
    def area(self) -> int:
        return max(0, self.width) * max(0, self.height)

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def contains(self, x: int, y: int) -> bool:
        return self.x <= x < self.right and self.y <= y < self.bottom

    def intersection(self, other: "Rect") -> "Rect":
        x = max(self.x, other.x)
        y = max(self.y, other.y)
        right = min(self.right, other.right)
        bottom = min(self.bottom, other.bottom)
        return Rect(x, y, max(0, right - x), max(0, bottom - y))


class Cell:
    """One character position with its style."""

    __slots__ = ("char", "style")

    def __init__(self, char: str = " ", style: Optional[Style] = None):
        self.char = char
        self.style = style or Style.null()

    def __eq__(self, other) -> bool:
        return isinstance(other, Cell) and (self.char, self.style) == (other.char, other.style)

    def __repr__(self) -> str:
        return f"Cell({self.char!r}, {self.style!r})"


class FrameBuffer:
    """Grid of styled cells covering the whole terminal frame."""

    def __init__(self, width: int, height: int):
        """
        Create an empty buffer.

        Args:
            width: Number of columns
            height: Number of rows
        """
        self.area = Rect(0, 0, width, height)
        self.cells: List[List[Cell]] = [[Cell() for _ in range(width)] for _ in range(height)]

    @property
    def width(self) -> int:
        return self.area.width

    @property
    def height(self) -> int:
        return self.area.height

    def get(self, x: int, y: int) -> Cell:
        return self.cells[y][x]

    def set(self, x: int, y: int, char: str, style: Optional[Style] = None, clip: Optional[Rect] = None):
        """Write one cell, ignoring positions outside the clip region and the buffer."""
        if clip is not None and not clip.contains(x, y):
            return
        if not self.area.contains(x, y):
            return
        self.cells[y][x] = Cell(char, style)

    def set_string(self, x: int, y: int, text: str, style: Optional[Style] = None,
                   clip: Optional[Rect] = None) -> int:
        """
        Write a string starting at (x, y).

        Wide characters take two cells; the second holds an empty
        continuation cell.

        Returns:
            Column after the last character written
        """
        for char in text:
            width = get_character_cell_size(char)
            if width == 0:
                continue
            self.set(x, y, char, style, clip)
            if width == 2:
                self.set(x + 1, y, "", style, clip)
            x += width
        return x

    def set_lines(self, lines: Iterable[List[Segment]], area: Rect):
        """Copy rendered rich lines into the buffer, clipped to area."""
        clip = area.intersection(self.area)
        for row, line in enumerate(lines):
            y = area.y + row
            if y >= clip.bottom:
                break
            x = area.x
            for segment in line:
                if segment.control:
                    continue
                x = self.set_string(x, y, segment.text, segment.style, clip)

    def clear(self, area: Optional[Rect] = None):
        region = self.area if area is None else area.intersection(self.area)
        for y in range(region.y, region.bottom):
            for x in range(region.x, region.right):
                self.cells[y][x] = Cell()

    def line_text(self, y: int) -> str:
        return "".join(cell.char for cell in self.cells[y])

    def to_text(self) -> Text:
        """Convert the buffer to a rich Text for printing or live display."""
        text = Text(no_wrap=True, overflow="crop")
        for y, row in enumerate(self.cells):
            if y:
                text.append("\n")
            run = ""
            run_style = None
            for cell in row:
                if cell.style != run_style and run:
                    text.append(run, run_style)
                    run = ""
                run_style = cell.style
                run += cell.char
            if run:
                text.append(run, run_style)
        return text
