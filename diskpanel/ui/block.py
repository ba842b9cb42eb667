"""Titled border drawn around every panel."""
from rich.console import RenderableType
from rich.panel import Panel
from rich.text import Text

from .colorscheme import Colorscheme


def block(colorscheme: Colorscheme, title: str, body: RenderableType) -> Panel:
    """Wrap a renderable in the dashboard's panel chrome."""
    return Panel(
        body,
        title=Text(title),
        title_align="left",
        border_style=colorscheme.border,
        padding=0,
        expand=True,
    )
