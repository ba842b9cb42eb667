"""Color theme shared by dashboard panels."""
from typing import Dict, Optional

from rich.style import Style


class Colorscheme:
    """Text, header and border styles for a panel."""

    def __init__(self, text: str = "default", border: str = "blue"):
        """
        Build a colorscheme from rich style definitions.

        Args:
            text: Style for table cells (e.g. 'white' or 'green on black')
            border: Style for the panel border and title
        """
        self.text = Style.parse(text)
        self.border = Style.parse(border)
        self.header = self.text + Style(bold=True)

    @classmethod
    def from_config(cls, colors: Optional[Dict]) -> "Colorscheme":
        colors = colors or {}
        return cls(text=colors.get("text", "default"), border=colors.get("border", "blue"))
