"""Box grid painted with ANSI colours."""

from __future__ import annotations

from dataclasses import dataclass

from pi.table.ansi import RESET
from pi.table.layout import CellLine
from pi.table.renderers.box import BoxRenderer
from pi.table.symbols import BorderStyle
from pi.table.types import Section


@dataclass
class ColorTheme:
    """SGR sequences per table part; ``None`` leaves a part unstyled."""

    border: str | None = "\x1b[90m"
    header: str | None = "\x1b[1;36m"
    row: str | None = None
    footer: str | None = "\x1b[1m"

    def for_section(self, section: Section) -> str | None:
        if section is Section.HEADER:
            return self.header
        if section is Section.FOOTER:
            return self.footer
        return self.row


class ColorizedRenderer(BoxRenderer):
    def __init__(
        self,
        theme: ColorTheme | None = None,
        style: BorderStyle = BorderStyle.LIGHT,
    ) -> None:
        super().__init__(style)
        self.theme = theme or ColorTheme()

    def border(self, text: str) -> str:
        if not self.theme.border or not text:
            return text
        return f"{self.theme.border}{text}{RESET}"

    def cell(self, cell: CellLine, section: Section) -> str:
        color = self.theme.for_section(section)
        if not color:
            return cell.text
        # Wrapped lines reset at their end, so the section colour is
        # re-applied after every reset inside the cell.
        return f"{color}{cell.text.replace(RESET, RESET + color)}{RESET}"
