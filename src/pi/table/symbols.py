"""Border glyph sets for grid renderers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pi.table.layout import Junction


class BorderStyle(Enum):
    ASCII = "ascii"
    LIGHT = "light"
    HEAVY = "heavy"
    DOUBLE = "double"
    ROUNDED = "rounded"
    MARKDOWN = "markdown"


@dataclass(frozen=True)
class Symbols:
    horizontal: str
    vertical: str
    top_left: str
    top_mid: str
    top_right: str
    mid_left: str
    center: str
    mid_right: str
    bottom_left: str
    bottom_mid: str
    bottom_right: str

    def junction(self, j: Junction) -> str:
        """Pick the glyph joining the arms of *j*."""
        key = (j.up, j.down, j.left, j.right)
        glyph = {
            (False, True, False, True): self.top_left,
            (False, True, True, True): self.top_mid,
            (False, True, True, False): self.top_right,
            (True, True, False, True): self.mid_left,
            (True, True, True, True): self.center,
            (True, True, True, False): self.mid_right,
            (True, False, False, True): self.bottom_left,
            (True, False, True, True): self.bottom_mid,
            (True, False, True, False): self.bottom_right,
        }.get(key)
        if glyph is not None:
            return glyph
        if j.up or j.down:
            return self.vertical
        if j.left or j.right:
            return self.horizontal
        return " "


_LIGHT = Symbols("─", "│", "┌", "┬", "┐", "├", "┼", "┤", "└", "┴", "┘")

_SYMBOLS: dict[BorderStyle, Symbols] = {
    BorderStyle.ASCII: Symbols("-", "|", "+", "+", "+", "+", "+", "+", "+", "+", "+"),
    BorderStyle.LIGHT: _LIGHT,
    BorderStyle.HEAVY: Symbols("━", "┃", "┏", "┳", "┓", "┣", "╋", "┫", "┗", "┻", "┛"),
    BorderStyle.DOUBLE: Symbols("═", "║", "╔", "╦", "╗", "╠", "╬", "╣", "╚", "╩", "╝"),
    BorderStyle.ROUNDED: Symbols("─", "│", "╭", "┬", "╮", "├", "┼", "┤", "╰", "┴", "╯"),
    BorderStyle.MARKDOWN: Symbols("-", "|", "|", "|", "|", "|", "|", "|", "|", "|", "|"),
}


def symbols_for(style: BorderStyle) -> Symbols:
    return _SYMBOLS[style]
