"""Plain-text grid with box-drawing borders."""

from __future__ import annotations

from typing import Sequence

from pi.table.layout import CaptionLine, CellLine, ContentLine, LineRecord, SeparatorLine
from pi.table.symbols import BorderStyle, Symbols, symbols_for
from pi.table.types import Section


class BoxRenderer:
    """Paint records as a text grid using one :class:`BorderStyle`."""

    def __init__(self, style: BorderStyle = BorderStyle.LIGHT) -> None:
        self.style = style
        self.symbols: Symbols = symbols_for(style)

    def start(self) -> list[str]:
        return []

    def close(self) -> list[str]:
        return []

    def render(self, records: Sequence[LineRecord]) -> list[str]:
        lines: list[str] = []
        for record in records:
            if isinstance(record, SeparatorLine):
                lines.append(self.separator(record))
            elif isinstance(record, CaptionLine):
                lines.append(self.caption(record))
            else:
                lines.append(self.content(record))
        return lines

    def separator(self, record: SeparatorLine) -> str:
        parts: list[str] = []
        n = len(record.segments)
        for b, junction in enumerate(record.junctions):
            if junction is not None:
                parts.append(self.border(self.symbols.junction(junction)))
            if b < n:
                segment = record.segments[b]
                fill = self.symbols.horizontal if segment.drawn else " "
                parts.append(self.border(fill * segment.width))
        return "".join(parts)

    def content(self, record: ContentLine) -> str:
        bar = self.border(self.symbols.vertical)
        parts: list[str] = []
        if record.left_edge:
            parts.append(bar)
        for i, cell in enumerate(record.cells):
            if i > 0 and record.dividers[i - 1]:
                parts.append(bar)
            parts.append(self.cell(cell, record.section))
        if record.right_edge:
            parts.append(bar)
        return "".join(parts)

    # Hooks for styled subclasses.

    def border(self, text: str) -> str:
        return text

    def cell(self, cell: CellLine, section: Section) -> str:
        return cell.text

    def caption(self, record: CaptionLine) -> str:
        return record.text.rstrip(" ")
