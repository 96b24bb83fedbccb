"""GitHub-flavoured Markdown tables."""

from __future__ import annotations

from typing import Sequence

from pi.table.layout import (
    CaptionLine,
    CellLine,
    ContentLine,
    LineRecord,
    SeparatorKind,
    SeparatorLine,
)
from pi.table.types import Align, CaptionPosition, Section


def _escape(text: str) -> str:
    return text.replace("|", "\\|")


def _rule(align: Align, width: int) -> str:
    width = max(width, 3)
    if align is Align.LEFT:
        return ":" + "-" * (width - 1)
    if align is Align.RIGHT:
        return "-" * (width - 1) + ":"
    if align is Align.CENTER:
        return ":" + "-" * (width - 2) + ":"
    return "-" * width


class MarkdownRenderer:
    """Pipe table; the header rule carries the column alignments.

    Markdown has no merged cells: a merged cell is written once, so merged
    rows carry fewer pipes.  Other separators and borders are dropped.
    """

    def __init__(self) -> None:
        self._header: tuple[CellLine, ...] = ()
        self._in_caption = False

    def start(self) -> list[str]:
        self._header = ()
        self._in_caption = False
        return []

    def close(self) -> list[str]:
        return []

    def render(self, records: Sequence[LineRecord]) -> list[str]:
        lines: list[str] = []
        for record in records:
            if isinstance(record, CaptionLine):
                # A caption is a paragraph set off from the table by a blank line.
                if record.position is CaptionPosition.BOTTOM and not self._in_caption:
                    lines.append("")
                lines.append(record.content)
                self._in_caption = True
                continue
            if self._in_caption:
                lines.append("")
                self._in_caption = False
            if isinstance(record, ContentLine):
                if record.section is Section.HEADER:
                    self._header = record.cells
                lines.append("|" + "|".join(_escape(c.text) for c in record.cells) + "|")
            elif record.kind is SeparatorKind.HEADER:
                lines.append(self._alignment_row(record))
        return lines

    def _alignment_row(self, record: SeparatorLine) -> str:
        rules: list[str] = []
        for column, segment in enumerate(record.segments):
            align = Align.SKIP
            for cell in self._header:
                if cell.column <= column < cell.column + cell.column_span:
                    align = cell.align
                    break
            rules.append(_rule(align, segment.width))
        return "|" + "|".join(rules) + "|"
