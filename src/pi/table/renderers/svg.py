"""Standalone SVG drawing of the grid.

Every physical line becomes one text row; cell text is placed exactly as the
layout padded and aligned it, so a monospace font reproduces the text grid.
Separator records become rules, content records contribute cell fills and
vertical bars.  The drawing is buffered: nothing is emitted until ``close``
because the ``<svg>`` element needs the final size.
"""

from __future__ import annotations

import html
from dataclasses import dataclass
from typing import Sequence

from pi.table.layout import CaptionLine, ContentLine, LineRecord, SeparatorLine
from pi.table.text import strip_ansi
from pi.table.types import CaptionPosition, Section, VerticalPosition


@dataclass
class SVGStyle:
    """Geometry and colours of the drawing, in SVG user units.

    ``char_width`` and ``line_height`` are fractions of ``font_size``: one
    display column is ``font_size * char_width`` wide.
    """

    font_family: str = "monospace"
    font_size: float = 12.0
    char_width: float = 0.6
    line_height: float = 1.4
    padding: float = 4.0
    stroke: str = "black"
    stroke_width: float = 1.0
    header_fill: str = "#F0F0F0"
    row_fill: str = "white"
    row_alt_fill: str | None = "#F9F9F9"
    footer_fill: str = "#F0F0F0"
    text_color: str = "black"

    @property
    def column(self) -> float:
        return self.font_size * self.char_width

    @property
    def line(self) -> float:
        return self.font_size * self.line_height

    def fill_for(self, section: Section, row: int) -> str:
        if section is Section.HEADER:
            return self.header_fill
        if section is Section.FOOTER:
            return self.footer_fill
        if self.row_alt_fill and row % 2:
            return self.row_alt_fill
        return self.row_fill


def _n(value: float) -> str:
    return f"{value:.2f}"


class SVGRenderer:
    def __init__(self, style: SVGStyle | None = None) -> None:
        self.style = style or SVGStyle()
        self._reset()

    def _reset(self) -> None:
        self._fills: list[str] = []
        self._texts: list[str] = []
        self._rules: list[str] = []
        self._captions: dict[CaptionPosition, list[CaptionLine]] = {p: [] for p in CaptionPosition}
        self._y = 0.0
        self._columns = 0

    def start(self) -> list[str]:
        self._reset()
        return []

    def render(self, records: Sequence[LineRecord]) -> list[str]:
        pending: list[ContentLine] = []
        for record in records:
            if isinstance(record, ContentLine):
                if pending and (pending[0].section, pending[0].row) != (record.section, record.row):
                    self._row(pending)
                    pending = []
                pending.append(record)
                continue
            if pending:
                self._row(pending)
                pending = []
            if isinstance(record, SeparatorLine):
                self._separator(record)
            else:
                self._captions[record.position].append(record)
                self._columns = max(self._columns, record.width)
        if pending:
            self._row(pending)
        return []

    def close(self) -> list[str]:
        style = self.style
        margin = style.stroke_width
        top = self._captions[CaptionPosition.TOP]
        bottom = self._captions[CaptionPosition.BOTTOM]
        width = self._columns * style.column + 2 * margin
        grid_top = margin + len(top) * style.line
        height = grid_top + self._y + len(bottom) * style.line + margin

        lines = [
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{_n(width)}" height="{_n(height)}" '
            f'font-family="{html.escape(style.font_family)}" font-size="{_n(style.font_size)}">',
            "  <style>text { white-space: pre; dominant-baseline: central; }</style>",
        ]
        lines.extend(self._caption_texts(top, margin))
        lines.append(f'  <g transform="translate({_n(margin)}, {_n(grid_top)})">')
        lines.extend(self._fills)
        if self._texts:
            lines.append(f'    <g fill="{html.escape(style.text_color)}">')
            lines.extend(self._texts)
            lines.append("    </g>")
        if self._rules:
            lines.append(
                f'    <g stroke="{html.escape(style.stroke)}" '
                f'stroke-width="{_n(style.stroke_width)}" stroke-linecap="square">'
            )
            lines.extend(self._rules)
            lines.append("    </g>")
        lines.append("  </g>")
        lines.extend(self._caption_texts(bottom, grid_top + self._y))
        lines.append("</svg>")
        self._reset()
        return lines

    # -- drawing -----------------------------------------------------------

    def _rule(self, x1: float, y1: float, x2: float, y2: float) -> None:
        col = self.style.column
        self._rules.append(
            f'      <line x1="{_n(x1 * col)}" y1="{_n(y1)}" x2="{_n(x2 * col)}" y2="{_n(y2)}"/>'
        )

    def _text(self, x: float, y: float, text: str, indent: str = "      ") -> str:
        escaped = html.escape(strip_ansi(text), quote=False)
        return f'{indent}<text x="{_n(x)}" y="{_n(y)}">{escaped}</text>'

    def _separator(self, record: SeparatorLine) -> None:
        # Boundary centres in display columns; a junction takes one column.
        centres: list[float] = []
        pos = 0
        for b, junction in enumerate(record.junctions):
            if junction is not None:
                centres.append(pos + 0.5)
                pos += 1
            else:
                centres.append(pos)
            if b < len(record.segments):
                pos += record.segments[b].width
        self._columns = max(self._columns, pos)
        for c, segment in enumerate(record.segments):
            if segment.drawn:
                self._rule(centres[c], self._y, centres[c + 1], self._y)

    def _row(self, lines: list[ContentLine]) -> None:
        style = self.style
        first = lines[0]
        y = self._y
        height = len(lines) * style.line + 2 * style.padding
        fill = html.escape(style.fill_for(first.section, first.row))

        bars: list[float] = []
        pos = 0
        if first.left_edge:
            bars.append(pos + 0.5)
            pos += 1
        for i, cell in enumerate(first.cells):
            if i > 0 and first.dividers[i - 1]:
                bars.append(pos + 0.5)
                pos += 1
            x = pos * style.column
            self._fills.append(
                f'    <rect x="{_n(x)}" y="{_n(y)}" width="{_n(cell.width * style.column)}" '
                f'height="{_n(height)}" fill="{fill}"/>'
            )
            if cell.vertical in (VerticalPosition.NONE, VerticalPosition.TOP):
                for k, line in enumerate(lines):
                    part = line.cells[i]
                    if strip_ansi(part.content).strip():
                        ty = y + style.padding + (k + 0.5) * style.line
                        self._texts.append(self._text(x, ty, part.text))
            pos += cell.width
        if first.right_edge:
            bars.append(pos + 0.5)
            pos += 1
        self._columns = max(self._columns, pos)

        for bar in bars:
            self._rule(bar, y, bar, y + height)
        self._y += height

    def _caption_texts(self, captions: list[CaptionLine], top: float) -> list[str]:
        style = self.style
        return [
            self._text(style.stroke_width, top + (k + 0.5) * style.line, caption.text, "  ")
            for k, caption in enumerate(captions)
        ]
