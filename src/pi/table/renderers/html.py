"""HTML ``<table>`` output with ``colspan``/``rowspan`` for merged cells."""

from __future__ import annotations

import html
from itertools import groupby
from typing import Sequence

from pi.table.layout import CaptionLine, ContentLine, LineRecord
from pi.table.text import strip_ansi
from pi.table.types import CaptionPosition, Section, VerticalPosition

_GROUP_TAGS = {Section.HEADER: "thead", Section.ROW: "tbody", Section.FOOTER: "tfoot"}


class HTMLRenderer:
    def __init__(self, table_class: str | None = None) -> None:
        self.table_class = table_class
        self._open: Section | None = None

    def start(self) -> list[str]:
        self._open = None
        if self.table_class:
            return [f'<table class="{html.escape(self.table_class)}">']
        return ["<table>"]

    def close(self) -> list[str]:
        lines = self._close_group()
        lines.append("</table>")
        return lines

    def render(self, records: Sequence[LineRecord]) -> list[str]:
        lines = self._caption([r for r in records if isinstance(r, CaptionLine)])
        content = [r for r in records if isinstance(r, ContentLine)]
        for (section, _), group in groupby(content, key=lambda r: (r.section, r.row)):
            if section is not self._open:
                lines.extend(self._close_group())
                lines.append(f"  <{_GROUP_TAGS[section]}>")
                self._open = section
            lines.extend(self._row(section, list(group)))
        return lines

    def _close_group(self) -> list[str]:
        if self._open is None:
            return []
        tag = _GROUP_TAGS[self._open]
        self._open = None
        return [f"  </{tag}>"]

    def _row(self, section: Section, lines: list[ContentLine]) -> list[str]:
        tag = "th" if section is Section.HEADER else "td"
        out = ["    <tr>"]
        for i, cell in enumerate(lines[0].cells):
            if cell.vertical not in (VerticalPosition.NONE, VerticalPosition.TOP):
                continue
            texts = [html.escape(strip_ansi(line.cells[i].content)) for line in lines]
            while texts and not texts[-1]:
                texts.pop()
            while texts and not texts[0]:
                texts.pop(0)
            attrs = ""
            if cell.column_span > 1:
                attrs += f' colspan="{cell.column_span}"'
            if cell.row_span > 1:
                attrs += f' rowspan="{cell.row_span}"'
            out.append(f"      <{tag}{attrs}>{'<br>'.join(texts)}</{tag}>")
        out.append("    </tr>")
        return out

    def _caption(self, captions: list[CaptionLine]) -> list[str]:
        # <caption> must be the first child of <table>; the side is set by CSS.
        if not captions:
            return []
        text = html.escape(" ".join(strip_ansi(c.content) for c in captions))
        attrs = ""
        if captions[0].position is CaptionPosition.BOTTOM:
            attrs = ' style="caption-side: bottom"'
        return [f"  <caption{attrs}>{text}</caption>"]
