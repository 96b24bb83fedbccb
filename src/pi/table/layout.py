"""Turn widths, wrapped rows and spans into line records.

Line records are the only thing renderers see.  A :class:`SeparatorLine`
describes a horizontal rule as per-column segments plus the junctions
between them; a :class:`ContentLine` holds one physical line of a row, one
:class:`CellLine` per visual cell.  Every decision about widths, wrapping
and merging has been taken by the time a record exists.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Sequence, Union

from pi.table.cache import LRUCache
from pi.table.cells import Cell, Row, align_text, fill_line, padding_width
from pi.table.config import Caption, TableConfig
from pi.table.merge import Span, SpanIndex
from pi.table.resolver import ColumnWidthPlan
from pi.table.text import visible_width
from pi.table.types import Align, CaptionPosition, Location, Section, VerticalPosition
from pi.table.wrap import BREAK_MARK, ELLIPSIS, WrapPolicy, wrap_text

# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


class SeparatorKind(Enum):
    TOP = "top"
    HEADER = "header"
    ROW = "row"
    FOOTER = "footer"
    BOTTOM = "bottom"


@dataclass(frozen=True)
class Junction:
    """Arms meeting at a column boundary on a separator line.

    ``up``/``down`` tell whether a vertical bar continues above/below,
    ``left``/``right`` whether the neighbouring segment is drawn.
    """

    up: bool
    down: bool
    left: bool
    right: bool


@dataclass(frozen=True)
class Segment:
    width: int
    drawn: bool = True


@dataclass(frozen=True)
class SeparatorLine:
    kind: SeparatorKind
    segments: tuple[Segment, ...]
    # One entry per column boundary, outer edges included; None where no
    # border or divider exists.
    junctions: tuple[Junction | None, ...]


@dataclass(frozen=True)
class CellLine:
    text: str
    content: str
    column: int
    column_span: int
    row_span: int
    vertical: VerticalPosition
    align: Align
    width: int


@dataclass(frozen=True)
class ContentLine:
    section: Section
    location: Location
    row: int
    line: int
    cells: tuple[CellLine, ...]
    left_edge: bool
    right_edge: bool
    dividers: tuple[bool, ...]


@dataclass(frozen=True)
class CaptionLine:
    position: CaptionPosition
    text: str
    content: str
    align: Align
    width: int


LineRecord = Union[SeparatorLine, ContentLine, CaptionLine]


@dataclass(frozen=True)
class BorderConfig:
    left: bool = True
    right: bool = True
    top: bool = True
    bottom: bool = True
    header_line: bool = True
    footer_line: bool = True
    between_rows: bool = False
    between_columns: bool = True
    divider_width: int = 1

    @classmethod
    def from_config(cls, config: TableConfig) -> BorderConfig:
        return cls(
            left=config.borders.left,
            right=config.borders.right,
            top=config.borders.top,
            bottom=config.borders.bottom,
            header_line=config.separators.header,
            footer_line=config.separators.footer,
            between_rows=config.separators.between_rows,
            between_columns=config.separators.between_columns,
        )

    @property
    def divider(self) -> int:
        return self.divider_width if self.between_columns else 0


# ---------------------------------------------------------------------------
# Assembler
# ---------------------------------------------------------------------------


class GridAssembler:
    """Lay out rows against a frozen column plan.

    The plan must hold exactly the columns being drawn.  Works
    on one row at a time so the buffered table and the stream share it.
    """

    def __init__(
        self,
        plan: ColumnWidthPlan,
        borders: BorderConfig | None = None,
        cache: LRUCache[str, int] | None = None,
    ) -> None:
        self.plan = plan
        self.borders = borders or BorderConfig()
        self.cache = cache

    @property
    def columns(self) -> int:
        return len(self.plan)

    def span_width(self, column: int, count: int = 1) -> int:
        """Display width of a visual cell covering *count* columns, padding included."""
        cells = sum(self.plan.cell_width(c) for c in range(column, column + count))
        return cells + self.borders.divider * (count - 1)

    # -- wrapping ----------------------------------------------------------

    def fit(
        self,
        row: Row,
        index: SpanIndex,
        position: int,
        policy: WrapPolicy = WrapPolicy.NORMAL,
        *,
        ellipsis: str = ELLIPSIS,
        break_mark: str = BREAK_MARK,
    ) -> Row:
        """Wrap the cells of *row* (at *position* in *index*) to their widths.

        Span anchors wrap to the whole span; other members get no lines.
        """
        cells: list[Cell] = []
        for c, cell in enumerate(row.cells):
            span = index.span_at(position, c)
            if span.row != position or span.column != c:
                cells.append(replace(cell, lines=()))
                continue
            width = self.span_width(c, span.column_count) - padding_width(cell.padding, self.cache)
            lines = wrap_text(
                cell.content,
                width,
                policy,
                ellipsis=ellipsis,
                break_mark=break_mark,
                cache=self.cache,
            )
            cells.append(replace(cell, lines=tuple(lines)))
        return replace(row, cells=cells)

    # -- separators --------------------------------------------------------

    def bars(self, index: SpanIndex, position: int) -> tuple[bool, ...]:
        """Which column boundaries of a row carry a vertical bar."""
        n = self.columns
        bars = []
        for b in range(n + 1):
            if b == 0:
                bars.append(self.borders.left)
            elif b == n:
                bars.append(self.borders.right)
            else:
                bars.append(self.borders.between_columns and not index.joins_columns(position, b))
        return tuple(bars)

    def separator(
        self,
        kind: SeparatorKind,
        above: Sequence[bool] | None,
        below: Sequence[bool] | None,
        blanks: Sequence[bool] = (),
    ) -> SeparatorLine:
        """Build a rule between two rows described by their bar profiles.

        *blanks* marks columns whose segment is left empty because a
        vertical span continues through the rule.
        """
        n = self.columns
        drawn = [not (c < len(blanks) and blanks[c]) for c in range(n)]
        segments = tuple(Segment(self.plan.cell_width(c), drawn[c]) for c in range(n))

        junctions: list[Junction | None] = []
        for b in range(n + 1):
            exists = (
                self.borders.left
                if b == 0
                else self.borders.right
                if b == n
                else self.borders.between_columns
            )
            if not exists:
                junctions.append(None)
                continue
            junctions.append(
                Junction(
                    up=bool(above and above[b]),
                    down=bool(below and below[b]),
                    left=b > 0 and drawn[b - 1],
                    right=b < n and drawn[b],
                )
            )
        return SeparatorLine(kind, segments, tuple(junctions))

    def top(self, below: Sequence[bool]) -> SeparatorLine | None:
        if not self.borders.top:
            return None
        return self.separator(SeparatorKind.TOP, None, below)

    def bottom(self, above: Sequence[bool]) -> SeparatorLine | None:
        if not self.borders.bottom:
            return None
        return self.separator(SeparatorKind.BOTTOM, above, None)

    def between(self, previous: Row, current: Row) -> SeparatorKind | None:
        """Kind of rule owed between two consecutive rows, if any."""
        if previous.section is current.section:
            if current.section is Section.ROW and self.borders.between_rows:
                return SeparatorKind.ROW
            return None
        if previous.section is Section.HEADER and self.borders.header_line:
            return SeparatorKind.HEADER
        if current.section is Section.FOOTER and self.borders.footer_line:
            return SeparatorKind.FOOTER
        return None

    # -- content -----------------------------------------------------------

    def content(self, row: Row, index: SpanIndex, position: int) -> list[ContentLine]:
        """Physical lines of a wrapped *row* sitting at *position* in *index*."""
        units: list[tuple[Span, Cell]] = []
        c = 0
        while c < self.columns:
            span = index.span_at(position, c)
            units.append((span, row.cells[c]))
            c = span.column + span.column_count

        top = row.has_top_padding
        bottom = row.has_bottom_padding
        height = row.height

        lines: list[ContentLine] = []
        for line in range(height):
            cell_lines: list[CellLine] = []
            for span, cell in units:
                width = self.span_width(span.column, span.column_count)
                vertical = _vertical_position(span, position)
                if top and line == 0:
                    text = fill_line(cell.padding.top or " ", width, self.cache)
                    content = ""
                elif bottom and line == height - 1:
                    text = fill_line(cell.padding.bottom or " ", width, self.cache)
                    content = ""
                else:
                    i = line - top
                    content = cell.lines[i] if i < len(cell.lines) else ""
                    text = self._pad(content, cell, width)
                cell_lines.append(
                    CellLine(
                        text=text,
                        content=content,
                        column=span.column,
                        column_span=span.column_count,
                        row_span=span.row_count,
                        vertical=vertical,
                        align=cell.align,
                        width=visible_width(text, self.cache),
                    )
                )
            lines.append(
                ContentLine(
                    section=row.section,
                    location=row.location,
                    row=row.index,
                    line=line,
                    cells=tuple(cell_lines),
                    left_edge=self.borders.left,
                    right_edge=self.borders.right,
                    dividers=tuple(self.borders.between_columns for _ in cell_lines[1:]),
                )
            )
        return lines

    def _pad(self, content: str, cell: Cell, width: int) -> str:
        inner = max(width - padding_width(cell.padding, self.cache), 0)
        align = Align.LEFT if cell.align is Align.SKIP else cell.align
        return cell.padding.left + align_text(content, inner, align, cache=self.cache) + cell.padding.right


def _vertical_position(span: Span, position: int) -> VerticalPosition:
    if span.row_count == 1:
        return VerticalPosition.NONE
    if position == span.row:
        return VerticalPosition.TOP
    if position == span.last_row:
        return VerticalPosition.BOTTOM
    return VerticalPosition.MIDDLE


def assemble(
    plan: ColumnWidthPlan,
    rows: Sequence[Row],
    spans: Sequence[Span],
    borders: BorderConfig | None = None,
    cache: LRUCache[str, int] | None = None,
) -> list[LineRecord]:
    """Lay out *rows* (already wrapped) into line records, top to bottom.

    *spans* index rows by their position in *rows*, across sections.
    """
    if not rows:
        return []
    assembler = GridAssembler(plan, borders, cache)
    index = SpanIndex(spans, len(rows), assembler.columns)

    records: list[LineRecord] = []
    top = assembler.top(assembler.bars(index, 0))
    if top is not None:
        records.append(top)
    for position, row in enumerate(rows):
        if position > 0:
            kind = assembler.between(rows[position - 1], row)
            if kind is not None:
                blanks = [index.joins_rows(position, c) for c in range(assembler.columns)]
                records.append(
                    assembler.separator(
                        kind,
                        assembler.bars(index, position - 1),
                        assembler.bars(index, position),
                        blanks,
                    )
                )
        records.extend(assembler.content(row, index, position))
    bottom = assembler.bottom(assembler.bars(index, len(rows) - 1))
    if bottom is not None:
        records.append(bottom)
    return records


def caption_lines(
    caption: Caption,
    table_width: int,
    cache: LRUCache[str, int] | None = None,
) -> list[CaptionLine]:
    """Wrap and align *caption* across a table *table_width* columns wide."""
    if not caption.text:
        return []
    wrap_width = caption.width or table_width
    block = max(table_width, wrap_width)
    align = Align.LEFT if caption.align is Align.SKIP else caption.align
    return [
        CaptionLine(
            position=caption.position,
            text=align_text(line, block, align, cache=cache),
            content=line,
            align=align,
            width=block,
        )
        for line in wrap_text(caption.text, wrap_width, cache=cache)
    ]


def with_caption(
    records: list[LineRecord],
    caption: Caption,
    table_width: int,
    cache: LRUCache[str, int] | None = None,
) -> list[LineRecord]:
    """Place the caption lines above or below *records*."""
    lines: list[LineRecord] = list(caption_lines(caption, table_width, cache))
    if not lines or not records:
        return records
    if caption.position is CaptionPosition.TOP:
        return lines + records
    return records + lines
