"""Buffered table: collect every row, then lay out and render in one pass."""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from pi.table.cache import LRUCache
from pi.table.cells import (
    Cell,
    CellInput,
    Row,
    location_of,
    padding_width,
    prepare_cells,
    resolve_padding,
)
from pi.table.config import TableConfig
from pi.table.layout import BorderConfig, GridAssembler, LineRecord, assemble, with_caption
from pi.table.merge import Span, SpanIndex, plan_merges
from pi.table.renderers import BoxRenderer, Renderer
from pi.table.resolver import ColumnSpec, WidthConstraints, empty_columns, resolve_widths
from pi.table.types import Section

logger = logging.getLogger(__name__)


def width_constraints(
    config: TableConfig,
    cache: LRUCache[str, int] | None = None,
    *,
    auto_hide: bool | None = None,
) -> WidthConstraints:
    borders = BorderConfig.from_config(config)
    return WidthConstraints(
        max_total=config.max_width,
        min_width=config.min_column_width,
        separator=borders.divider,
        border_left=1 if borders.left else 0,
        border_right=1 if borders.right else 0,
        auto_hide=config.auto_hide if auto_hide is None else auto_hide,
        cache=cache,
    )


def column_specs(
    config: TableConfig,
    paddings: Sequence[int],
    widths: dict[int, int] | None = None,
) -> list[ColumnSpec]:
    """Column specs from the configured widths and measured paddings.

    *widths* replaces ``config.column_widths`` when given.
    """
    fixed = config.column_widths if widths is None else widths
    return [
        ColumnSpec(
            width=fixed.get(col),
            max_width=config.column_max_widths.get(col),
            padding=pad,
        )
        for col, pad in enumerate(paddings)
    ]


def section_paddings(
    config: TableConfig,
    num_columns: int,
    cache: LRUCache[str, int] | None = None,
) -> list[int]:
    """Widest configured left+right padding per column over all sections."""
    return [
        max(padding_width(resolve_padding(config.section(s), col), cache) for s in Section)
        for col in range(num_columns)
    ]


class Table:
    """A table filled row by row and rendered as a whole.

    Example::

        table = Table()
        table.header(["Name", "Age"])
        table.append(["Alice", 25])
        print(table.render(), end="")
    """

    def __init__(
        self,
        config: TableConfig | None = None,
        renderer: Renderer | None = None,
        cache: LRUCache[str, int] | None = None,
    ) -> None:
        self.config = config or TableConfig()
        self.renderer: Renderer = renderer or BoxRenderer()
        self.cache = cache
        self._header: list[CellInput] | None = None
        self._rows: list[list[CellInput]] = []
        self._footer: list[CellInput] | None = None

    def header(self, cells: Sequence[CellInput]) -> None:
        self._header = list(cells)

    def append(self, row: Sequence[CellInput]) -> None:
        self._rows.append(list(row))

    def append_bulk(self, rows: Iterable[Sequence[CellInput]]) -> None:
        for row in rows:
            self.append(row)

    def footer(self, cells: Sequence[CellInput]) -> None:
        self._footer = list(cells)

    def reset(self) -> None:
        """Drop every row, keeping the configuration and renderer."""
        self._header = None
        self._rows = []
        self._footer = None

    @property
    def num_columns(self) -> int:
        return max((len(values) for _, values in self._sections()), default=0)

    def _sections(self) -> Iterable[tuple[Section, list[CellInput]]]:
        if self._header is not None:
            yield Section.HEADER, self._header
        for row in self._rows:
            yield Section.ROW, row
        if self._footer is not None:
            yield Section.FOOTER, self._footer

    # -- pipeline ----------------------------------------------------------

    def layout(self) -> list[LineRecord]:
        """Resolve widths, plan merges and assemble the line records.

        Raises :class:`~pi.table.errors.ConfigError` when the configuration
        does not fit the table.
        """
        num_columns = self.num_columns
        if num_columns == 0:
            return []
        config = self.config
        config.validate(num_columns)
        logger.debug("Laying out %d rows of %d columns", len(self._rows), num_columns)

        rows = self._prepare(num_columns)

        paddings = [
            max(padding_width(row.cells[col].padding, self.cache) for row in rows)
            for col in range(num_columns)
        ]
        specs = column_specs(config, paddings)
        visible = list(range(num_columns))
        if config.auto_hide:
            hidden = empty_columns(specs, [[cell.content for cell in row.cells] for row in rows])
            if hidden:
                logger.debug("Hiding empty columns %s", sorted(hidden))
                visible = [col for col in visible if col not in hidden]
                for row in rows:
                    row.cells = [row.cells[col] for col in visible]
                specs = [specs[col] for col in visible]

        spans = self._plan(rows, visible)
        plan = resolve_widths(
            specs,
            [[cell.content for cell in row.cells] for row in rows],
            width_constraints(config, self.cache, auto_hide=False),
            spans,
        )
        borders = BorderConfig.from_config(config)
        assembler = GridAssembler(plan, borders, self.cache)
        index = SpanIndex(spans, len(rows), len(plan))
        fitted = [
            assembler.fit(
                row,
                index,
                position,
                config.section(row.section).wrap,
                ellipsis=config.ellipsis,
                break_mark=config.break_mark,
            )
            for position, row in enumerate(rows)
        ]
        records = assemble(plan, fitted, spans, borders, self.cache)
        table_width = plan.total_width(borders.divider, int(borders.left), int(borders.right))
        return with_caption(records, config.caption, table_width, self.cache)

    def lines(self) -> list[str]:
        renderer = self.renderer
        return [*renderer.start(), *renderer.render(self.layout()), *renderer.close()]

    def render(self) -> str:
        lines = self.lines()
        return "\n".join(lines) + "\n" if lines else ""

    def __str__(self) -> str:
        return self.render()

    def _prepare(self, num_columns: int) -> list[Row]:
        grouped: dict[Section, list[list[Cell]]] = {s: [] for s in Section}
        for section, values in self._sections():
            grouped[section].append(
                prepare_cells(values, section, self.config, num_columns, self.cache)
            )
        rows: list[Row] = []
        for section in Section:
            count = len(grouped[section])
            for i, cells in enumerate(grouped[section]):
                rows.append(Row(section, i, location_of(i, count), cells))
        return rows

    def _plan(self, rows: list[Row], visible: list[int]) -> list[Span]:
        """Plan merges per section over visible columns; rows index the whole table."""
        renumber = {col: i for i, col in enumerate(visible)}
        spans: list[Span] = []
        offset = 0
        for section in Section:
            grid = [row.cells for row in rows if row.section is section]
            if not grid:
                continue
            cfg = self.config.section(section)
            allowed = [renumber[c] for c in cfg.merge_columns if c in renumber]
            if cfg.merge_columns and not allowed:
                # Every merge column is hidden.
                planned = plan_merges(grid)
            else:
                planned = plan_merges(grid, cfg.merge_mode, allowed)
            spans.extend(span.shifted(offset) for span in planned)
            offset += len(grid)
        return spans
