"""Write a table row by row without buffering it.

Widths are frozen before the first row is written, either from
``config.stream.widths`` or by measuring the first row.  Each call then
wraps, merges (within the row only) and assembles one row and writes its
lines straight away, so nothing already written is ever revised.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Sequence, TextIO

from pi.table.cache import LRUCache
from pi.table.cells import CellInput, Row, prepare_cells
from pi.table.config import TableConfig
from pi.table.errors import ConfigError, StreamStateError
from pi.table.layout import BorderConfig, GridAssembler, LineRecord
from pi.table.merge import Span, SpanIndex, plan_merges
from pi.table.renderers import BoxRenderer, Renderer
from pi.table.resolver import ColumnWidthPlan, resolve_widths
from pi.table.table import column_specs, section_paddings, width_constraints
from pi.table.types import Location, MergeMode, Section

logger = logging.getLogger(__name__)


class StreamState(Enum):
    NOT_STARTED = "not started"
    STARTED = "started"
    HEADER = "header emitted"
    ROWS = "rows emitted"
    FOOTER = "footer emitted"
    CLOSED = "closed"


_ROW_LOCAL_MODES = {
    MergeMode.NONE: MergeMode.NONE,
    MergeMode.HORIZONTAL: MergeMode.HORIZONTAL,
    MergeMode.BOTH: MergeMode.HORIZONTAL,
    MergeMode.VERTICAL: MergeMode.NONE,
    MergeMode.HIERARCHICAL: MergeMode.NONE,
}


class StreamTable:
    """Incremental table writer.

    Call :meth:`start`, then optionally :meth:`header`, any number of
    :meth:`append` calls, optionally :meth:`footer`, and finally
    :meth:`close`.  Calls out of that order raise
    :class:`~pi.table.errors.StreamStateError`.
    """

    def __init__(
        self,
        out: TextIO,
        config: TableConfig | None = None,
        renderer: Renderer | None = None,
        cache: LRUCache[str, int] | None = None,
    ) -> None:
        self.out = out
        self.config = config or TableConfig()
        self.renderer: Renderer = renderer or BoxRenderer()
        self.cache = cache
        self.state = StreamState.NOT_STARTED

        self._borders = BorderConfig.from_config(self.config)
        self._assembler: GridAssembler | None = None
        self._previous: Row | None = None
        self._previous_bars: tuple[bool, ...] = ()
        self._section_counts = {s: 0 for s in Section}
        self._degraded: set[Section] = set()

    @property
    def plan(self) -> ColumnWidthPlan | None:
        return self._assembler.plan if self._assembler else None

    # -- lifecycle ---------------------------------------------------------

    def start(self) -> None:
        if self.state is not StreamState.NOT_STARTED:
            raise StreamStateError("start", self.state.value)
        stream = self.config.stream
        if stream.widths:
            num_columns = len(stream.widths)
            if sorted(stream.widths) != list(range(num_columns)):
                raise ConfigError(
                    f"stream.widths must cover columns 0..{num_columns - 1}, "
                    f"got {sorted(stream.widths)}"
                )
            self.config.validate(num_columns)
            self._freeze(num_columns, [], stream.widths)
        elif not stream.infer_widths:
            raise ConfigError(
                "streaming needs stream.widths or stream.infer_widths to size columns"
            )
        self._write(self.renderer.start())
        self.state = StreamState.STARTED

    def header(self, cells: Sequence[CellInput]) -> None:
        self._require("write header", StreamState.STARTED)
        self._emit(Section.HEADER, cells)
        self.state = StreamState.HEADER

    def append(self, row: Sequence[CellInput]) -> None:
        self._require("append row", StreamState.STARTED, StreamState.HEADER, StreamState.ROWS)
        self._emit(Section.ROW, row)
        self.state = StreamState.ROWS

    def footer(self, cells: Sequence[CellInput]) -> None:
        self._require("write footer", StreamState.STARTED, StreamState.HEADER, StreamState.ROWS)
        self._emit(Section.FOOTER, cells)
        self.state = StreamState.FOOTER

    def close(self) -> None:
        if self.state in (StreamState.NOT_STARTED, StreamState.CLOSED):
            raise StreamStateError("close", self.state.value)
        records: list[LineRecord] = []
        if self._assembler is not None and self._previous is not None:
            bottom = self._assembler.bottom(self._previous_bars)
            if bottom is not None:
                records.append(bottom)
        self._write(self.renderer.render(records) + self.renderer.close())
        self.state = StreamState.CLOSED

    # -- internals ---------------------------------------------------------

    def _require(self, operation: str, *allowed: StreamState) -> None:
        if self.state not in allowed:
            raise StreamStateError(operation, self.state.value)

    def _freeze(
        self,
        num_columns: int,
        samples: list[list[str]],
        widths: dict[int, int] | None = None,
        spans: Sequence[Span] = (),
    ) -> None:
        paddings = section_paddings(self.config, num_columns, self.cache)
        plan = resolve_widths(
            column_specs(self.config, paddings, widths),
            samples,
            width_constraints(self.config, self.cache, auto_hide=False),
            spans,
        )
        logger.debug("Stream widths frozen at %s", plan.widths)
        self._assembler = GridAssembler(plan, self._borders, self.cache)

    def _emit(self, section: Section, values: Sequence[CellInput]) -> None:
        config = self.config
        if self._assembler is None:
            num_columns = len(values)
            config.validate(num_columns)
        else:
            num_columns = self._assembler.columns
            if len(values) != num_columns:
                logger.warning(
                    "Streamed %s has %d cells, table has %d columns; adjusting",
                    section.value,
                    len(values),
                    num_columns,
                )
        cells = prepare_cells(values, section, config, num_columns, self.cache)
        cfg = config.section(section)

        mode = _ROW_LOCAL_MODES[cfg.merge_mode]
        if mode is not cfg.merge_mode and section not in self._degraded:
            logger.debug(
                "%s merging is row-local when streaming; using %s for %s",
                cfg.merge_mode.value,
                mode.value,
                section.value,
            )
            self._degraded.add(section)
        spans = plan_merges([cells], mode, cfg.merge_columns)
        index = SpanIndex(spans, 1, num_columns)

        if self._assembler is None:
            self._freeze(num_columns, [[cell.content for cell in cells]], spans=spans)
        assembler = self._assembler
        assert assembler is not None

        count = self._section_counts[section]
        self._section_counts[section] = count + 1
        row = Row(section, count, Location.FIRST if count == 0 else Location.MIDDLE, cells)
        row = assembler.fit(
            row, index, 0, cfg.wrap, ellipsis=config.ellipsis, break_mark=config.break_mark
        )
        bars = assembler.bars(index, 0)

        records: list[LineRecord] = []
        if self._previous is None:
            top = assembler.top(bars)
            if top is not None:
                records.append(top)
        else:
            kind = assembler.between(self._previous, row)
            if kind is not None:
                records.append(assembler.separator(kind, self._previous_bars, bars))
        records.extend(assembler.content(row, index, 0))
        self._write(self.renderer.render(records))

        self._previous = row
        self._previous_bars = bars

    def _write(self, lines: list[str]) -> None:
        for line in lines:
            self.out.write(line + "\n")
