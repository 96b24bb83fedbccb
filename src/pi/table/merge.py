"""Collapse adjacent identical cells into spans.

Every planner returns the full tiling of the grid: unmerged cells come back
as 1x1 spans, so each cell is covered by exactly one span.  Spans are sorted
by ``(row, column)``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, Sequence

from pi.table.cells import Cell
from pi.table.types import Align, MergeMode

logger = logging.getLogger(__name__)

Grid = Sequence[Sequence[Cell]]


@dataclass(frozen=True, order=True)
class Span:
    row: int
    column: int
    row_count: int = 1
    column_count: int = 1

    @property
    def last_row(self) -> int:
        return self.row + self.row_count - 1

    @property
    def last_column(self) -> int:
        return self.column + self.column_count - 1

    @property
    def is_single(self) -> bool:
        return self.row_count == 1 and self.column_count == 1

    def cells(self) -> Iterator[tuple[int, int]]:
        for r in range(self.row, self.row + self.row_count):
            for c in range(self.column, self.column + self.column_count):
                yield r, c

    def shifted(self, rows: int) -> Span:
        return Span(self.row + rows, self.column, self.row_count, self.column_count)


def _horizontal_runs(cells: Sequence[Cell], eligible: Callable[[int], bool]) -> list[tuple[int, int]]:
    """Left-to-right runs of identical content as ``(start, count)`` pairs.

    Empty cells, ``SKIP``-aligned cells and columns outside the filter
    always form runs of one.
    """

    def mergeable(c: int) -> bool:
        cell = cells[c]
        return eligible(c) and not cell.is_empty and cell.align is not Align.SKIP

    runs: list[tuple[int, int]] = []
    c = 0
    while c < len(cells):
        start = c
        if mergeable(c):
            while (
                c + 1 < len(cells)
                and mergeable(c + 1)
                and cells[c + 1].content == cells[start].content
            ):
                c += 1
        runs.append((start, c - start + 1))
        c += 1
    return runs


def _plan_none(grid: Grid, eligible: Callable[[int], bool]) -> list[Span]:
    return [Span(r, c) for r, row in enumerate(grid) for c in range(len(row))]


def _plan_horizontal(grid: Grid, eligible: Callable[[int], bool]) -> list[Span]:
    return [
        Span(r, start, 1, count)
        for r, row in enumerate(grid)
        for start, count in _horizontal_runs(row, eligible)
    ]


def _plan_vertical(grid: Grid, eligible: Callable[[int], bool]) -> list[Span]:
    spans: list[Span] = []
    num_cols = len(grid[0]) if grid else 0
    for c in range(num_cols):
        r = 0
        while r < len(grid):
            start = r
            if eligible(c):
                while r + 1 < len(grid) and grid[r + 1][c].content == grid[start][c].content:
                    r += 1
            spans.append(Span(start, c, r - start + 1, 1))
            r += 1
    return spans


def _prefix_matches(above: Sequence[Cell], below: Sequence[Cell], column: int) -> bool:
    return all(above[k].content == below[k].content for k in range(column))


def _plan_hierarchical(grid: Grid, eligible: Callable[[int], bool]) -> list[Span]:
    spans: list[Span] = []
    num_cols = len(grid[0]) if grid else 0
    for c in range(num_cols):
        r = 0
        while r < len(grid):
            start = r
            if eligible(c):
                while (
                    r + 1 < len(grid)
                    and grid[r + 1][c].content == grid[start][c].content
                    and _prefix_matches(grid[r], grid[r + 1], c)
                ):
                    r += 1
            spans.append(Span(start, c, r - start + 1, 1))
            r += 1
    return spans


@dataclass
class _Chain:
    row: int
    content: str
    rows: int = 1


def _plan_both(grid: Grid, eligible: Callable[[int], bool]) -> list[Span]:
    """Horizontal runs per row, then stack runs with the same shape and content."""
    chains: list[tuple[_Chain, int, int]] = []
    open_chains: dict[tuple[int, int], _Chain] = {}
    for r, row in enumerate(grid):
        still_open: dict[tuple[int, int], _Chain] = {}
        for start, count in _horizontal_runs(row, eligible):
            content = row[start].content
            chain = open_chains.get((start, count))
            if chain is not None and chain.content == content and eligible(start):
                chain.rows += 1
            else:
                chain = _Chain(r, content)
                chains.append((chain, start, count))
            still_open[(start, count)] = chain
        open_chains = still_open
    return [Span(chain.row, start, chain.rows, count) for chain, start, count in chains]


_STRATEGIES: dict[MergeMode, Callable[[Grid, Callable[[int], bool]], list[Span]]] = {
    MergeMode.NONE: _plan_none,
    MergeMode.HORIZONTAL: _plan_horizontal,
    MergeMode.VERTICAL: _plan_vertical,
    MergeMode.HIERARCHICAL: _plan_hierarchical,
    MergeMode.BOTH: _plan_both,
}


def plan_merges(
    grid: Grid,
    mode: MergeMode = MergeMode.NONE,
    column_filter: Iterable[int] = (),
) -> list[Span]:
    """Plan the spans of *grid* under *mode*.

    A non-empty *column_filter* limits merging to the listed columns; other
    columns stay 1x1 even when their content matches.  The grid must be
    rectangular.
    """
    allowed = frozenset(column_filter)

    def eligible(column: int) -> bool:
        return not allowed or column in allowed

    spans = _STRATEGIES[mode](grid, eligible)
    spans.sort()
    merged = sum(1 for span in spans if not span.is_single)
    if merged:
        logger.debug("Planned %d merged spans (%s)", merged, mode.value)
    return spans


class SpanIndex:
    """Look up which span owns a grid cell."""

    def __init__(self, spans: Iterable[Span], rows: int, columns: int) -> None:
        self.rows = rows
        self.columns = columns
        self._owner: list[list[Span | None]] = [[None] * columns for _ in range(rows)]
        for span in spans:
            for r, c in span.cells():
                self._owner[r][c] = span
        for r in range(rows):
            for c in range(columns):
                if self._owner[r][c] is None:
                    self._owner[r][c] = Span(r, c)

    def span_at(self, row: int, column: int) -> Span:
        span = self._owner[row][column]
        assert span is not None
        return span

    def is_anchor(self, row: int, column: int) -> bool:
        span = self.span_at(row, column)
        return span.row == row and span.column == column

    def joins_rows(self, row: int, column: int) -> bool:
        """True when *column* of *row* and of ``row - 1`` belong to one span."""
        if row <= 0 or row >= self.rows:
            return False
        return self.span_at(row, column) == self.span_at(row - 1, column)

    def joins_columns(self, row: int, column: int) -> bool:
        """True when *column* and ``column - 1`` of *row* belong to one span."""
        if column <= 0 or column >= self.columns:
            return False
        return self.span_at(row, column) == self.span_at(row, column - 1)
