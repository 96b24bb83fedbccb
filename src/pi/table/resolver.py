"""Decide the content width of every column."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from pi.table.cache import LRUCache
from pi.table.merge import Span
from pi.table.text import line_width, strip_ansi

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ColumnSpec:
    """Per-column sizing input.

    ``width`` fixes the content width outright; ``max_width`` caps the
    natural width (0 or ``None`` for no cap); ``padding`` is the number of
    columns the left and right padding glyphs take together.
    """

    width: int | None = None
    max_width: int | None = None
    padding: int = 0


@dataclass
class WidthConstraints:
    max_total: int = 0
    min_width: int = 1
    separator: int = 1
    border_left: int = 1
    border_right: int = 1
    auto_hide: bool = False
    cache: LRUCache[str, int] | None = None


@dataclass(frozen=True)
class ColumnWidthPlan:
    """Resolved content width per column.

    Widths exclude padding.  Hidden columns have width and padding 0.
    """

    widths: tuple[int, ...]
    paddings: tuple[int, ...]
    hidden: frozenset[int] = frozenset()
    advisories: tuple[str, ...] = field(default=(), compare=False)

    def __len__(self) -> int:
        return len(self.widths)

    @property
    def visible(self) -> list[int]:
        return [i for i in range(len(self.widths)) if i not in self.hidden]

    def cell_width(self, column: int) -> int:
        return self.widths[column] + self.paddings[column]

    def total_width(self, separator: int = 1, border_left: int = 1, border_right: int = 1) -> int:
        """Overall display width of a table drawn with this plan."""
        keep = self.visible
        if not keep:
            return border_left + border_right
        inner = sum(self.cell_width(i) for i in keep) + separator * (len(keep) - 1)
        return border_left + inner + border_right


def empty_columns(
    columns: Sequence[ColumnSpec],
    sample_cells: Sequence[Sequence[str]],
) -> set[int]:
    """Columns without an explicit width whose every sample is blank."""
    num_cols = max([len(columns)] + [len(row) for row in sample_cells])
    empty: set[int] = set()
    for col in range(num_cols):
        if col < len(columns) and columns[col].width is not None:
            continue
        values = [row[col] for row in sample_cells if col < len(row)]
        if not any(strip_ansi(v).strip() for v in values):
            empty.add(col)
    return empty


def resolve_widths(
    columns: Sequence[ColumnSpec],
    sample_cells: Sequence[Sequence[str]],
    constraints: WidthConstraints | None = None,
    spans: Sequence[Span] = (),
) -> ColumnWidthPlan:
    """Compute a :class:`ColumnWidthPlan` for *sample_cells*.

    *sample_cells* holds every row that will be drawn with the plan (header,
    body and footer alike); rows may be ragged.  Explicit widths win,
    otherwise columns take their natural width, shrunk proportionally when
    ``constraints.max_total`` is set and the table would not fit.  Budgets
    that cannot be met are reported as advisories and the natural widths are
    kept.

    *spans* are merges planned over *sample_cells*.  Only the first cell of
    a span is measured; a span over several columns widens them together
    just enough to hold it.
    """
    constraints = constraints or WidthConstraints()
    cache = constraints.cache
    num_cols = max([len(columns)] + [len(row) for row in sample_cells])
    sizing = [columns[i] if i < len(columns) else ColumnSpec() for i in range(num_cols)]

    hidden = empty_columns(sizing, sample_cells) if constraints.auto_hide else set()
    if hidden:
        logger.debug("Hiding empty columns %s", sorted(hidden))

    skipped: set[tuple[int, int]] = set()
    wide: list[Span] = []
    for span in spans:
        if span.is_single:
            continue
        skipped.update(span.cells())
        if span.column_count > 1:
            wide.append(span)
        else:
            skipped.discard((span.row, span.column))

    natural: list[int] = []
    for col, size in enumerate(sizing):
        if col in hidden:
            natural.append(0)
            continue
        if size.width is not None:
            natural.append(max(size.width, 0))
            continue
        values = [
            row[col]
            for r, row in enumerate(sample_cells)
            if col < len(row) and (r, col) not in skipped
        ]
        width = max([line_width(v, cache) for v in values] + [1])
        if size.max_width:
            width = max(min(width, size.max_width), 1)
        natural.append(width)

    for span in wide:
        _widen_for_span(natural, sizing, span, sample_cells, constraints)

    widths = list(natural)
    advisories: list[str] = []
    if constraints.max_total > 0:
        advisory = _fit_budget(widths, sizing, hidden, constraints)
        if advisory:
            logger.warning(advisory)
            advisories.append(advisory)
            widths = list(natural)

    paddings = tuple(0 if i in hidden else max(size.padding, 0) for i, size in enumerate(sizing))
    return ColumnWidthPlan(
        widths=tuple(widths),
        paddings=paddings,
        hidden=frozenset(hidden),
        advisories=tuple(advisories),
    )


def _widen_for_span(
    natural: list[int],
    sizing: list[ColumnSpec],
    span: Span,
    sample_cells: Sequence[Sequence[str]],
    constraints: WidthConstraints,
) -> None:
    """Grow the flexible columns under *span* until its first cell fits.

    The cell may use the padding of every covered column but its own, and
    the dividers between them.  Growth goes round-robin from the left and
    stops at any column's ``max_width``.
    """
    row = sample_cells[span.row] if span.row < len(sample_cells) else ()
    if span.column >= len(row):
        return
    covered = range(span.column, span.column + span.column_count)
    needed = line_width(row[span.column], constraints.cache)
    room = (
        sum(natural[c] + max(sizing[c].padding, 0) for c in covered)
        - max(sizing[span.column].padding, 0)
        + constraints.separator * (span.column_count - 1)
    )
    deficit = needed - room
    while deficit > 0:
        grew = False
        for c in covered:
            if deficit == 0:
                break
            size = sizing[c]
            if size.width is not None or (size.max_width and natural[c] >= size.max_width):
                continue
            natural[c] += 1
            deficit -= 1
            grew = True
        if not grew:
            break


def _fit_budget(
    widths: list[int],
    sizing: list[ColumnSpec],
    hidden: set[int],
    constraints: WidthConstraints,
) -> str | None:
    """Shrink flexible columns of *widths* in place to meet the budget.

    Returns an advisory message when the budget cannot be met.
    """
    visible = [i for i in range(len(widths)) if i not in hidden]
    flexible = [i for i in visible if sizing[i].width is None]
    fixed = sum(widths[i] for i in visible if sizing[i].width is not None)
    overhead = (
        constraints.border_left
        + constraints.border_right
        + constraints.separator * max(len(visible) - 1, 0)
        + sum(max(sizing[i].padding, 0) for i in visible)
    )
    available = constraints.max_total - overhead - fixed

    total_natural = sum(widths[i] for i in flexible)
    if total_natural <= available:
        return None

    min_width = max(constraints.min_width, 1)
    floors = {i: min(min_width, widths[i]) for i in flexible}
    if sum(floors.values()) > available:
        needed = constraints.max_total - available + sum(floors.values())
        return (
            f"table needs at least {needed} columns but max width is "
            f"{constraints.max_total}; using natural widths"
        )

    logger.debug(
        "Shrinking %d flexible columns from %d to %d", len(flexible), total_natural, available
    )
    natural = {i: widths[i] for i in flexible}
    for i in flexible:
        widths[i] = max(floors[i], natural[i] * available // total_natural)

    # Hand out the remainder left to right, never beyond a column's natural width.
    remainder = available - sum(widths[i] for i in flexible)
    while remainder > 0:
        grew = False
        for i in flexible:
            if remainder == 0:
                break
            if widths[i] < natural[i]:
                widths[i] += 1
                remainder -= 1
                grew = True
        if not grew:
            break

    # Clamping to the floor can overshoot; the widest column gives back first.
    while remainder < 0:
        candidates = [i for i in flexible if widths[i] > floors[i]]
        widest = max(candidates, key=lambda i: (widths[i], -i))
        widths[widest] -= 1
        remainder += 1
    return None
