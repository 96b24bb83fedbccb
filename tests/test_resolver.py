"""Tests for pi.table.resolver -- column width resolution."""

from __future__ import annotations

import logging

import pytest

from pi.table.merge import Span
from pi.table.resolver import (
    ColumnSpec,
    ColumnWidthPlan,
    WidthConstraints,
    empty_columns,
    resolve_widths,
)


class TestNaturalWidths:
    """Widths taken from content and fixed settings."""

    def test_widest_cell_per_column(self) -> None:
        plan = resolve_widths([], [["Name", "Age"], ["Alice", "25"]])
        assert plan.widths == (5, 3)
        assert plan.paddings == (0, 0)

    def test_longest_physical_line(self) -> None:
        plan = resolve_widths([], [["ab\nabcdef\nc"]])
        assert plan.widths == (6,)

    def test_ansi_and_wide_glyphs(self) -> None:
        plan = resolve_widths([], [["\x1b[1m日本\x1b[0m"]])
        assert plan.widths == (4,)

    def test_ragged_rows(self) -> None:
        plan = resolve_widths([], [["a"], ["b", "ccc"]])
        assert plan.widths == (1, 3)

    def test_empty_column_is_at_least_one(self) -> None:
        plan = resolve_widths([], [["", "x"]])
        assert plan.widths == (1, 1)

    def test_explicit_width_wins(self) -> None:
        plan = resolve_widths([ColumnSpec(width=2)], [["abcdef"]])
        assert plan.widths == (2,)

    def test_max_width_caps(self) -> None:
        plan = resolve_widths([ColumnSpec(max_width=3), ColumnSpec(max_width=10)], [["abcdef", "ab"]])
        assert plan.widths == (3, 2)

    def test_padding_is_kept_separately(self) -> None:
        plan = resolve_widths([ColumnSpec(padding=2)], [["abc"]])
        assert plan.widths == (3,)
        assert plan.cell_width(0) == 5


class TestBudget:
    """Shrinking columns to fit a total width."""

    def test_fitting_table_keeps_natural_widths(self) -> None:
        plan = resolve_widths([], [["a" * 5, "b" * 5]], WidthConstraints(max_total=20))
        assert plan.widths == (5, 5)

    def test_proportional_shrink(self) -> None:
        # 13 total - 2 borders - 1 separator leaves 10 content columns.
        plan = resolve_widths([], [["a" * 10, "b" * 10]], WidthConstraints(max_total=13))
        assert plan.widths == (5, 5)
        assert plan.total_width() == 13

    def test_remainder_goes_to_leftmost_columns(self) -> None:
        # 15 - 2 borders - 2 separators = 11 over three columns of 10.
        plan = resolve_widths([], [["a" * 10] * 3], WidthConstraints(max_total=15))
        assert plan.widths == (4, 4, 3)

    def test_overshoot_taken_from_widest(self) -> None:
        # 14 - 4 overhead = 10; floors clamp the narrow columns to 3.
        plan = resolve_widths(
            [],
            [["a" * 20, "bbb", "ccc"]],
            WidthConstraints(max_total=14, min_width=3),
        )
        assert plan.widths == (4, 3, 3)
        assert plan.total_width() == 14

    def test_fixed_columns_are_not_shrunk(self) -> None:
        plan = resolve_widths(
            [ColumnSpec(width=6)],
            [["x", "a" * 20]],
            WidthConstraints(max_total=16),
        )
        assert plan.widths == (6, 7)

    def test_padding_counts_against_budget(self) -> None:
        specs = [ColumnSpec(padding=2), ColumnSpec(padding=2)]
        plan = resolve_widths(specs, [["a" * 10, "b" * 10]], WidthConstraints(max_total=17))
        assert plan.widths == (5, 5)
        assert plan.total_width() == 17

    def test_unsatisfiable_budget_falls_back(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="pi.table.resolver"):
            plan = resolve_widths(
                [],
                [["a" * 10, "b" * 10]],
                WidthConstraints(max_total=8, min_width=5),
            )
        assert plan.widths == (10, 10)
        assert len(plan.advisories) == 1
        assert "natural widths" in caplog.text

    def test_non_empty_columns_never_below_one(self) -> None:
        plan = resolve_widths([], [["a", "b" * 50]], WidthConstraints(max_total=12))
        assert plan.widths[0] >= 1
        assert plan.total_width() <= 12


class TestAutoHide:
    """Dropping columns with no content."""

    def test_empty_columns_are_hidden(self) -> None:
        plan = resolve_widths(
            [ColumnSpec(padding=2)] * 3,
            [["a", "", "b"], ["c", "  ", "d"]],
            WidthConstraints(auto_hide=True),
        )
        assert plan.hidden == frozenset({1})
        assert plan.widths == (1, 0, 1)
        assert plan.paddings == (2, 0, 2)
        assert plan.visible == [0, 2]

    def test_hidden_columns_free_budget(self) -> None:
        plan = resolve_widths(
            [],
            [["a" * 6, "", "b" * 6]],
            WidthConstraints(max_total=15, auto_hide=True),
        )
        assert plan.widths == (6, 0, 6)

    def test_empty_columns_ignore_fixed_widths(self) -> None:
        grid = [["a", "", ""], ["b", " ", "\x1b[1m\x1b[0m"]]
        assert empty_columns([], grid) == {1, 2}
        assert empty_columns([ColumnSpec(), ColumnSpec(), ColumnSpec(width=3)], grid) == {1}


class TestMergedSpans:
    """Merged cells are measured once, by their first cell."""

    def test_horizontal_span_spreads_over_its_columns(self) -> None:
        grid = [["same long text", "same long text"], ["x", "y"]]
        spans = [Span(0, 0, 1, 2), Span(1, 0), Span(1, 1)]
        plan = resolve_widths([ColumnSpec(padding=2)] * 2, grid, spans=spans)
        # 14 columns = 6 + 5 + one divider + the second column's padding.
        assert plan.widths == (6, 5)

    def test_members_do_not_widen_their_columns(self) -> None:
        grid = [["abcdefgh", "abcdefgh", "z"]]
        plan = resolve_widths([], grid, spans=[Span(0, 0, 1, 2), Span(0, 2)])
        assert plan.widths == (4, 3, 1)

    def test_fixed_columns_do_not_grow(self) -> None:
        plan = resolve_widths(
            [ColumnSpec(width=2), ColumnSpec()],
            [["abcdefgh", "abcdefgh"]],
            spans=[Span(0, 0, 1, 2)],
        )
        assert plan.widths == (2, 5)

    def test_vertical_span_measured_in_its_column(self) -> None:
        plan = resolve_widths([], [["abc", "x"], ["abc", "y"]], spans=[Span(0, 0, 2, 1)])
        assert plan.widths == (3, 1)
