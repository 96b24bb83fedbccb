"""Tests for pi.table.table -- the buffered table surface."""

from __future__ import annotations

import pytest

from pi.table import (
    Align,
    Caption,
    CaptionPosition,
    CellValue,
    ConfigError,
    LRUCache,
    MergeMode,
    Padding,
    SectionConfig,
    Separators,
    Table,
    TableConfig,
    WrapPolicy,
    format_title,
)
from pi.table.text import visible_width


class TestBasicRendering:
    """End-to-end rendering of simple tables."""

    def test_people_table(self, people_table: Table) -> None:
        assert people_table.render() == (
            "┌───────┬─────┬──────────┐\n"
            "│ NAME  │ AGE │   CITY   │\n"
            "├───────┼─────┼──────────┤\n"
            "│ Alice │ 25  │ New York │\n"
            "│ Bob   │ 30  │ Boston   │\n"
            "└───────┴─────┴──────────┘\n"
        )

    def test_lines_match_render(self, people_table: Table) -> None:
        assert "\n".join(people_table.lines()) + "\n" == people_table.render()
        assert str(people_table) == people_table.render()

    def test_empty_table_renders_nothing(self) -> None:
        assert Table().render() == ""
        assert Table().layout() == []

    def test_non_string_values(self) -> None:
        table = Table()
        table.append(["Alice", 25, None, 1.5])
        assert table.render() == (
            "┌───────┬────┬───┬─────┐\n"
            "│ Alice │ 25 │   │ 1.5 │\n"
            "└───────┴────┴───┴─────┘\n"
        )

    def test_ragged_rows_are_padded(self) -> None:
        table = Table()
        table.append(["a", "b"])
        table.append(["c"])
        assert table.render().splitlines()[2] == "│ c │   │"

    def test_footer_gets_its_own_separator(self, people_table: Table) -> None:
        people_table.footer(["", "Total", "55"])
        lines = people_table.render().splitlines()
        assert lines[1] == "│ NAME  │  AGE  │   CITY   │"
        assert lines[-3] == "├───────┼───────┼──────────┤"
        assert lines[-2] == "│       │ Total │ 55       │"
        assert lines[-1] == "└───────┴───────┴──────────┘"

    def test_reset_drops_rows(self, people_table: Table) -> None:
        people_table.reset()
        assert people_table.render() == ""


class TestAlignmentAndPadding:
    """Cell alignment and padding settings."""

    def test_column_alignment(self, people_table: Table) -> None:
        people_table.config.row.column_aligns = [None, Align.RIGHT, None]
        assert people_table.render().splitlines()[3] == "│ Alice │  25 │ New York │"

    def test_cell_override_beats_column(self) -> None:
        config = TableConfig(row=SectionConfig(column_aligns=[Align.LEFT]))
        table = Table(config)
        table.append(["Alice"])
        table.append([CellValue("Bob", align=Align.RIGHT)])
        assert table.render().splitlines()[2] == "│   Bob │"

    def test_section_alignment(self) -> None:
        table = Table(TableConfig(row=SectionConfig(alignment=Align.CENTER)))
        table.append(["abc"])
        table.append(["a"])
        assert table.render().splitlines()[2] == "│  a  │"

    def test_custom_padding(self) -> None:
        config = TableConfig(row=SectionConfig(padding=Padding(left="<", right=">")))
        table = Table(config)
        table.append(["x"])
        assert table.render() == "┌───┐\n│<x>│\n└───┘\n"

    def test_per_cell_padding_keeps_column_width(self) -> None:
        table = Table()
        table.append(["abc"])
        table.append([CellValue("x", padding=Padding(left="  ", right="  "))])
        lines = table.render().splitlines()
        assert lines[1] == "│ abc   │"
        assert lines[2] == "│  x    │"


class TestFormatting:
    """Header titles, filters, trimming and tabs."""

    def test_header_auto_format(self) -> None:
        assert format_title("first_name") == "FIRST NAME"
        assert format_title("user.id") == "USER ID"
        assert format_title("v1.5") == "V1.5"
        assert format_title("a.b") == "A B"
        assert format_title("1.5") == "1.5"
        assert format_title("  ") == " "

    def test_auto_format_can_be_disabled(self) -> None:
        table = Table(TableConfig(header=SectionConfig(auto_format=False)))
        table.header(["first_name"])
        assert "first_name" in table.render()

    def test_whitespace_trimmed_by_default(self) -> None:
        table = Table()
        table.append(["  x  "])
        assert table.render().splitlines()[1] == "│ x │"

    def test_trim_can_be_disabled(self) -> None:
        table = Table(TableConfig(trim_whitespace=False, row=SectionConfig(wrap=WrapPolicy.NONE)))
        table.append([" x "])
        assert table.render().splitlines()[1] == "│  x  │"

    def test_tabs_expand_to_three_spaces(self) -> None:
        table = Table(TableConfig(row=SectionConfig(wrap=WrapPolicy.NONE)))
        table.append(["a\tb"])
        assert table.render().splitlines()[1] == "│ a   b │"

    def test_filters(self) -> None:
        config = TableConfig(
            row=SectionConfig(
                row_filter=lambda cells: [c.lower() for c in cells],
                column_filters=[None, lambda c: f"${c}"],
            )
        )
        table = Table(config)
        table.append(["ITEM", "5"])
        assert table.render().splitlines()[1] == "│ item │ $5 │"


class TestWidths:
    """Fixed, capped and budgeted column widths."""

    def test_fixed_width_wraps(self) -> None:
        table = Table(TableConfig(column_widths={0: 6}))
        table.append(["a very long cell text", "x"])
        assert table.render() == (
            "┌────────┬───┐\n"
            "│ a very │ x │\n"
            "│ long   │   │\n"
            "│ cell   │   │\n"
            "│ text   │   │\n"
            "└────────┴───┘\n"
        )

    def test_truncate_policy(self) -> None:
        config = TableConfig(column_widths={0: 10}, row=SectionConfig(wrap=WrapPolicy.TRUNCATE))
        table = Table(config)
        table.append(["This is a very long description"])
        assert table.render().splitlines()[1] == "│ This is a… │"

    def test_global_budget_contains_every_line(self) -> None:
        table = Table(TableConfig(max_width=40))
        table.header(["Name", "Description", "Notes"])
        table.append(["widget", "a fairly long description of the widget", "see manual"])
        table.append(["gadget", "short", "a note that is also rather long"])
        lines = table.render().splitlines()
        assert all(visible_width(line) <= 40 for line in lines)
        assert len({visible_width(line) for line in lines}) == 1

    def test_column_max_width(self) -> None:
        table = Table(TableConfig(column_max_widths={0: 4}))
        table.append(["abcdefgh"])
        assert table.render().splitlines()[1:3] == ["│ abcd │", "│ efgh │"]

    def test_section_max_width(self) -> None:
        config = TableConfig(row=SectionConfig(max_width=3))
        table = Table(config)
        table.header(["Header"])
        table.append(["aaa bbb"])
        lines = table.render().splitlines()
        assert lines[3] == "│ aaa    │"
        assert lines[4] == "│ bbb    │"

    def test_auto_hide_drops_empty_columns(self) -> None:
        table = Table(TableConfig(auto_hide=True))
        table.append(["x", "", "y"])
        table.append(["z", "", "w"])
        assert table.render() == (
            "┌───┬───┐\n"
            "│ x │ y │\n"
            "│ z │ w │\n"
            "└───┴───┘\n"
        )

    def test_ansi_content_measured_by_visible_width(self, cache: LRUCache[str, int]) -> None:
        table = Table(cache=cache)
        table.append(["\x1b[31mred\x1b[0m", "日本"])
        line = table.render().splitlines()[1]
        assert line == "│ \x1b[31mred\x1b[0m │ 日本 │"
        assert "日本" in cache


class TestSeparatorsAndMerges:
    """Row separators together with merged cells."""

    def test_between_rows(self) -> None:
        table = Table(TableConfig(separators=Separators(between_rows=True)))
        table.append_bulk([["a"], ["b"]])
        assert table.render() == "┌───┐\n│ a │\n├───┤\n│ b │\n└───┘\n"

    def test_header_only_has_no_header_separator(self) -> None:
        table = Table()
        table.header(["h"])
        assert table.render() == "┌───┐\n│ H │\n└───┘\n"

    def test_merges_are_planned_per_section(self) -> None:
        config = TableConfig(
            header=SectionConfig(alignment=Align.CENTER, merge_mode=MergeMode.VERTICAL),
            row=SectionConfig(merge_mode=MergeMode.VERTICAL),
        )
        table = Table(config)
        table.header(["a"])
        table.append(["a"])
        table.append(["a"])
        lines = table.render().splitlines()
        assert lines == ["┌───┐", "│ a │", "├───┤", "│ a │", "│   │", "└───┘"]


class TestConfigErrors:
    """Invalid configuration surfaced at render time."""

    def test_mismatched_column_aligns(self, people_table: Table) -> None:
        people_table.config.row.column_aligns = [Align.LEFT, Align.RIGHT]
        with pytest.raises(ConfigError, match="column_aligns"):
            people_table.render()

    def test_negative_fixed_width(self, people_table: Table) -> None:
        people_table.config.column_widths = {0: -1}
        with pytest.raises(ConfigError):
            people_table.layout()

    def test_config_error_is_value_error(self) -> None:
        table = Table(TableConfig(row=SectionConfig(column_paddings=[None, None])))
        table.append(["one"])
        with pytest.raises(ValueError):
            table.render()


class TestMergedWidths:
    """Column widths and hidden columns under merged cells."""

    def test_horizontal_merge_does_not_double_widths(self) -> None:
        table = Table(TableConfig(row=SectionConfig(merge_mode=MergeMode.HORIZONTAL)))
        table.append_bulk([["same long text", "same long text"], ["x", "y"]])
        assert table.render() == (
            "┌────────────────┐\n"
            "│ same long text │\n"
            "│ x      │ y     │\n"
            "└────────┴───────┘\n"
        )

    def test_merge_columns_realign_after_hidden_column(self) -> None:
        config = TableConfig(
            auto_hide=True,
            row=SectionConfig(merge_mode=MergeMode.VERTICAL, merge_columns=[2]),
        )
        table = Table(config)
        table.append_bulk([["a", "", "x"], ["b", "", "x"]])
        assert table.render().splitlines() == [
            "┌───┬───┐",
            "│ a │ x │",
            "│ b │   │",
            "└───┴───┘",
        ]

    def test_hidden_column_does_not_block_merged_column(self) -> None:
        config = TableConfig(
            auto_hide=True,
            row=SectionConfig(merge_mode=MergeMode.VERTICAL, merge_columns=[0]),
        )
        table = Table(config)
        table.append_bulk([["a", "", "x"], ["a", "", "y"]])
        assert table.render().splitlines()[1:3] == ["│ a │ x │", "│   │ y │"]


class TestCaptions:
    """Captions printed above or below the grid."""

    def test_bottom_caption_is_centred_under_table(self, people_table: Table) -> None:
        people_table.config.caption = Caption("People")
        lines = people_table.render().splitlines()
        assert lines[-2] == "└───────┴─────┴──────────┘"
        assert lines[-1] == " " * 10 + "People"

    def test_top_caption_wraps_at_its_own_width(self, people_table: Table) -> None:
        people_table.config.caption = Caption(
            "Quarterly results by city",
            position=CaptionPosition.TOP,
            align=Align.LEFT,
            width=10,
        )
        lines = people_table.render().splitlines()
        assert lines[:4] == ["Quarterly", "results by", "city", "┌───────┬─────┬──────────┐"]

    def test_right_aligned_caption(self, people_table: Table) -> None:
        people_table.config.caption = Caption("n=2", align=Align.RIGHT)
        assert people_table.render().splitlines()[-1] == " " * 23 + "n=2"

    def test_empty_table_drops_caption(self) -> None:
        assert Table(TableConfig(caption=Caption("nothing"))).render() == ""
