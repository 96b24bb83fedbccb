"""Cells and rows, and turning caller values into formatted cells."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Sequence, Union

from pi.table.cache import LRUCache
from pi.table.config import Padding, SectionConfig, TableConfig
from pi.table.text import TAB_WIDTH, visible_width
from pi.table.types import Align, Location, Section
from pi.table.wrap import wrap_text


@dataclass(frozen=True)
class CellValue:
    """A cell with per-cell overrides of alignment or padding."""

    text: str
    align: Align | None = None
    padding: Padding | None = None


CellInput = Union[str, CellValue, int, float, None]


@dataclass(frozen=True)
class Cell:
    """A formatted cell.

    ``lines`` is empty until the cell has been wrapped to its column.
    """

    content: str
    align: Align = Align.LEFT
    padding: Padding = field(default_factory=Padding)
    lines: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return self.content == ""


@dataclass
class Row:
    section: Section
    index: int
    location: Location
    cells: list[Cell]

    @property
    def has_top_padding(self) -> bool:
        return any(cell.padding.top for cell in self.cells)

    @property
    def has_bottom_padding(self) -> bool:
        return any(cell.padding.bottom for cell in self.cells)

    @property
    def height(self) -> int:
        """Physical line count, padding lines included."""
        content = max((len(cell.lines) for cell in self.cells), default=0)
        return max(content, 1) + self.has_top_padding + self.has_bottom_padding


def location_of(index: int, count: int) -> Location:
    if index == 0:
        return Location.FIRST
    if index == count - 1:
        return Location.LAST
    return Location.MIDDLE


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def _is_num_or_space(ch: str) -> bool:
    return ch.isdigit() or ch == " "


def format_title(text: str) -> str:
    """Header auto-format: ``first_name`` and ``first.name`` become ``FIRST NAME``.

    Dots inside numbers such as ``1.5`` are left alone.  Text that trims to
    nothing keeps a single space so blank header lines survive.
    """
    chars = list(text)
    last = len(chars) - 1
    for i, ch in enumerate(chars):
        if ch == "_":
            chars[i] = " "
        elif ch == ".":
            if (i != 0 and not _is_num_or_space(text[i - 1])) or (
                i != last and not _is_num_or_space(text[i + 1])
            ):
                chars[i] = " "
    formatted = "".join(chars).strip()
    if not formatted and text:
        formatted = " "
    return formatted.upper()


def align_text(
    text: str,
    width: int,
    align: Align,
    fill: str = " ",
    cache: LRUCache[str, int] | None = None,
) -> str:
    """Pad *text* to *width* columns; centring puts the odd column right."""
    gap = width - visible_width(text, cache)
    if gap <= 0:
        return text
    if align is Align.RIGHT:
        return fill * gap + text
    if align is Align.CENTER:
        left = gap // 2
        return fill * left + text + fill * (gap - left)
    return text + fill * gap


def padding_width(padding: Padding, cache: LRUCache[str, int] | None = None) -> int:
    return visible_width(padding.left, cache) + visible_width(padding.right, cache)


def fill_line(glyph: str, width: int, cache: LRUCache[str, int] | None = None) -> str:
    """Repeat *glyph* to exactly *width* columns (spaces make up any rest)."""
    if width <= 0:
        return ""
    glyph_width = visible_width(glyph, cache)
    if glyph_width <= 0:
        return " " * width
    count = width // glyph_width
    return glyph * count + " " * (width - count * glyph_width)


# ---------------------------------------------------------------------------
# Preparation
# ---------------------------------------------------------------------------


def _default_align(section: Section) -> Align:
    return Align.CENTER if section is Section.HEADER else Align.LEFT


def resolve_align(
    section: Section,
    cfg: SectionConfig,
    column: int,
    override: Align | None = None,
) -> Align:
    """Alignment precedence: cell, column, section, then the default."""
    if override is not None:
        return override
    if column < len(cfg.column_aligns) and cfg.column_aligns[column] is not None:
        return cfg.column_aligns[column]
    if cfg.alignment is not None:
        return cfg.alignment
    return _default_align(section)


def resolve_padding(cfg: SectionConfig, column: int, override: Padding | None = None) -> Padding:
    if override is not None:
        return override
    if column < len(cfg.column_paddings) and cfg.column_paddings[column] is not None:
        return cfg.column_paddings[column]
    return cfg.padding


def stringify(value: CellInput) -> str:
    if isinstance(value, CellValue):
        return value.text
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def prepare_cells(
    values: Sequence[CellInput],
    section: Section,
    config: TableConfig,
    num_columns: int,
    cache: LRUCache[str, int] | None = None,
) -> list[Cell]:
    """Turn one row of caller values into formatted, unwrapped cells.

    The row is padded with empty cells (or cut) to *num_columns*.  Filters
    run on the raw strings, then trimming, tab expansion and, for sections
    with auto-format, title formatting.  A section ``max_width`` pre-wraps
    the content so no line of it is wider than the cap.
    """
    cfg = config.section(section)
    values = list(values[:num_columns])
    texts = [stringify(v) for v in values]
    texts += [""] * (num_columns - len(texts))

    if cfg.row_filter is not None:
        filtered = list(cfg.row_filter(list(texts)))
        texts = (filtered + [""] * num_columns)[:num_columns]

    cells: list[Cell] = []
    for col, text in enumerate(texts):
        if col < len(cfg.column_filters) and cfg.column_filters[col] is not None:
            text = cfg.column_filters[col](text)
        if config.trim_whitespace:
            text = text.strip()
        text = text.replace("\t", " " * TAB_WIDTH)
        if cfg.auto_format:
            text = format_title(text)

        value = values[col] if col < len(values) else None
        align_override = value.align if isinstance(value, CellValue) else None
        padding_override = value.padding if isinstance(value, CellValue) else None
        cells.append(
            Cell(
                content=text,
                align=resolve_align(section, cfg, col, align_override),
                padding=resolve_padding(cfg, col, padding_override),
            )
        )

    if cfg.max_width > 0:
        cells = [
            replace(
                cell,
                content="\n".join(
                    wrap_text(
                        cell.content,
                        cfg.max_width,
                        cfg.wrap,
                        ellipsis=config.ellipsis,
                        break_mark=config.break_mark,
                        cache=cache,
                    )
                ),
            )
            for cell in cells
        ]
    return cells
