"""Table configuration.

Plain dataclasses with defaults that reproduce the classic look: a light
box-drawing grid, centred upper-cased header, left-aligned body, one space
of padding on each side of every cell.  Per-column lists are optional; when
given they must cover every column of the table (see
:meth:`TableConfig.validate`).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Sequence

from pi.table.errors import ConfigError
from pi.table.types import Align, CaptionPosition, MergeMode, Section
from pi.table.wrap import BREAK_MARK, ELLIPSIS, WrapPolicy


@dataclass(frozen=True)
class Padding:
    """Glyphs placed around cell content.

    ``left``/``right`` are written as-is on every line; ``top``/``bottom``,
    when non-empty, add one extra line filled with that glyph.
    """

    left: str = " "
    right: str = " "
    top: str = ""
    bottom: str = ""


NO_PADDING = Padding(left="", right="")


@dataclass
class SectionConfig:
    """Formatting of one table section (header, rows or footer)."""

    alignment: Align | None = None
    column_aligns: list[Align | None] = field(default_factory=list)
    padding: Padding = field(default_factory=Padding)
    column_paddings: list[Padding | None] = field(default_factory=list)
    wrap: WrapPolicy = WrapPolicy.NORMAL
    merge_mode: MergeMode = MergeMode.NONE
    merge_columns: list[int] = field(default_factory=list)
    auto_format: bool = False
    max_width: int = 0
    row_filter: Callable[[list[str]], list[str]] | None = None
    column_filters: list[Callable[[str], str] | None] = field(default_factory=list)


@dataclass
class Borders:
    """Outer frame of the table."""

    left: bool = True
    right: bool = True
    top: bool = True
    bottom: bool = True


@dataclass
class Separators:
    """Inner lines of the table."""

    header: bool = True
    footer: bool = True
    between_rows: bool = False
    between_columns: bool = True


@dataclass
class StreamConfig:
    """Width source for streaming output.

    Either explicit content widths for columns ``0..n-1`` or permission to
    snapshot widths from the first emitted row.
    """

    widths: dict[int, int] = field(default_factory=dict)
    infer_widths: bool = False


@dataclass
class Caption:
    """Text printed above or below the table.

    Lines wrap at ``width`` columns (the table width when 0) and are aligned
    across the table.
    """

    text: str = ""
    position: CaptionPosition = CaptionPosition.BOTTOM
    align: Align = Align.CENTER
    width: int = 0


def _header_defaults() -> SectionConfig:
    return SectionConfig(alignment=Align.CENTER, auto_format=True)


@dataclass
class TableConfig:
    header: SectionConfig = field(default_factory=_header_defaults)
    row: SectionConfig = field(default_factory=SectionConfig)
    footer: SectionConfig = field(default_factory=SectionConfig)
    max_width: int = 0
    column_widths: dict[int, int] = field(default_factory=dict)
    column_max_widths: dict[int, int] = field(default_factory=dict)
    min_column_width: int = 1
    auto_hide: bool = False
    trim_whitespace: bool = True
    ellipsis: str = ELLIPSIS
    break_mark: str = BREAK_MARK
    borders: Borders = field(default_factory=Borders)
    separators: Separators = field(default_factory=Separators)
    stream: StreamConfig = field(default_factory=StreamConfig)
    caption: Caption = field(default_factory=Caption)

    def section(self, section: Section) -> SectionConfig:
        if section is Section.HEADER:
            return self.header
        if section is Section.FOOTER:
            return self.footer
        return self.row

    def validate(self, num_columns: int) -> None:
        """Check the configuration against a table of *num_columns* columns.

        Raises :class:`ConfigError` on the first problem found.
        """
        if self.max_width < 0:
            raise ConfigError(f"max_width must not be negative, got {self.max_width}")
        if self.min_column_width < 0:
            raise ConfigError(
                f"min_column_width must not be negative, got {self.min_column_width}"
            )
        _check_widths("column_widths", self.column_widths, minimum=1)
        _check_widths("column_max_widths", self.column_max_widths)
        _check_widths("stream.widths", self.stream.widths, minimum=1)
        if self.caption.width < 0:
            raise ConfigError(f"caption.width must not be negative, got {self.caption.width}")

        for section in Section:
            cfg = self.section(section)
            name = section.value
            if cfg.max_width < 0:
                raise ConfigError(f"{name}.max_width must not be negative, got {cfg.max_width}")
            _check_length(f"{name}.column_aligns", cfg.column_aligns, num_columns)
            _check_length(f"{name}.column_paddings", cfg.column_paddings, num_columns)
            _check_length(f"{name}.column_filters", cfg.column_filters, num_columns)
            for col in cfg.merge_columns:
                if not 0 <= col < num_columns:
                    raise ConfigError(
                        f"{name}.merge_columns references column {col}, "
                        f"table has {num_columns}"
                    )


def _check_length(name: str, values: Sequence[object], num_columns: int) -> None:
    if values and len(values) != num_columns:
        raise ConfigError(
            f"{name} has {len(values)} entries but the table has {num_columns} columns"
        )


def _check_widths(name: str, widths: dict[int, int], minimum: int = 0) -> None:
    # Max widths accept 0 (no cap); fixed widths must be positive.
    for col, width in widths.items():
        if col < 0:
            raise ConfigError(f"{name} has negative column index {col}")
        if width < minimum:
            raise ConfigError(f"{name}[{col}] must be at least {minimum}, got {width}")
