"""pi-table: text table layout with merged cells, wrapping and streaming."""

# Configuration
from pi.table.config import (
    Borders,
    Caption,
    Padding,
    SectionConfig,
    Separators,
    StreamConfig,
    TableConfig,
)

# Errors
from pi.table.errors import ConfigError, StreamStateError, TableError

# Cells
from pi.table.cells import Cell, CellValue, Row, format_title

# Width measurement
from pi.table.cache import CacheStats, LRUCache
from pi.table.text import default_width_cache, set_width_cache_capacity, strip_ansi, visible_width

# Engine
from pi.table.layout import (
    BorderConfig,
    CaptionLine,
    CellLine,
    ContentLine,
    GridAssembler,
    Junction,
    LineRecord,
    Segment,
    SeparatorKind,
    SeparatorLine,
    assemble,
    caption_lines,
)
from pi.table.merge import Span, SpanIndex, plan_merges
from pi.table.resolver import ColumnSpec, ColumnWidthPlan, WidthConstraints, resolve_widths
from pi.table.types import Align, CaptionPosition, Location, MergeMode, Section, VerticalPosition
from pi.table.wrap import WrapPolicy, truncate_to_width, wrap_text

# Output
from pi.table.renderers import (
    BoxRenderer,
    ColorizedRenderer,
    ColorTheme,
    HTMLRenderer,
    MarkdownRenderer,
    Renderer,
    SVGRenderer,
    SVGStyle,
)
from pi.table.stream import StreamState, StreamTable
from pi.table.symbols import BorderStyle, Symbols, symbols_for
from pi.table.table import Table

__all__ = [
    # Configuration
    "Borders",
    "Caption",
    "Padding",
    "SectionConfig",
    "Separators",
    "StreamConfig",
    "TableConfig",
    # Errors
    "ConfigError",
    "StreamStateError",
    "TableError",
    # Cells
    "Cell",
    "CellValue",
    "Row",
    "format_title",
    # Width measurement
    "CacheStats",
    "LRUCache",
    "default_width_cache",
    "set_width_cache_capacity",
    "strip_ansi",
    "visible_width",
    # Engine
    "Align",
    "BorderConfig",
    "CaptionLine",
    "CaptionPosition",
    "CellLine",
    "ColumnSpec",
    "ColumnWidthPlan",
    "ContentLine",
    "GridAssembler",
    "Junction",
    "LineRecord",
    "Location",
    "MergeMode",
    "Section",
    "Segment",
    "SeparatorKind",
    "SeparatorLine",
    "Span",
    "SpanIndex",
    "VerticalPosition",
    "WidthConstraints",
    "WrapPolicy",
    "assemble",
    "caption_lines",
    "plan_merges",
    "resolve_widths",
    "truncate_to_width",
    "wrap_text",
    # Output
    "BorderStyle",
    "BoxRenderer",
    "ColorTheme",
    "ColorizedRenderer",
    "HTMLRenderer",
    "MarkdownRenderer",
    "Renderer",
    "SVGRenderer",
    "SVGStyle",
    "StreamState",
    "StreamTable",
    "Symbols",
    "Table",
    "symbols_for",
]
