"""Shared enumerations for table layout."""

from __future__ import annotations

from enum import Enum


class Align(Enum):
    """Horizontal alignment of a cell.

    ``SKIP`` renders like ``LEFT`` but marks the cell as a barrier for
    horizontal merging.
    """

    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"
    SKIP = "skip"


class MergeMode(Enum):
    NONE = "none"
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    HIERARCHICAL = "hierarchical"
    BOTH = "both"


class Section(Enum):
    HEADER = "header"
    ROW = "row"
    FOOTER = "footer"


class Location(Enum):
    """Position of a row within its section."""

    FIRST = "first"
    MIDDLE = "middle"
    LAST = "last"


class VerticalPosition(Enum):
    """Where a physical line sits inside a vertically merged cell."""

    NONE = "none"
    TOP = "top"
    MIDDLE = "middle"
    BOTTOM = "bottom"


class CaptionPosition(Enum):
    TOP = "top"
    BOTTOM = "bottom"
