"""Output backends consuming line records."""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from pi.table.layout import LineRecord


@runtime_checkable
class Renderer(Protocol):
    """Turns line records into output lines.

    ``start`` and ``close`` frame the output; ``render`` may be called any
    number of times in between (once per row when streaming).
    """

    def start(self) -> list[str]: ...

    def render(self, records: Sequence[LineRecord]) -> list[str]: ...

    def close(self) -> list[str]: ...


from pi.table.renderers.box import BoxRenderer  # noqa: E402
from pi.table.renderers.colorized import ColorizedRenderer, ColorTheme  # noqa: E402
from pi.table.renderers.html import HTMLRenderer  # noqa: E402
from pi.table.renderers.markdown import MarkdownRenderer  # noqa: E402
from pi.table.renderers.svg import SVGRenderer, SVGStyle  # noqa: E402

__all__ = [
    "BoxRenderer",
    "ColorTheme",
    "ColorizedRenderer",
    "HTMLRenderer",
    "MarkdownRenderer",
    "Renderer",
    "SVGRenderer",
    "SVGStyle",
]
