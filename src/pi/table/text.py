"""Display-width measurement for cell text.

Provides the visible terminal width of strings that may contain ANSI escape
sequences, East-Asian wide glyphs and emoji, plus helpers that walk a string
as a sequence of zero-width escape codes and measured grapheme clusters.
"""

from __future__ import annotations

import re
import unicodedata
from typing import Iterator, NamedTuple

import grapheme
import wcwidth as _wcwidth

from pi.table.ansi import extract_ansi_code
from pi.table.cache import LRUCache

TAB_WIDTH = 3

# ---------------------------------------------------------------------------
# Escape sequence stripping
# ---------------------------------------------------------------------------

_STRIP_RE = re.compile(
    r"\x1b\[[0-9;]*[mGKHJ]"  # CSI
    r"|\x1b\]8;;[^\x07]*\x07"  # OSC 8 hyperlinks
    r"|\x1b_[^\x07\x1b]*(?:\x07|\x1b\\)"  # APC
)


def strip_ansi(text: str) -> str:
    """Remove escape sequences from *text*."""
    return _STRIP_RE.sub("", text)


# ---------------------------------------------------------------------------
# Width cache
# ---------------------------------------------------------------------------

DEFAULT_CACHE_CAPACITY = 4096

_default_cache: LRUCache[str, int] = LRUCache(DEFAULT_CACHE_CAPACITY)


def default_width_cache() -> LRUCache[str, int]:
    """Return the process-wide cache used when none is injected."""
    return _default_cache


def set_width_cache_capacity(capacity: int) -> None:
    _default_cache.resize(capacity)


# ---------------------------------------------------------------------------
# Grapheme width
# ---------------------------------------------------------------------------


def grapheme_width(g: str) -> int:
    """Return the terminal width of a single grapheme cluster.

    Control characters and lone combining marks are zero wide, emoji
    sequences (VS16, ZWJ, skin tones, flags) are two wide, everything else
    is decided by ``wcwidth`` on the first codepoint.
    """
    if not g:
        return 0

    if len(g) == 1:
        cp = ord(g)
        if cp < 0x20 or 0x7F <= cp <= 0x9F:
            return 0
        return max(_wcwidth.wcwidth(g), 0)

    for ch in g:
        cp = ord(ch)
        if cp in (0xFE0F, 0x200D):
            return 2
        if 0x1F3FB <= cp <= 0x1F3FF or 0x1F1E6 <= cp <= 0x1F1FF:
            return 2

    first = g[0]
    first_cp = ord(first)
    if first_cp >= 0x1F000 or 0x2600 <= first_cp <= 0x27BF:
        return 2

    cat = unicodedata.category(first)
    if cat.startswith("M") or cat == "Cf":
        return 0
    return max(_wcwidth.wcwidth(first), 0)


def _is_printable_ascii(text: str) -> bool:
    return all(0x20 <= ord(ch) <= 0x7E for ch in text)


# ---------------------------------------------------------------------------
# visible_width
# ---------------------------------------------------------------------------


def visible_width(text: str, cache: LRUCache[str, int] | None = None) -> int:
    """Return the number of terminal columns *text* occupies.

    Escape sequences contribute nothing and a tab counts as
    :data:`TAB_WIDTH` columns.  Plain ASCII is measured directly; anything
    else goes through grapheme segmentation and is memoised in *cache*
    (the process-wide default cache when ``None``).
    """
    if not text:
        return 0

    stripped = _STRIP_RE.sub("", text) if "\x1b" in text else text
    if not stripped:
        return 0
    stripped = stripped.replace("\t", " " * TAB_WIDTH)

    if _is_printable_ascii(stripped):
        return len(stripped)

    store = cache if cache is not None else _default_cache
    cached = store.get(stripped)
    if cached is not None:
        return cached

    total = sum(grapheme_width(g) for g in grapheme.graphemes(stripped))
    store.put(stripped, total)
    return total


def line_width(text: str, cache: LRUCache[str, int] | None = None) -> int:
    """Width of the widest ``\\n``-separated line of *text*."""
    if "\n" not in text:
        return visible_width(text, cache)
    return max(visible_width(part, cache) for part in text.split("\n"))


# ---------------------------------------------------------------------------
# Atoms: escape codes and measured grapheme clusters
# ---------------------------------------------------------------------------


class Atom(NamedTuple):
    text: str
    width: int
    is_code: bool


def iter_atoms(text: str) -> Iterator[Atom]:
    """Walk *text* as escape codes (width 0) and grapheme clusters.

    Tabs are expanded to :data:`TAB_WIDTH` spaces so that every yielded
    glyph matches the width :func:`visible_width` would give it.
    """
    plain_start = 0
    i = 0
    n = len(text)
    while i < n:
        if text[i] == "\x1b":
            extracted = extract_ansi_code(text, i)
            if extracted is not None:
                yield from _glyph_atoms(text[plain_start:i])
                code, length = extracted
                yield Atom(code, 0, True)
                i += length
                plain_start = i
                continue
        i += 1
    yield from _glyph_atoms(text[plain_start:])


def _glyph_atoms(run: str) -> Iterator[Atom]:
    if not run:
        return
    for g in grapheme.graphemes(run):
        if g == "\t":
            for _ in range(TAB_WIDTH):
                yield Atom(" ", 1, False)
        else:
            yield Atom(g, grapheme_width(g), False)
