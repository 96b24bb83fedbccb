"""Cell wrapper: split or truncate cell text to a column width.

All measurements are in display columns.  ANSI styling survives the split:
every physical line re-opens the styles active where it starts and is reset
at its end, so each line can be painted on its own.
"""

from __future__ import annotations

from enum import Enum

from pi.table.ansi import AnsiCodeTracker
from pi.table.cache import LRUCache
from pi.table.text import Atom, iter_atoms, visible_width

ELLIPSIS = "…"
BREAK_MARK = "↩"

_SPACE = Atom(" ", 1, False)


class WrapPolicy(Enum):
    """How overlong cell text is fitted to its column."""

    NONE = "none"
    NORMAL = "normal"
    TRUNCATE = "truncate"
    BREAK = "break"


def wrap_text(
    text: str,
    width: int,
    policy: WrapPolicy = WrapPolicy.NORMAL,
    *,
    ellipsis: str = ELLIPSIS,
    break_mark: str = BREAK_MARK,
    cache: LRUCache[str, int] | None = None,
) -> list[str]:
    """Fit *text* into *width* columns and return its physical lines.

    Embedded newlines always start a new line; each segment between them is
    then handled according to *policy*.  The result is never empty.
    """
    segments = text.split("\n")
    if width <= 0 and policy is not WrapPolicy.NONE:
        return [""] * len(segments)

    tracker = AnsiCodeTracker()
    lines: list[str] = []
    for segment in segments:
        atoms = list(iter_atoms(segment))
        if policy is WrapPolicy.NONE:
            pieces = [atoms]
        elif policy is WrapPolicy.TRUNCATE:
            pieces = [_truncate_atoms(atoms, width, ellipsis, cache)]
        else:
            mark = break_mark if policy is WrapPolicy.BREAK else ""
            pieces = _wrap_atoms(atoms, width, mark, cache)
        lines.extend(_emit(piece, tracker) for piece in pieces)
    return lines


def truncate_to_width(
    text: str,
    width: int,
    ellipsis: str = ELLIPSIS,
    cache: LRUCache[str, int] | None = None,
) -> str:
    """Cut single-line *text* to *width* columns, ending it with *ellipsis*.

    Text that already fits is returned unchanged.  When *width* cannot hold
    the ellipsis itself the visible result is empty.
    """
    if width <= 0:
        return ""
    atoms = _truncate_atoms(list(iter_atoms(text)), width, ellipsis, cache)
    return "".join(atom.text for atom in atoms)


def _emit(atoms: list[Atom], tracker: AnsiCodeTracker) -> str:
    parts = [tracker.get_active_codes()]
    for atom in atoms:
        if atom.is_code:
            tracker.process(atom.text)
        parts.append(atom.text)
    parts.append(tracker.get_line_end_reset())
    return "".join(parts)


def _width(atoms: list[Atom]) -> int:
    return sum(atom.width for atom in atoms)


# ---------------------------------------------------------------------------
# Truncation
# ---------------------------------------------------------------------------


def _truncate_atoms(
    atoms: list[Atom],
    width: int,
    ellipsis: str,
    cache: LRUCache[str, int] | None,
) -> list[Atom]:
    if _width(atoms) <= width:
        return atoms

    ellipsis_width = visible_width(ellipsis, cache)
    fits_ellipsis = width >= ellipsis_width
    budget = width - ellipsis_width if fits_ellipsis else 0

    # Codes past the cut are kept so the style state (and any closing reset)
    # stays intact; they are zero wide.
    out: list[Atom] = []
    cols = 0
    cut = False
    for atom in atoms:
        if atom.is_code:
            out.append(atom)
            continue
        if cut:
            continue
        if cols + atom.width > budget:
            cut = True
            if fits_ellipsis:
                out.append(Atom(ellipsis, ellipsis_width, False))
            continue
        out.append(atom)
        cols += atom.width
    return out


# ---------------------------------------------------------------------------
# Word wrapping
# ---------------------------------------------------------------------------


def _split_words(atoms: list[Atom]) -> tuple[list[list[Atom]], list[Atom]]:
    """Group atoms into words; codes seen between words join the next word.

    Returns the words and any codes left over after the last glyph.
    """
    words: list[list[Atom]] = []
    current: list[Atom] | None = None
    pending: list[Atom] = []
    for atom in atoms:
        if atom.is_code:
            if current is not None:
                current.append(atom)
            else:
                pending.append(atom)
        elif atom.text.isspace():
            if current is not None:
                words.append(current)
                current = None
        else:
            if current is None:
                current, pending = pending, []
            current.append(atom)
    if current is not None:
        words.append(current)
    return words, pending


def _wrap_atoms(
    atoms: list[Atom],
    width: int,
    mark: str,
    cache: LRUCache[str, int] | None,
) -> list[list[Atom]]:
    words, trailing = _split_words(atoms)
    if not words:
        return [trailing]

    lines: list[list[Atom]] = []
    line: list[Atom] = []
    line_width = 0
    for word in words:
        word_width = _width(word)
        if line and line_width + 1 + word_width <= width:
            line.append(_SPACE)
            line.extend(word)
            line_width += 1 + word_width
            continue
        if line:
            lines.append(line)
        if word_width <= width:
            line, line_width = list(word), word_width
            continue
        chunks = _split_word(word, width, mark, cache)
        lines.extend(chunks[:-1])
        line = chunks[-1]
        line_width = _width(line)
    line.extend(trailing)
    lines.append(line)
    return lines


def _split_word(
    word: list[Atom],
    width: int,
    mark: str,
    cache: LRUCache[str, int] | None,
) -> list[list[Atom]]:
    """Hard-split one overlong word at the width boundary.

    With a *mark*, every chunk but the last ends with it, unless the chunk
    and the mark together would overflow the column.  A grapheme wider than
    the whole column is placed alone on its own chunk.
    """
    mark_width = visible_width(mark, cache) if mark else 0
    limit = width - mark_width
    if limit < 1:
        mark, mark_width, limit = "", 0, width

    chunks: list[list[Atom]] = []
    chunk: list[Atom] = []
    chunk_width = 0
    remaining = _width(word)
    for atom in word:
        if (
            not atom.is_code
            and chunk_width > 0
            and chunk_width + atom.width > limit
            and chunk_width + remaining > width
        ):
            if mark and chunk_width + mark_width <= width:
                chunk.append(Atom(mark, mark_width, False))
            chunks.append(chunk)
            chunk, chunk_width = [], 0
        chunk.append(atom)
        chunk_width += atom.width
        remaining -= atom.width
    chunks.append(chunk)
    return chunks
