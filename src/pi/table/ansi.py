"""ANSI escape handling: sequence extraction and SGR state tracking.

Cells may carry colour codes.  When a cell is split over several physical
lines every line has to stand on its own, so the wrapper keeps an
:class:`AnsiCodeTracker` running over the whole cell and uses it to re-open
the active styles at the start of a line and to reset them at its end.
"""

from __future__ import annotations

RESET = "\x1b[0m"

_CSI_FINALS = "mGKHJ"


def extract_ansi_code(text: str, pos: int) -> tuple[str, int] | None:
    """Return ``(code, length)`` for the escape sequence at *pos*, or ``None``.

    Recognises CSI (``ESC[`` ... final byte), OSC (``ESC]`` ... BEL/ST) and
    APC (``ESC_`` ... BEL/ST) sequences.
    """
    if pos + 1 >= len(text) or text[pos] != "\x1b":
        return None

    kind = text[pos + 1]
    if kind == "[":
        i = pos + 2
        while i < len(text):
            ch = text[i]
            if ch in _CSI_FINALS:
                return text[pos : i + 1], i + 1 - pos
            if not (ch.isdigit() or ch == ";"):
                return None
            i += 1
        return None

    if kind in "]_":
        i = pos + 2
        while i < len(text):
            ch = text[i]
            if ch == "\x07":
                return text[pos : i + 1], i + 1 - pos
            if ch == "\x1b" and i + 1 < len(text) and text[i + 1] == "\\":
                return text[pos : i + 2], i + 2 - pos
            i += 1
    return None


# SGR parameter -> (attribute slot, code to store or None to clear)
_ATTRIBUTE_ON = {
    1: "bold",
    2: "dim",
    3: "italic",
    4: "underline",
    5: "blink",
    7: "inverse",
    8: "hidden",
    9: "strikethrough",
}
_ATTRIBUTE_OFF = {
    22: ("bold", "dim"),
    23: ("italic",),
    24: ("underline",),
    25: ("blink",),
    27: ("inverse",),
    28: ("hidden",),
    29: ("strikethrough",),
    39: ("fg",),
    49: ("bg",),
}
_SLOTS = (*_ATTRIBUTE_ON.values(), "fg", "bg")


class AnsiCodeTracker:
    """Track which SGR attributes are active after a run of escape codes."""

    def __init__(self) -> None:
        self._active: dict[str, str] = {}

    def process(self, code: str) -> None:
        """Update the tracked state from one escape sequence.

        Only SGR sequences (``ESC[...m``) affect the state; anything else is
        ignored.
        """
        if not code.startswith("\x1b[") or not code.endswith("m"):
            return
        body = code[2:-1]
        if not body:
            self.clear()
            return

        params = body.split(";")
        i = 0
        while i < len(params):
            val = int(params[i]) if params[i] else 0
            if val == 0:
                self.clear()
            elif val in _ATTRIBUTE_ON:
                self._active[_ATTRIBUTE_ON[val]] = f"\x1b[{val}m"
            elif val in _ATTRIBUTE_OFF:
                for slot in _ATTRIBUTE_OFF[val]:
                    self._active.pop(slot, None)
            elif 30 <= val <= 37 or 90 <= val <= 97:
                self._active["fg"] = f"\x1b[{val}m"
            elif 40 <= val <= 47 or 100 <= val <= 107:
                self._active["bg"] = f"\x1b[{val}m"
            elif val in (38, 48):
                i = self._extended_colour(params, i, "fg" if val == 38 else "bg")
            i += 1

    def _extended_colour(self, params: list[str], i: int, slot: str) -> int:
        # 38;5;N / 48;5;N (256 colours) and 38;2;R;G;B / 48;2;R;G;B (truecolour)
        if i + 1 >= len(params):
            return i
        lead = params[i]
        mode = int(params[i + 1]) if params[i + 1] else 0
        if mode == 5 and i + 2 < len(params):
            self._active[slot] = f"\x1b[{lead};5;{params[i + 2]}m"
            return i + 2
        if mode == 2 and i + 4 < len(params):
            rgb = ";".join(params[i + 2 : i + 5])
            self._active[slot] = f"\x1b[{lead};2;{rgb}m"
            return i + 4
        return i + 1

    def clear(self) -> None:
        self._active.clear()

    def has_active_codes(self) -> bool:
        return bool(self._active)

    def get_active_codes(self) -> str:
        """Codes that re-establish the current state, in a stable order."""
        return "".join(self._active[slot] for slot in _SLOTS if slot in self._active)

    def get_line_end_reset(self) -> str:
        return RESET if self._active else ""
