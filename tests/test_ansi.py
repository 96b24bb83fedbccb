"""Tests for pi.table.ansi -- escape extraction and SGR tracking."""

from __future__ import annotations

from pi.table.ansi import RESET, AnsiCodeTracker, extract_ansi_code


class TestExtractAnsiCode:
    """Recognising escape sequences at a position."""

    def test_sgr_sequence(self) -> None:
        assert extract_ansi_code("\x1b[1;31mx", 0) == ("\x1b[1;31m", 7)

    def test_osc_terminated_by_bel(self) -> None:
        text = "\x1b]8;;url\x07rest"
        assert extract_ansi_code(text, 0) == ("\x1b]8;;url\x07", 9)

    def test_apc_terminated_by_st(self) -> None:
        text = "\x1b_data\x1b\\rest"
        assert extract_ansi_code(text, 0) == ("\x1b_data\x1b\\", 8)

    def test_plain_text_is_not_a_code(self) -> None:
        assert extract_ansi_code("abc", 0) is None

    def test_unterminated_csi(self) -> None:
        assert extract_ansi_code("\x1b[12", 0) is None


class TestAnsiCodeTracker:
    """SGR state carried across wrapped lines."""

    def test_tracks_attributes_in_stable_order(self) -> None:
        tracker = AnsiCodeTracker()
        tracker.process("\x1b[31m")
        tracker.process("\x1b[1m")
        assert tracker.get_active_codes() == "\x1b[1m\x1b[31m"

    def test_combined_parameters(self) -> None:
        tracker = AnsiCodeTracker()
        tracker.process("\x1b[4;44m")
        assert tracker.get_active_codes() == "\x1b[4m\x1b[44m"

    def test_attribute_off_codes(self) -> None:
        tracker = AnsiCodeTracker()
        tracker.process("\x1b[1;2;3m")
        tracker.process("\x1b[22m")
        assert tracker.get_active_codes() == "\x1b[3m"

    def test_extended_colours(self) -> None:
        tracker = AnsiCodeTracker()
        tracker.process("\x1b[38;5;196m")
        tracker.process("\x1b[48;2;1;2;3m")
        assert tracker.get_active_codes() == "\x1b[38;5;196m\x1b[48;2;1;2;3m"

    def test_reset_clears_everything(self) -> None:
        tracker = AnsiCodeTracker()
        tracker.process("\x1b[1;31m")
        tracker.process("\x1b[0m")
        assert not tracker.has_active_codes()
        assert tracker.get_line_end_reset() == ""

    def test_line_end_reset_when_active(self) -> None:
        tracker = AnsiCodeTracker()
        tracker.process("\x1b[32m")
        assert tracker.get_line_end_reset() == RESET

    def test_non_sgr_codes_are_ignored(self) -> None:
        tracker = AnsiCodeTracker()
        tracker.process("\x1b[2K")
        assert not tracker.has_active_codes()
