"""Tests for frame composition.

Frames are built as plain row lists, so layout is checked without a terminal.
"""

from __future__ import annotations

import unittest
from unittest import mock

from lazystatus.ansi import display_width
from lazystatus.diff import DiffLine, DiffRole, render_diff
from lazystatus.git_repo import DiffRecord
from lazystatus.render import (
    HIGHLIGHT_SYMBOL,
    FrameContext,
    build_frame,
    build_help_line,
    clamp_left_width,
    list_scroll_start,
    render_frame,
)
from lazystatus.state import Focus
from lazystatus.status import CLEAN_PLACEHOLDER, Category, ChangeEntry, FileList
from lazystatus.ui_theme import DEFAULT_THEME, PLAIN_THEME

HELP_TEXT = "↑↓ / j k navigate • g/G first/last • Tab switch focus • q quit"


def _ctx(**overrides) -> FrameContext:
    values = dict(
        file_list=FileList(
            (
                ChangeEntry("a.txt", Category.MODIFIED),
                ChangeEntry("b.txt", Category.NEW),
            )
        ),
        selected_idx=0,
        focus=Focus.LIST,
        diff_lines=[],
        diff_start=0,
        width=80,
        height=10,
        theme=PLAIN_THEME,
    )
    values.update(overrides)
    return FrameContext(**values)


class LayoutHelperTests(unittest.TestCase):
    def test_clamp_left_width_keeps_both_panels_usable(self) -> None:
        self.assertEqual(clamp_left_width(80, 32), 32)
        self.assertEqual(clamp_left_width(80, 5), 20)
        self.assertEqual(clamp_left_width(80, 79), 68)

    def test_list_scroll_start_keeps_selection_visible(self) -> None:
        self.assertEqual(list_scroll_start(None, 5, 3), 0)
        self.assertEqual(list_scroll_start(0, 10, 3), 0)
        self.assertEqual(list_scroll_start(5, 10, 3), 3)
        self.assertEqual(list_scroll_start(9, 10, 3), 7)
        self.assertEqual(list_scroll_start(2, 3, 5), 0)


class BuildFrameTests(unittest.TestCase):
    def test_frame_fills_terminal_height_with_titled_panels(self) -> None:
        rows = build_frame(_ctx())

        self.assertEqual(len(rows), 10)
        self.assertTrue(rows[0].startswith("┌ Git Status ─"))
        self.assertIn("┌ Diff ─", rows[0])
        self.assertTrue(rows[8].startswith("└"))

    def test_panel_rows_span_full_width(self) -> None:
        for theme in (PLAIN_THEME, DEFAULT_THEME):
            for width in (30, 80, 123):
                with self.subTest(theme=theme.name, width=width):
                    rows = build_frame(_ctx(theme=theme, width=width, height=6))
                    for row in rows[:-1]:
                        self.assertEqual(display_width(row), width)

    def test_selected_row_has_highlight_symbol_and_label(self) -> None:
        rows = build_frame(_ctx(selected_idx=1))

        self.assertIn("│  Modified | a.txt", rows[1])
        self.assertIn(f"│{HIGHLIGHT_SYMBOL}New | b.txt", rows[2])
        self.assertEqual(sum(row.count(HIGHLIGHT_SYMBOL) for row in rows), 1)

    def test_list_scrolls_to_keep_selection_visible(self) -> None:
        files = FileList(tuple(ChangeEntry(f"f{idx:02d}.txt", Category.ADDED) for idx in range(20)))

        rows = build_frame(_ctx(file_list=files, selected_idx=15))

        body = rows[1:8]
        self.assertIn("f09.txt", body[0])
        self.assertIn(f"{HIGHLIGHT_SYMBOL}Added | f15.txt", body[-1])
        self.assertFalse(any("f08.txt" in row for row in rows))

    def test_diff_panel_starts_at_scroll_offset(self) -> None:
        lines = [DiffLine(f"+line{idx}", DiffRole.ADDED) for idx in range(10)]

        rows = build_frame(_ctx(diff_lines=lines, diff_start=3))

        self.assertIn("│+line3", rows[1])
        self.assertFalse(any("+line2" in row for row in rows))

    def test_scroll_past_end_shows_empty_diff_panel(self) -> None:
        lines = [DiffLine("+only", DiffRole.ADDED)]

        rows = build_frame(_ctx(diff_lines=lines, diff_start=50))

        self.assertEqual(len(rows), 10)
        self.assertFalse(any("+only" in row for row in rows))

    def test_clean_list_shows_placeholder_without_highlight(self) -> None:
        rows = build_frame(_ctx(file_list=FileList(), selected_idx=None))

        self.assertIn(CLEAN_PLACEHOLDER, rows[1])
        self.assertFalse(any(HIGHLIGHT_SYMBOL in row for row in rows))

    def test_focused_panel_uses_focus_border(self) -> None:
        list_rows = build_frame(_ctx(theme=DEFAULT_THEME, focus=Focus.LIST))
        diff_rows = build_frame(_ctx(theme=DEFAULT_THEME, focus=Focus.DIFF))

        self.assertTrue(list_rows[0].startswith(DEFAULT_THEME.border_focused + "┌"))
        self.assertTrue(diff_rows[0].startswith(DEFAULT_THEME.border + "┌"))
        self.assertIn(DEFAULT_THEME.border_focused + "┌", diff_rows[0])

    def test_selection_style_applies_with_color_theme(self) -> None:
        rows = build_frame(_ctx(theme=DEFAULT_THEME))

        self.assertIn(DEFAULT_THEME.list_selected, rows[1])
        self.assertNotIn(DEFAULT_THEME.list_selected, rows[2])
        self.assertIn(DEFAULT_THEME.color_for("yellow"), rows[1])

    def test_help_line_is_last_row(self) -> None:
        rows = build_frame(_ctx())
        self.assertEqual(rows[-1].strip(), HELP_TEXT)

    def test_carriage_returns_never_reach_frame_rows(self) -> None:
        repo = mock.Mock(**{"status_of.return_value": 0, "head_tree.return_value": "tree"})
        repo.diff.return_value = [DiffRecord("+", "progress 10%\rprogress 100%")]
        files = FileList((ChangeEntry("odd\rname.txt", Category.MODIFIED),))

        for theme in (PLAIN_THEME, DEFAULT_THEME):
            with self.subTest(theme=theme.name):
                lines = render_diff(repo, "odd\rname.txt", theme=theme)
                rows = build_frame(_ctx(file_list=files, diff_lines=lines, theme=theme))
                self.assertFalse(any("\r" in row for row in rows))
                self.assertTrue(any("progress 10%\\x0dprogress 100%" in row for row in rows))

    def test_styled_diff_lines_are_used(self) -> None:
        line = DiffLine("+x", DiffRole.ADDED, "\033[32m+x\033[0m")
        rows = build_frame(_ctx(theme=DEFAULT_THEME, diff_lines=[line]))
        self.assertIn("\033[32m+x\033[0m", rows[1])


class HelpLineTests(unittest.TestCase):
    def test_help_line_is_centered(self) -> None:
        line = build_help_line(101, PLAIN_THEME)
        pad = (100 - display_width(HELP_TEXT)) // 2
        self.assertEqual(line, " " * pad + HELP_TEXT)

    def test_help_line_is_clipped_on_narrow_terminals(self) -> None:
        line = build_help_line(20, PLAIN_THEME)
        self.assertEqual(display_width(line), 19)

    def test_help_keys_are_emphasized_with_color(self) -> None:
        line = build_help_line(100, DEFAULT_THEME)
        self.assertIn(f"{DEFAULT_THEME.help_key}Tab{DEFAULT_THEME.reset}", line)
        self.assertEqual(display_width(line.lstrip()), display_width(HELP_TEXT))


class RenderFrameTests(unittest.TestCase):
    def test_render_frame_writes_whole_frame_once(self) -> None:
        with mock.patch("lazystatus.render.os.write") as write_mock:
            render_frame(_ctx(), 7)

        write_mock.assert_called_once()
        fd, payload = write_mock.call_args.args
        self.assertEqual(fd, 7)
        self.assertTrue(payload.startswith(b"\x1b[H\x1b[J"))
        self.assertEqual(payload.count(b"\r\n"), 9)
        self.assertIn("Modified | a.txt".encode("utf-8"), payload)


if __name__ == "__main__":
    unittest.main()
