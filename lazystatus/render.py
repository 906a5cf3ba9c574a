"""Frame composition for the two-panel status browser.

``build_frame`` is a pure projection of session state into screen rows:
a bordered file list on the left, the diff on the right, and a help line.
``render_frame`` writes those rows to the terminal in one call.
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import zip_longest
import os

from .ansi import display_width, fit_ansi_line
from .diff import DiffLine
from .state import Focus
from .status import ChangeEntry, FileList
from .syntax import sanitize_terminal_text
from .ui_theme import UITheme

DEFAULT_LEFT_PANE_PERCENT = 40.0
LIST_TITLE = " Git Status "
DIFF_TITLE = " Diff "
HIGHLIGHT_SYMBOL = "➜ "
HIGHLIGHT_BLANK = "  "

# (text, emphasized) segments of the footer.
HELP_SEGMENTS: tuple[tuple[str, bool], ...] = (
    ("↑↓ / j k ", False),
    ("navigate", True),
    (" • ", False),
    ("g/G", True),
    (" first/last", False),
    (" • ", False),
    ("Tab", True),
    (" switch focus", False),
    (" • ", False),
    ("q", True),
    (" quit", False),
)


@dataclass(frozen=True)
class FrameContext:
    """Everything needed to draw one frame."""

    file_list: FileList
    selected_idx: int | None
    focus: Focus
    diff_lines: list[DiffLine]
    diff_start: int
    width: int
    height: int
    theme: UITheme
    left_percent: float = DEFAULT_LEFT_PANE_PERCENT


def clamp_left_width(total_width: int, desired_left: int) -> int:
    max_possible = max(1, total_width - 2)
    min_left = max(12, min(20, total_width - 12))
    max_left = max(min_left, total_width - 12)
    max_left = min(max_left, max_possible)
    min_left = min(min_left, max_left)
    return max(min_left, min(desired_left, max_left))


def list_scroll_start(selected_idx: int | None, row_count: int, visible_rows: int) -> int:
    """First visible list row such that the selection stays in view."""
    if selected_idx is None or visible_rows <= 0:
        return 0
    start = max(0, selected_idx - visible_rows + 1)
    return min(start, max(0, row_count - visible_rows))


def selected_with_style(text: str, theme: UITheme) -> str:
    """Apply selection styling without discarding existing ANSI colors."""
    if not theme.list_selected:
        return text
    return theme.list_selected + text.replace(theme.reset, theme.reset + theme.list_selected) + theme.reset


def format_entry(entry: ChangeEntry, theme: UITheme) -> str:
    path = sanitize_terminal_text(entry.path)
    color = theme.color_for(entry.color)
    if not theme.colorized:
        return f"{entry.label} | {path}"
    return f"{color}{theme.list_label}{entry.label}{theme.reset} | {path}"


def _box(title: str, body: list[str], width: int, height: int, border: str, theme: UITheme) -> list[str]:
    if width <= 0 or height <= 0:
        return []
    if width < 2 or height < 2:
        return [" " * width for _ in range(height)]

    inner_w = width - 2
    inner_h = height - 2
    reset = theme.reset
    title_text = fit_ansi_line(title, min(inner_w, display_width(title)), reset)
    rule = "─" * max(0, inner_w - display_width(title_text))
    top = f"{border}┌{reset}{theme.panel_title}{title_text}{reset}{border}{rule}┐{reset}"
    rows = [top]
    for idx in range(inner_h):
        text = body[idx] if idx < len(body) else ""
        rows.append(f"{border}│{reset}{fit_ansi_line(text, inner_w, reset)}{border}│{reset}")
    rows.append(f"{border}└{'─' * inner_w}┘{reset}")
    return rows


def _list_body(ctx: FrameContext, inner_w: int, inner_h: int) -> list[str]:
    theme = ctx.theme
    if ctx.file_list.is_clean:
        return [fit_ansi_line(HIGHLIGHT_BLANK + row, inner_w, theme.reset) for row in ctx.file_list.display_rows()]

    entries = ctx.file_list.entries
    start = list_scroll_start(ctx.selected_idx, len(entries), inner_h)
    body: list[str] = []
    for idx in range(start, min(len(entries), start + inner_h)):
        selected = idx == ctx.selected_idx
        gutter = HIGHLIGHT_SYMBOL if selected else HIGHLIGHT_BLANK
        row = fit_ansi_line(gutter + format_entry(entries[idx], theme), inner_w, theme.reset)
        body.append(selected_with_style(row, theme) if selected else row)
    return body


def _diff_body(ctx: FrameContext, inner_h: int) -> list[str]:
    start = max(0, ctx.diff_start)
    return [line.styled for line in ctx.diff_lines[start:start + inner_h]]


def build_help_line(width: int, theme: UITheme) -> str:
    usable = max(1, width - 1)
    plain = "".join(text for text, _emphasized in HELP_SEGMENTS)
    plain_width = display_width(plain)
    if plain_width > usable:
        return fit_ansi_line(plain, usable, theme.reset)
    pad = (usable - plain_width) // 2
    if not theme.colorized:
        return " " * pad + plain
    parts = [theme.help_line]
    for text, emphasized in HELP_SEGMENTS:
        if emphasized:
            parts.append(f"{theme.help_key}{text}{theme.reset}{theme.help_line}")
        else:
            parts.append(text)
    parts.append(theme.reset)
    return " " * pad + "".join(parts)


def build_frame(ctx: FrameContext) -> list[str]:
    """Project ``ctx`` into ``ctx.height`` screen rows without touching state."""
    width = max(1, ctx.width)
    height = max(1, ctx.height)
    panel_h = height - 1
    theme = ctx.theme

    left_w = clamp_left_width(width, int(width * ctx.left_percent / 100.0))
    right_w = max(0, width - left_w)
    inner_h = max(0, panel_h - 2)

    left_border = theme.border_focused if ctx.focus is Focus.LIST else theme.border
    right_border = theme.border_focused if ctx.focus is Focus.DIFF else theme.border
    left_rows = _box(LIST_TITLE, _list_body(ctx, max(0, left_w - 2), inner_h), left_w, panel_h, left_border, theme)
    right_rows = _box(DIFF_TITLE, _diff_body(ctx, inner_h), right_w, panel_h, right_border, theme)

    rows = [left + right for left, right in zip_longest(left_rows, right_rows, fillvalue="")]
    rows.append(build_help_line(width, theme))
    return rows


def render_frame(ctx: FrameContext, fd: int) -> None:
    out = "\033[H\033[J" + "\r\n".join(build_frame(ctx))
    os.write(fd, out.encode("utf-8", errors="replace"))
