"""Per-path diff rendering for the diff panel.

Untracked files are dumped whole as additions; everything else is a unified
diff of the head tree (or the empty tree) against the working tree.
Failures never escape: they become a single ``Error: ...`` line.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
import re

from .git_repo import (
    ORIGIN_ADDITION,
    ORIGIN_CONTEXT,
    ORIGIN_DELETION,
    ORIGIN_FILE_HEADER,
    STATUS_WT_NEW,
    DiffRecord,
    GitRepository,
    RepositoryAccessError,
)
from .syntax import DEFAULT_STYLE, colorize_lines, sanitize_terminal_text
from .ui_theme import PLAIN_THEME, UITheme

logger = logging.getLogger(__name__)

NO_CHANGES_TEXT = "No changes"

_SGR_RE = re.compile(r"\x1b\[([0-9;]*)m")


class DiffRole(str, Enum):
    ADDED = "added"
    REMOVED = "removed"
    HEADER = "header"
    PLAIN = "plain"


@dataclass(frozen=True)
class DiffLine:
    """One diff panel line: plain ``text``, semantic ``role``, ANSI ``styled`` form."""

    text: str
    role: DiffRole
    styled: str = ""

    def __post_init__(self) -> None:
        if not self.styled:
            object.__setattr__(self, "styled", self.text)


_ROLE_FOR_ORIGIN = {
    ORIGIN_ADDITION: DiffRole.ADDED,
    ORIGIN_DELETION: DiffRole.REMOVED,
    ORIGIN_FILE_HEADER: DiffRole.HEADER,
}


def role_for_origin(origin: str) -> DiffRole:
    return _ROLE_FOR_ORIGIN.get(origin, DiffRole.PLAIN)


def _split_content_lines(content: str) -> list[str]:
    """Split on ``\\n`` dropping one trailing ``\\r``; no empty line after a final newline."""
    if not content:
        return []
    parts = content.split("\n")
    if parts[-1] == "":
        parts.pop()
    return [part[:-1] if part.endswith("\r") else part for part in parts]


def _apply_line_background(code_line: str, bg_sgr: str) -> str:
    """Keep ``bg_sgr`` active across every SGR reset inside ``code_line``."""

    def _inject_bg(match: re.Match[str]) -> str:
        params = match.group(1)
        if params:
            return f"\033[{params};{bg_sgr}m"
        return f"\033[{bg_sgr}m"

    return f"\033[{bg_sgr}m{_SGR_RE.sub(_inject_bg, code_line)}\033[0m"


def _style_changed_line(marker: str, code_line: str, role: DiffRole, theme: UITheme) -> str:
    if role is DiffRole.ADDED:
        fg, bg = theme.diff_added, theme.diff_added_bg
    else:
        fg, bg = theme.diff_removed, theme.diff_removed_bg
    styled_marker = f"{fg}{marker}{theme.reset}"
    if bg:
        return _apply_line_background(styled_marker + code_line, bg)
    return styled_marker + code_line


def _style_lines(
    entries: list[tuple[str, str, DiffRole]],
    path: str,
    theme: UITheme,
    style: str,
) -> list[DiffLine]:
    """Build ``DiffLine`` objects from ``(marker, body, role)`` triples.

    Changed and context bodies are highlighted together so the lexer sees
    contiguous code.
    """
    if not theme.colorized:
        return [DiffLine(f"{marker}{body}", role) for marker, body, role in entries]

    code_indices = [idx for idx, (marker, _body, role) in enumerate(entries) if marker and role is not DiffRole.HEADER]
    highlighted = colorize_lines([entries[idx][1] for idx in code_indices], path, style)
    code_display = dict(zip(code_indices, highlighted))

    out: list[DiffLine] = []
    for idx, (marker, body, role) in enumerate(entries):
        text = f"{marker}{body}"
        if role is DiffRole.HEADER:
            styled = f"{theme.diff_header}{text}{theme.reset}"
        elif role in {DiffRole.ADDED, DiffRole.REMOVED}:
            styled = _style_changed_line(marker, code_display.get(idx, body), role, theme)
        elif idx in code_display:
            styled = f"{marker}{code_display[idx]}{theme.reset}"
        else:
            styled = text
        out.append(DiffLine(text, role, styled))
    return out


def _new_file_lines(repo: GitRepository, path: str) -> list[tuple[str, str, DiffRole]]:
    raw = (repo.root / path).read_bytes()
    content = raw.decode("utf-8")
    entries: list[tuple[str, str, DiffRole]] = [("", f"New file: {sanitize_terminal_text(path)}", DiffRole.HEADER)]
    for line in _split_content_lines(content):
        entries.append(("+", sanitize_terminal_text(line), DiffRole.ADDED))
    return entries


def _record_entry(record: DiffRecord) -> tuple[str, str, DiffRole]:
    role = role_for_origin(record.origin)
    content = sanitize_terminal_text(record.content)
    if record.origin in {ORIGIN_ADDITION, ORIGIN_DELETION, ORIGIN_CONTEXT}:
        return record.origin, content, role
    return "", content, role


def _unified_diff_lines(repo: GitRepository, path: str) -> list[tuple[str, str, DiffRole]]:
    tree = repo.head_tree()
    return [_record_entry(record) for record in repo.diff(tree, path)]


def render_diff(
    repo: GitRepository,
    path: str,
    *,
    theme: UITheme = PLAIN_THEME,
    style: str = DEFAULT_STYLE,
) -> list[DiffLine]:
    """Return a fresh list of diff lines for ``path``; never raises for git or I/O failures."""
    try:
        if repo.status_of(path) & STATUS_WT_NEW:
            entries = _new_file_lines(repo, path)
        else:
            entries = _unified_diff_lines(repo, path)
    except UnicodeDecodeError as exc:
        logger.debug("diff for %s: not UTF-8: %s", path, exc)
        return [DiffLine(f"Error: {path} is not valid UTF-8 text", DiffRole.PLAIN)]
    except (RepositoryAccessError, OSError) as exc:
        logger.debug("diff for %s failed: %s", path, exc)
        return [DiffLine(f"Error: {exc}", DiffRole.PLAIN)]

    if not entries:
        return [DiffLine(NO_CHANGES_TEXT, DiffRole.PLAIN)]

    lines = _style_lines(entries, path, theme, style)
    logger.debug("diff for %s: %d lines", path, len(lines))
    return lines
