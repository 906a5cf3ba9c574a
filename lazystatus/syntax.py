"""Content sanitization and Pygments syntax highlighting for diff lines.

Also neutralizes terminal control bytes so file content cannot drive the tty.
"""

from __future__ import annotations

import re

from pygments import highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

DEFAULT_STYLE = "monokai"

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b-\x1f\x7f-\x9f]")
_FORMATTERS: dict[str, Terminal256Formatter] = {}


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\t"}:
            out.append(ch)
            continue
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


def normalize_style(style: str | None) -> str:
    if not style:
        return DEFAULT_STYLE
    try:
        get_style_by_name(style)
    except ClassNotFound:
        return DEFAULT_STYLE
    return style


def _formatter_for_style(style: str) -> Terminal256Formatter:
    formatter = _FORMATTERS.get(style)
    if formatter is None:
        formatter = Terminal256Formatter(style=style)
        _FORMATTERS[style] = formatter
    return formatter


def _lexer_for_path(path: str, sample: str):
    name = path.rsplit("/", 1)[-1]
    try:
        return get_lexer_for_filename(name, sample, stripnl=False, ensurenl=False)
    except ClassNotFound:
        return TextLexer(stripnl=False, ensurenl=False)


def colorize_lines(lines: list[str], path: str, style: str = DEFAULT_STYLE) -> list[str]:
    """Highlight ``lines`` as one block of ``path``'s language.

    Returns the input unchanged when highlighting changes the line count.
    """
    if not lines:
        return lines
    source = "\n".join(lines)
    lexer = _lexer_for_path(path, source)
    rendered = highlight(source, lexer, _formatter_for_style(normalize_style(style)))
    rendered_lines = rendered.split("\n")
    if rendered_lines and rendered_lines[-1] == "" and len(rendered_lines) == len(lines) + 1:
        rendered_lines.pop()
    if len(rendered_lines) != len(lines):
        return lines
    return rendered_lines
