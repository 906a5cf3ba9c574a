"""UI theme definitions and selection helpers.

Themes are UI-only ANSI palettes (panels, list, diff roles, help line).
Syntax highlighting style for file content remains a separate setting.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    reset: str
    border: str
    border_focused: str
    panel_title: str
    list_selected: str
    list_label: str
    help_line: str
    help_key: str
    diff_header: str
    diff_added: str
    diff_removed: str
    diff_added_bg: str
    diff_removed_bg: str
    category_colors: dict[str, str]

    @property
    def colorized(self) -> bool:
        return bool(self.reset)

    def color_for(self, color_name: str) -> str:
        return self.category_colors.get(color_name, "")


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    border="\033[38;5;250m",
    border_focused="\033[33m",
    panel_title="\033[1m",
    list_selected="\033[1;48;5;238m",
    list_label="\033[1m",
    help_line="\033[2m",
    help_key="\033[1m",
    diff_header="\033[34m",
    diff_added="\033[32m",
    diff_removed="\033[31m",
    diff_added_bg="48;2;36;74;52",
    diff_removed_bg="48;2;92;43;49",
    category_colors={
        "red": "\033[31m",
        "yellow": "\033[33m",
        "orange": "\033[38;5;208m",
        "green": "\033[32m",
    },
)

OCEAN_THEME = UITheme(
    name="ocean",
    reset="\033[0m",
    border="\033[2;38;5;31m",
    border_focused="\033[38;5;45m",
    panel_title="\033[1;38;5;45m",
    list_selected="\033[1;48;5;24m",
    list_label="\033[1m",
    help_line="\033[2;38;5;110m",
    help_key="\033[1;38;5;153m",
    diff_header="\033[38;5;39m",
    diff_added="\033[38;5;84m",
    diff_removed="\033[38;5;203m",
    diff_added_bg="48;5;22",
    diff_removed_bg="48;5;52",
    category_colors={
        "red": "\033[38;5;203m",
        "yellow": "\033[38;5;221m",
        "orange": "\033[38;5;215m",
        "green": "\033[38;5;84m",
    },
)

PLAIN_THEME = UITheme(
    name="plain",
    reset="",
    border="",
    border_focused="",
    panel_title="",
    list_selected="",
    list_label="",
    help_line="",
    help_key="",
    diff_header="",
    diff_added="",
    diff_removed="",
    diff_added_bg="",
    diff_removed_bg="",
    category_colors={},
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name

def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]

__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "normalize_theme_name",
    "resolve_theme",
]
