"""Key-to-transition mapping for the session loop.

Each key token mutates ``SessionState`` in place; the return value tells the
loop whether to quit. Keys without a binding are ignored.
"""

from __future__ import annotations

from .state import Focus, SessionState
from .status import FileList

QUIT_KEYS = frozenset({"q", "ESC", "CTRL_C"})
UP_KEYS = frozenset({"UP", "k"})
DOWN_KEYS = frozenset({"DOWN", "j"})
FIRST_KEYS = frozenset({"HOME", "g"})
LAST_KEYS = frozenset({"END", "G"})


def _select(state: SessionState, file_list: FileList, idx: int) -> None:
    if state.selected_idx is None or not len(file_list):
        return
    state.selected_idx = max(0, min(idx, len(file_list) - 1))


def handle_key(key: str, state: SessionState, file_list: FileList) -> bool:
    """Apply one key press to ``state``; return ``True`` when the session should end."""
    if key in QUIT_KEYS:
        return True

    if key == "TAB":
        state.focus = Focus.DIFF if state.focus is Focus.LIST else Focus.LIST
    elif key in UP_KEYS:
        if state.focus is Focus.LIST:
            if state.selected_idx is not None:
                _select(state, file_list, state.selected_idx - 1)
        else:
            state.diff_start = max(0, state.diff_start - 1)
    elif key in DOWN_KEYS:
        if state.focus is Focus.LIST:
            if state.selected_idx is not None:
                _select(state, file_list, state.selected_idx + 1)
        else:
            state.diff_start += 1
    elif key in FIRST_KEYS:
        _select(state, file_list, 0)
    elif key in LAST_KEYS:
        _select(state, file_list, len(file_list) - 1)
    return False
