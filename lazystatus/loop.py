"""Main interactive event loop for the status browser.

Each iteration recomputes the diff if the selection moved, draws one frame,
then blocks for a single key press and applies it.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import logging

from .diff import DiffLine
from .keys import handle_key
from .state import SessionState
from .status import FileList
from .terminal import TerminalController

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoopCallbacks:
    """Injected operations used by ``run_main_loop``.

    ``compute_diff`` touches git and ``read_key`` touches the tty; the loop
    itself only sees their results.
    """

    compute_diff: Callable[[str], list[DiffLine]]
    draw: Callable[[SessionState, FileList], None]
    read_key: Callable[[], str]


def refresh_diff(
    state: SessionState,
    file_list: FileList,
    compute_diff: Callable[[str], list[DiffLine]],
) -> bool:
    """Recompute the cached diff when the selection changed since last time.

    Returns whether a computation happened. A selection without a path
    (the clean placeholder) never triggers one.
    """
    if state.selected_idx is None or state.selected_idx == state.diff_idx:
        return False
    paths = file_list.paths
    if state.selected_idx >= len(paths):
        return False
    state.diff_lines = compute_diff(paths[state.selected_idx])
    state.diff_start = 0
    state.diff_idx = state.selected_idx
    return True


def run_main_loop(
    state: SessionState,
    file_list: FileList,
    terminal: TerminalController,
    callbacks: LoopCallbacks,
) -> None:
    """Run the session until a quit key arrives or input reaches EOF.

    The terminal is restored on every exit path, including exceptions.
    """
    with terminal.raw_mode():
        while True:
            refresh_diff(state, file_list, callbacks.compute_diff)
            callbacks.draw(state, file_list)

            key = callbacks.read_key()
            if not key:
                logger.debug("input closed; leaving session")
                return
            if handle_key(key, state, file_list):
                logger.debug("quit key %r", key)
                return
