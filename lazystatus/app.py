"""Session bootstrap: collect changes, prepare the terminal, run the loop."""

from __future__ import annotations

from functools import partial
import logging
import os
import shutil
import sys
import termios

from .config import load_left_pane_percent, load_no_color, load_syntax_style, load_theme_name
from .diff import render_diff
from .git_repo import GitRepository
from .input import read_key
from .loop import LoopCallbacks, run_main_loop
from .render import DEFAULT_LEFT_PANE_PERCENT, FrameContext, render_frame
from .state import SessionState, initial_state
from .status import FileList, collect
from .syntax import normalize_style
from .terminal import TerminalController
from .ui_theme import resolve_theme

logger = logging.getLogger(__name__)


class TerminalUnavailableError(Exception):
    """Raised when stdin/stdout cannot host an interactive session."""


def run_status_browser(repo: GitRepository) -> None:
    """Run the interactive status browser for ``repo`` until the user quits.

    Change collection and terminal setup happen before the screen is touched,
    so their failures (``RepositoryAccessError``, ``TerminalUnavailableError``)
    leave no partial UI behind.
    """
    file_list = collect(repo)

    stdin_fd = sys.stdin.fileno()
    stdout_fd = sys.stdout.fileno()
    if not (os.isatty(stdin_fd) and os.isatty(stdout_fd)):
        raise TerminalUnavailableError("stdin and stdout must be a terminal")
    try:
        terminal = TerminalController(stdin_fd, stdout_fd)
    except (OSError, termios.error) as exc:
        raise TerminalUnavailableError(f"cannot configure terminal: {exc}") from exc

    theme = resolve_theme(load_theme_name(), no_color=load_no_color())
    style = normalize_style(load_syntax_style())
    left_percent = load_left_pane_percent() or DEFAULT_LEFT_PANE_PERCENT

    def draw(state: SessionState, files: FileList) -> None:
        term = shutil.get_terminal_size((80, 24))
        render_frame(
            FrameContext(
                file_list=files,
                selected_idx=state.selected_idx,
                focus=state.focus,
                diff_lines=state.diff_lines,
                diff_start=state.diff_start,
                width=term.columns,
                height=term.lines,
                theme=theme,
                left_percent=left_percent,
            ),
            stdout_fd,
        )

    callbacks = LoopCallbacks(
        compute_diff=partial(render_diff, repo, theme=theme, style=style),
        draw=draw,
        read_key=partial(read_key, stdin_fd),
    )
    logger.debug("session start: %d entries in %s", len(file_list), repo.root)
    run_main_loop(initial_state(file_list), file_list, terminal, callbacks)
    logger.debug("session end")
