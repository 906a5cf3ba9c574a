from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .diff import DiffLine
from .status import FileList


class Focus(str, Enum):
    LIST = "list"
    DIFF = "diff"


@dataclass
class SessionState:
    """Mutable UI state owned by the session loop.

    ``diff_lines`` and ``diff_idx`` are a memo pair: the diff is recomputed
    only when ``selected_idx`` differs from ``diff_idx``.
    """

    selected_idx: int | None
    focus: Focus = Focus.LIST
    diff_start: int = 0
    diff_lines: list[DiffLine] = field(default_factory=list)
    diff_idx: int | None = None


def initial_state(file_list: FileList) -> SessionState:
    return SessionState(selected_idx=None if file_list.is_clean else 0)
