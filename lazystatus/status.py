"""Working-tree change collection and display classification.

Turns raw status flags into the ordered file list shown in the left panel.
Classification is first-match-wins; unmatched entries are left out entirely.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging

from .git_repo import (
    STATUS_INDEX_MODIFIED,
    STATUS_INDEX_NEW,
    STATUS_INDEX_TYPECHANGE,
    STATUS_WT_MODIFIED,
    STATUS_WT_NEW,
    STATUS_WT_RENAMED,
    STATUS_WT_TYPECHANGE,
    GitRepository,
)

logger = logging.getLogger(__name__)

CLEAN_PLACEHOLDER = "Working tree clean"


class Category(str, Enum):
    NEW = "New"
    MODIFIED = "Modified"
    TYPE_CHANGE = "TypeChange"
    ADDED = "Added"


CATEGORY_COLORS: dict[Category, str] = {
    Category.NEW: "red",
    Category.MODIFIED: "yellow",
    Category.TYPE_CHANGE: "orange",
    Category.ADDED: "green",
}

_TYPECHANGE_FLAGS = STATUS_WT_TYPECHANGE | STATUS_INDEX_TYPECHANGE
_ADDED_FLAGS = STATUS_INDEX_NEW | STATUS_WT_RENAMED | STATUS_INDEX_MODIFIED


@dataclass(frozen=True)
class ChangeEntry:
    path: str
    category: Category

    @property
    def color(self) -> str:
        return CATEGORY_COLORS[self.category]

    @property
    def label(self) -> str:
        return self.category.value


@dataclass(frozen=True)
class FileList:
    """Ordered change entries paired 1:1 with the paths used for diff lookups.

    An empty list still renders one placeholder row, which is never selectable.
    """

    entries: tuple[ChangeEntry, ...] = ()

    @property
    def paths(self) -> tuple[str, ...]:
        return tuple(entry.path for entry in self.entries)

    @property
    def is_clean(self) -> bool:
        return not self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def display_rows(self) -> list[ChangeEntry | str]:
        if self.is_clean:
            return [CLEAN_PLACEHOLDER]
        return list(self.entries)


def classify(flags: int) -> Category | None:
    """Map status flags to a display category, or ``None`` to skip the entry."""
    if flags & STATUS_WT_NEW:
        return Category.NEW
    if flags & STATUS_WT_MODIFIED:
        return Category.MODIFIED
    if flags & _TYPECHANGE_FLAGS:
        return Category.TYPE_CHANGE
    if flags & _ADDED_FLAGS:
        return Category.ADDED
    return None


def collect(repo: GitRepository) -> FileList:
    """Enumerate working-tree changes into a ``FileList``.

    Propagates ``RepositoryAccessError`` when the enumeration itself fails.
    """
    entries: list[ChangeEntry] = []
    for record in repo.enumerate_changes():
        if not record.path:
            continue
        category = classify(record.flags)
        if category is None:
            logger.debug("skipping %s (flags=%#x)", record.path, record.flags)
            continue
        entries.append(ChangeEntry(path=record.path, category=category))
    logger.debug("collected %d changed paths", len(entries))
    return FileList(entries=tuple(entries))
