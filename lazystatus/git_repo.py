"""Read-only access to a git working tree through the ``git`` executable.

Enumerates changed paths with status flags, queries the status of a single
path, and streams a path's unified diff as origin-tagged records.
Every failure surfaces as ``RepositoryAccessError``; nothing is retried.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
import subprocess

logger = logging.getLogger(__name__)

GIT_TIMEOUT_SECONDS = 15.0

STATUS_CURRENT = 0
STATUS_INDEX_NEW = 1 << 0
STATUS_INDEX_MODIFIED = 1 << 1
STATUS_INDEX_DELETED = 1 << 2
STATUS_INDEX_RENAMED = 1 << 3
STATUS_INDEX_TYPECHANGE = 1 << 4
STATUS_WT_NEW = 1 << 7
STATUS_WT_MODIFIED = 1 << 8
STATUS_WT_DELETED = 1 << 9
STATUS_WT_TYPECHANGE = 1 << 10
STATUS_WT_RENAMED = 1 << 11
STATUS_IGNORED = 1 << 14
STATUS_CONFLICTED = 1 << 15

_INDEX_FLAGS = {
    "M": STATUS_INDEX_MODIFIED,
    "A": STATUS_INDEX_NEW,
    "C": STATUS_INDEX_NEW,
    "D": STATUS_INDEX_DELETED,
    "R": STATUS_INDEX_RENAMED,
    "T": STATUS_INDEX_TYPECHANGE,
    "U": STATUS_CONFLICTED,
}
_WORKTREE_FLAGS = {
    "M": STATUS_WT_MODIFIED,
    "A": STATUS_WT_NEW,
    "D": STATUS_WT_DELETED,
    "R": STATUS_WT_RENAMED,
    "T": STATUS_WT_TYPECHANGE,
    "U": STATUS_CONFLICTED,
}

ORIGIN_FILE_HEADER = "F"
ORIGIN_HUNK_HEADER = "H"
ORIGIN_ADDITION = "+"
ORIGIN_DELETION = "-"
ORIGIN_CONTEXT = " "
ORIGIN_EOF_NOTE = "\\"


class RepositoryAccessError(Exception):
    """Raised when git cannot be run or reports a failure."""


class RepositoryNotFoundError(RepositoryAccessError):
    """Raised when no repository encloses the starting directory."""


@dataclass(frozen=True)
class StatusRecord:
    path: str
    flags: int


@dataclass(frozen=True)
class DiffRecord:
    """One emitted diff line: origin marker plus content without the marker."""

    origin: str
    content: str


def status_flags_for_code(code: str) -> int:
    """Translate a porcelain ``XY`` status code into status flag bits."""
    if code == "??":
        return STATUS_WT_NEW
    if code == "!!":
        return STATUS_IGNORED
    index_code, worktree_code = (code + "  ")[:2]
    return _INDEX_FLAGS.get(index_code, 0) | _WORKTREE_FLAGS.get(worktree_code, 0)


def parse_porcelain_z(output: str) -> list[StatusRecord]:
    """Parse ``git status --porcelain=v1 -z`` output preserving git's order."""
    records: list[StatusRecord] = []
    tokens = output.split("\0")
    index = 0
    while index < len(tokens):
        token = tokens[index]
        index += 1
        if not token:
            continue
        if len(token) < 4 or token[2] != " ":
            continue

        code = token[:2]
        records.append(StatusRecord(path=token[3:], flags=status_flags_for_code(code)))

        # Renamed/copied entries carry the source path as an extra token.
        if "R" in code or "C" in code:
            index += 1

    return records


def parse_patch(patch_text: str) -> list[DiffRecord]:
    """Split unified patch text into origin-tagged records in emission order.

    Only ``\\n`` ends a line; other separators belong to the content. A
    trailing ``\\r`` (CRLF files) is dropped.
    """
    records: list[DiffRecord] = []
    in_hunk = False
    lines = patch_text.split("\n")
    if lines[-1] == "":
        lines.pop()
    for raw_line in lines:
        if raw_line.endswith("\r"):
            raw_line = raw_line[:-1]
        if raw_line.startswith("diff --git ") or raw_line.startswith("diff --cc "):
            in_hunk = False
            records.append(DiffRecord(ORIGIN_FILE_HEADER, raw_line))
            continue
        if raw_line.startswith("@@"):
            in_hunk = True
            records.append(DiffRecord(ORIGIN_HUNK_HEADER, raw_line))
            continue
        if not in_hunk:
            records.append(DiffRecord(ORIGIN_FILE_HEADER, raw_line))
            continue

        marker = raw_line[:1]
        if marker in {ORIGIN_ADDITION, ORIGIN_DELETION, ORIGIN_EOF_NOTE}:
            content = raw_line if marker == ORIGIN_EOF_NOTE else raw_line[1:]
            records.append(DiffRecord(marker, content))
        else:
            records.append(DiffRecord(ORIGIN_CONTEXT, raw_line[1:]))
    return records


def _literal_pathspec(path: str) -> str:
    return f":(literal){path}"


def _run_git(
    cwd: Path,
    args: list[str],
    timeout_seconds: float = GIT_TIMEOUT_SECONDS,
    input_text: str | None = None,
) -> str:
    """Run a git subcommand and return stdout, raising on any failure.

    Output is decoded from bytes without newline translation, so carriage
    returns inside file content are kept.
    """
    logger.debug("git %s", " ".join(args))
    try:
        proc = subprocess.run(
            ["git", "-C", str(cwd), *args],
            input=input_text.encode("utf-8") if input_text is not None else None,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            check=False,
            timeout=timeout_seconds,
        )
    except FileNotFoundError as exc:
        raise RepositoryAccessError("git is not installed or not on PATH") from exc
    except subprocess.TimeoutExpired as exc:
        raise RepositoryAccessError(f"git {args[0]} timed out after {timeout_seconds:g}s") from exc
    except OSError as exc:
        raise RepositoryAccessError(f"could not run git: {exc}") from exc

    if proc.returncode != 0:
        stderr = proc.stderr.decode("utf-8", errors="replace").strip() or f"exit status {proc.returncode}"
        logger.debug("git %s failed: %s", args[0], stderr)
        raise RepositoryAccessError(stderr)
    return proc.stdout.decode("utf-8", errors="replace")


class GitRepository:
    """Handle on one working tree; all queries are read-only."""

    def __init__(self, root: Path, timeout_seconds: float = GIT_TIMEOUT_SECONDS) -> None:
        self.root = root
        self.timeout_seconds = timeout_seconds

    @classmethod
    def discover(cls, start: Path | None = None) -> GitRepository:
        """Open the repository enclosing ``start`` (default: current directory)."""
        start = (start or Path.cwd()).resolve()
        try:
            out = _run_git(start, ["rev-parse", "--show-toplevel"])
        except RepositoryAccessError as exc:
            raise RepositoryNotFoundError(f"{start}: {exc}") from exc
        top = out.strip()
        if not top:
            # Inside a bare repository or the .git directory itself.
            raise RepositoryNotFoundError(f"{start}: no working tree")
        return cls(Path(top).resolve())

    def _git(self, args: list[str], input_text: str | None = None) -> str:
        return _run_git(self.root, args, self.timeout_seconds, input_text=input_text)

    def enumerate_changes(self) -> list[StatusRecord]:
        """List changed paths, untracked files included and directories recursed."""
        out = self._git(["status", "--porcelain=v1", "-z", "--untracked-files=all", "--no-renames"])
        return parse_porcelain_z(out)

    def status_of(self, path: str) -> int:
        out = self._git(
            [
                "status",
                "--porcelain=v1",
                "-z",
                "--untracked-files=all",
                "--no-renames",
                "--",
                _literal_pathspec(path),
            ]
        )
        flags = STATUS_CURRENT
        for record in parse_porcelain_z(out):
            if record.path == path:
                flags |= record.flags
        return flags

    def head_tree(self) -> str | None:
        """Return the tree id of HEAD, or ``None`` for an unborn branch."""
        try:
            out = self._git(["rev-parse", "--verify", "--quiet", "HEAD^{tree}"])
        except RepositoryAccessError:
            return None
        tree = out.strip()
        return tree or None

    def empty_tree(self) -> str:
        return self._git(["hash-object", "-t", "tree", "--stdin"], input_text="").strip()

    def diff(self, tree: str | None, path: str) -> list[DiffRecord]:
        """Diff ``tree`` (empty tree when ``None``) against the working tree for ``path``."""
        baseline = tree if tree is not None else self.empty_tree()
        out = self._git(
            ["diff", "--no-color", "--no-ext-diff", baseline, "--", _literal_pathspec(path)]
        )
        return parse_patch(out)
