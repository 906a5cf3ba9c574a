"""Command-line front door for lazystatus.

Parses the subcommand, opens the repository enclosing the current directory,
and dispatches into the interactive status browser.
"""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path

from . import __version__
from .app import TerminalUnavailableError, run_status_browser
from .git_repo import GitRepository, RepositoryAccessError, RepositoryNotFoundError

LOG_ENV_VAR = "LAZYSTATUS_LOG"


def _configure_logging() -> None:
    """Send debug logs to the file named by ``LAZYSTATUS_LOG``, if set.

    The TUI owns the screen, so logs never go to stderr.
    """
    log_path = os.environ.get(LOG_ENV_VAR)
    if not log_path:
        return
    logging.basicConfig(
        filename=log_path,
        level=logging.DEBUG,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lazystatus",
        description="Browse working-tree changes and their diffs in the terminal.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subcommands = parser.add_subparsers(dest="command", metavar="COMMAND")
    subcommands.required = True
    subcommands.add_parser("status", help="Browse changed files and their diffs.")
    return parser


def main(argv: list[str] | None = None, default_path: Path | None = None) -> None:
    """Parse CLI arguments and launch the requested subcommand.

    ``default_path`` is primarily for tests; when omitted the repository is
    discovered from the current working directory upward.
    """
    args = build_parser().parse_args(argv)
    _configure_logging()

    if args.command == "status":
        try:
            repo = GitRepository.discover(default_path)
        except RepositoryNotFoundError as exc:
            raise SystemExit(f"Not a git repository: {exc}") from exc
        try:
            run_status_browser(repo)
        except TerminalUnavailableError as exc:
            raise SystemExit(f"Cannot start interactive session: {exc}") from exc
        except RepositoryAccessError as exc:
            raise SystemExit(f"Git error: {exc}") from exc


if __name__ == "__main__":
    main()
