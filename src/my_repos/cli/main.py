from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path

from my_repos.adapters.console.console_output import ConsoleOutputAdapter
from my_repos.adapters.disk_usage.shell_disk_usage import ShellDiskUsageAdapter
from my_repos.adapters.filesystem.local_filesystem import LocalFileSystemAdapter
from my_repos.adapters.git_client.shell_git_client import ShellGitClientAdapter
from my_repos.application.use_cases.repository_scanner import RepositoryScanner, ScanExecutionSummary
from my_repos.cli.config import AppConfig, load_config
from my_repos.domain.modes import DEFAULT_MODE, Mode, parse_mode
from my_repos.domain.ports import GitClientPort
from my_repos.logging_utils import configure_logging


_EPILOG = """\
Example: my-repos ~/dev fetch

mode is one of the git commands:
  status   (default when no arguments are given)
  log      one-line log, filtered by MY_REPOS_LOG_AUTHOR and MY_REPOS_LOG_SINCE
  pull
  fetch

Or one of the extra modes:
  nop      report each repository path without running git
  summary  show branch, first remote and size of every repository
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="my-repos",
        description="Find every Git repository under a directory and run a git command against each, concurrently.",
        epilog=_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("root", nargs="?", help="Directory to scan. Defaults to the current directory.")
    parser.add_argument("mode", nargs="?", help="Mode to run against every repository. See below.")
    parser.add_argument(
        "--jobs",
        type=int,
        required=False,
        help="Maximum concurrent git processes. Falls back to MY_REPOS_JOBS (default 8).",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    configure_logging(os.environ.get("LOG_LEVEL", "INFO"))
    logger = logging.getLogger(__name__)

    parser = build_parser()
    args = parser.parse_intermixed_args(argv)

    mode = _resolve_mode(args)
    if mode is None:
        parser.print_help()
        return 0

    try:
        config = load_config(args=args, env=os.environ, mode=mode, cwd=Path.cwd())
    except ValueError as error:
        parser.error(str(error))

    logger.info(
        "cli configuration resolved",
        extra={
            "event": "cli.config.resolved",
            "root": str(config.root),
            "mode": config.mode.value,
            "jobs": config.jobs,
            "log_author": config.log_author,
            "log_since": config.log_since,
            "command_timeout_seconds": config.command_timeout_seconds,
        },
    )

    try:
        scanner = _build_scanner(config)
    except RuntimeError as error:
        logger.error("cli startup failed", extra={"event": "cli.startup.failed", "error": str(error)})
        parser.error(str(error))

    if config.mode is Mode.LOG and config.log_author is None:
        config.log_author = _default_log_author(scanner.git_client)

    summary = scanner.execute(config.root, config.mode, config.log_filter)
    _print_summary(summary)
    return 0


def _resolve_mode(args: argparse.Namespace) -> Mode | None:
    if args.root is None and args.mode is None:
        return DEFAULT_MODE
    return parse_mode(args.mode)


def _default_log_author(git_client: GitClientPort) -> str | None:
    author = git_client.config_value("user.email")
    if author is None:
        logging.getLogger(__name__).info(
            "no git user.email configured; log mode runs without an author filter",
            extra={"event": "cli.log_author.unset"},
        )
    return author


def _build_scanner(config: AppConfig) -> RepositoryScanner:
    return RepositoryScanner(
        filesystem=LocalFileSystemAdapter(),
        git_client=ShellGitClientAdapter(
            git_executable=config.git_executable,
            timeout_seconds=config.command_timeout_seconds,
        ),
        disk_usage=ShellDiskUsageAdapter(
            du_executable=config.du_executable,
            timeout_seconds=config.command_timeout_seconds,
        ),
        output=ConsoleOutputAdapter(),
        jobs=config.jobs,
    )


def _print_summary(summary: ScanExecutionSummary) -> None:
    print(f"Scanned folders: {summary.counters.visited}, git repos: {summary.counters.matched}")


if __name__ == "__main__":
    raise SystemExit(main())
