from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from my_repos.domain.actions import DEFAULT_LOG_SINCE, LogFilter
from my_repos.domain.modes import Mode


DEFAULT_JOBS = 8


@dataclass(slots=True)
class AppConfig:
    root: Path
    mode: Mode
    jobs: int
    log_author: str | None
    log_since: str
    git_executable: str
    du_executable: str
    command_timeout_seconds: float | None

    @property
    def log_filter(self) -> LogFilter:
        return LogFilter(author=self.log_author, since=self.log_since)


def load_config(args, env: Mapping[str, str], *, mode: Mode, cwd: Path) -> AppConfig:
    root_raw = _normalize_empty(args.root)
    raw_jobs = _normalize_empty(str(args.jobs) if args.jobs is not None else None) or _normalize_empty(
        env.get("MY_REPOS_JOBS")
    )
    log_author = _normalize_empty(env.get("MY_REPOS_LOG_AUTHOR"))
    log_since = _normalize_empty(env.get("MY_REPOS_LOG_SINCE")) or DEFAULT_LOG_SINCE
    git_executable = _normalize_empty(env.get("MY_REPOS_GIT_EXECUTABLE")) or "git"
    du_executable = _normalize_empty(env.get("MY_REPOS_DU_EXECUTABLE")) or "du"

    jobs = DEFAULT_JOBS
    if raw_jobs is not None:
        try:
            jobs = int(raw_jobs)
        except ValueError as error:
            raise ValueError("MY_REPOS_JOBS/--jobs must be an integer") from error
        if jobs <= 0:
            raise ValueError("MY_REPOS_JOBS/--jobs must be greater than 0")

    raw_timeout = _normalize_empty(env.get("MY_REPOS_COMMAND_TIMEOUT_SECONDS"))
    command_timeout_seconds: float | None = None
    if raw_timeout is not None:
        try:
            command_timeout_seconds = float(raw_timeout)
        except ValueError as error:
            raise ValueError("MY_REPOS_COMMAND_TIMEOUT_SECONDS must be a number") from error
        if command_timeout_seconds <= 0:
            raise ValueError("MY_REPOS_COMMAND_TIMEOUT_SECONDS must be greater than 0")

    root = Path(root_raw).expanduser() if root_raw else cwd
    if not root.is_absolute():
        root = cwd / root

    return AppConfig(
        root=root.resolve(),
        mode=mode,
        jobs=jobs,
        log_author=log_author,
        log_since=log_since,
        git_executable=git_executable,
        du_executable=du_executable,
        command_timeout_seconds=command_timeout_seconds,
    )


def _normalize_empty(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None
