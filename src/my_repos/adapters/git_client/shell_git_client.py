from __future__ import annotations

import logging
import shutil
import subprocess
from typing import Callable, Sequence

from my_repos.domain.entities import CommandOutput, RepositoryRecord
from my_repos.domain.ports import GitClientPort


class ShellGitClientAdapter(GitClientPort):
    def __init__(
        self,
        *,
        git_executable: str = "git",
        timeout_seconds: float | None = None,
        runner: Callable[..., subprocess.CompletedProcess[str]] = subprocess.run,
    ) -> None:
        resolved = shutil.which(git_executable)
        if resolved is None:
            raise RuntimeError(f"Git executable '{git_executable}' was not found in PATH")

        self._git_executable = resolved
        self._timeout_seconds = timeout_seconds
        self._runner = runner
        self._logger = logging.getLogger(__name__)

    @property
    def git_executable(self) -> str:
        return self._git_executable

    def run(self, repository: RepositoryRecord, args: Sequence[str]) -> CommandOutput:
        command = [
            self._git_executable,
            "--git-dir",
            str(repository.marker_path),
            "--work-tree",
            str(repository.root_path),
            *args,
        ]
        self._logger.debug(
            "running git command",
            extra={"event": "git.command.start", "command": " ".join(command), "cwd": str(repository.root_path)},
        )

        try:
            completed = self._runner(
                command,
                cwd=str(repository.root_path),
                check=False,
                text=True,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                timeout=self._timeout_seconds,
            )
        except OSError as error:
            # missing executable or a repository removed mid-scan
            self._logger.error(
                "git command could not start",
                extra={"event": "git.command.start_failed", "command": " ".join(command), "error": str(error)},
            )
            return CommandOutput(success=False, output=str(error))
        except subprocess.TimeoutExpired as error:
            self._logger.error(
                "git command timed out",
                extra={
                    "event": "git.command.timeout",
                    "command": " ".join(command),
                    "timeout_seconds": self._timeout_seconds,
                },
            )
            return CommandOutput(success=False, output=f"timed out after {error.timeout}s")

        output = completed.stdout or ""
        if completed.returncode != 0:
            self._logger.debug(
                "git command failed",
                extra={
                    "event": "git.command.error",
                    "command": " ".join(command),
                    "cwd": str(repository.root_path),
                    "return_code": completed.returncode,
                },
            )
            return CommandOutput(success=False, output=output, return_code=completed.returncode)

        return CommandOutput(success=True, output=output, return_code=0)

    def config_value(self, key: str) -> str | None:
        command = [self._git_executable, "config", "--get", key]
        try:
            completed = self._runner(
                command,
                check=False,
                text=True,
                capture_output=True,
                timeout=self._timeout_seconds,
            )
        except (OSError, subprocess.TimeoutExpired) as error:
            self._logger.info(
                "git config lookup failed",
                extra={"event": "git.config.failed", "key": key, "error": str(error)},
            )
            return None

        value = (completed.stdout or "").strip()
        if completed.returncode != 0 or not value:
            return None
        return value
