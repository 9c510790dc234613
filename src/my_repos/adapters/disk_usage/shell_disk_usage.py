from __future__ import annotations
"""Disk usage lookups through the `du` utility.

Size reporting is best-effort: every failure is logged and reported as an
empty string.
"""

import logging
import subprocess
from pathlib import Path
from typing import Callable

from my_repos.domain.ports import DiskUsagePort


class ShellDiskUsageAdapter(DiskUsagePort):
    """Run `du -hs <path>` and keep the size column."""

    def __init__(
        self,
        *,
        du_executable: str = "du",
        timeout_seconds: float | None = None,
        runner: Callable[..., subprocess.CompletedProcess[str]] = subprocess.run,
    ) -> None:
        self._du_executable = du_executable
        self._timeout_seconds = timeout_seconds
        self._runner = runner
        self._logger = logging.getLogger(__name__)

    def size_of(self, path: Path) -> str:
        command = [self._du_executable, "-hs", str(path)]
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
                "disk usage unavailable",
                extra={"event": "du.unavailable", "path": str(path), "error": str(error)},
            )
            return ""

        if completed.returncode != 0:
            self._logger.info(
                "disk usage command failed",
                extra={"event": "du.failed", "path": str(path), "return_code": completed.returncode},
            )
            return ""

        return (completed.stdout or "").split("\t", 1)[0].strip()
