from __future__ import annotations
"""Application use case: locate repositories and run one mode against each."""

from dataclasses import dataclass
import logging
from pathlib import Path

from my_repos.application.use_cases.repository_dispatcher import RepositoryDispatcher
from my_repos.application.use_cases.repository_locator import RepositoryLocator
from my_repos.domain.actions import LogFilter, RepositoryAction
from my_repos.domain.entities import ActionResult, ScanCounters
from my_repos.domain.modes import Mode
from my_repos.domain.ports import DiskUsagePort, FileSystemPort, GitClientPort, OutputPort
from my_repos.domain.result_store import ResultStore


LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class ScanExecutionSummary:
    """Result of one scanner run."""

    root: Path
    mode: Mode
    counters: ScanCounters
    results: tuple[ActionResult, ...]
    result_store: ResultStore

    @property
    def failed_repositories(self) -> int:
        return sum(1 for item in self.results if not item.success)


@dataclass(slots=True)
class RepositoryScanner:
    """Core orchestration use case.

    Responsibilities:
    - build a fresh `ResultStore` and `RepositoryAction` for the run
    - walk the tree with `RepositoryLocator`, dispatching each repository
    - join every dispatched unit before the post-scan step
    - print the post-scan block, if the mode has one
    """

    filesystem: FileSystemPort
    git_client: GitClientPort
    disk_usage: DiskUsagePort
    output: OutputPort
    jobs: int = 8

    def execute(self, root: Path, mode: Mode, log_filter: LogFilter | None = None) -> ScanExecutionSummary:
        """Execute one scan.

        Args:
            root: Directory to walk.
            mode: Mode to run against every repository found.
            log_filter: Author/since filters for `Mode.LOG`.

        Returns:
            `ScanExecutionSummary` with walk counters and per-repository results.
        """
        result_store = ResultStore()
        action = RepositoryAction(
            mode,
            git_client=self.git_client,
            disk_usage=self.disk_usage,
            result_store=result_store,
            log_filter=log_filter,
        )
        locator = RepositoryLocator(self.filesystem)

        LOGGER.info(
            "scan started",
            extra={"event": "scanner.started", "root": str(root), "mode": mode.value, "jobs": self.jobs},
        )
        self.output.write_block(f"Scanning from {root}")

        with RepositoryDispatcher(action, self.output, max_workers=self.jobs) as dispatcher:
            counters = locator.walk(root, dispatcher.submit)
            results = tuple(dispatcher.wait())

        post_scan = action.post_scan()
        if post_scan is not None:
            self.output.write_block(post_scan)

        summary = ScanExecutionSummary(
            root=root,
            mode=mode,
            counters=counters,
            results=results,
            result_store=result_store,
        )

        LOGGER.info(
            "scan completed",
            extra={
                "event": "scanner.completed",
                "root": str(root),
                "mode": mode.value,
                "visited": counters.visited,
                "matched": counters.matched,
                "failed_repositories": summary.failed_repositories,
            },
        )
        return summary
