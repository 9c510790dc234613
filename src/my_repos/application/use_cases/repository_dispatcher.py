from __future__ import annotations
"""Bounded concurrent execution of the selected action per repository."""

from concurrent.futures import Future, ThreadPoolExecutor, wait
import logging

from my_repos.domain.actions import RepositoryAction
from my_repos.domain.entities import ActionResult, RepositoryRecord
from my_repos.domain.ports import OutputPort


LOGGER = logging.getLogger(__name__)


class RepositoryDispatcher:
    """Schedules one unit of work per repository on a fixed-size thread pool.

    `submit()` returns immediately so the walk never blocks on git. `wait()`
    joins every submitted unit and must be called exactly once; it also shuts
    the pool down.
    """

    def __init__(self, action: RepositoryAction, output: OutputPort, *, max_workers: int) -> None:
        if max_workers <= 0:
            raise ValueError("max_workers must be greater than 0")
        self._action = action
        self._output = output
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="my-repos")
        self._futures: list[Future[ActionResult]] = []
        self._closed = False

    def submit(self, repository: RepositoryRecord) -> None:
        if self._closed:
            raise RuntimeError("dispatcher already waited; no more work can be submitted")
        self._futures.append(self._executor.submit(self._run_unit, repository))

    def wait(self) -> list[ActionResult]:
        """Block until every submitted unit finished and return their results."""
        if self._closed:
            raise RuntimeError("dispatcher wait() called twice")
        self._closed = True
        try:
            wait(self._futures)
        finally:
            self._executor.shutdown(wait=True)
        return [future.result() for future in self._futures]

    def __enter__(self) -> RepositoryDispatcher:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if not self._closed:
            self._closed = True
            self._executor.shutdown(wait=True)

    def _run_unit(self, repository: RepositoryRecord) -> ActionResult:
        try:
            result = self._action.execute(repository)
        except Exception as error:  # noqa: BLE001
            LOGGER.exception(
                "repository action crashed",
                extra={
                    "event": "dispatcher.unit.failed",
                    "root_path": str(repository.root_path),
                    "mode": self._action.name,
                },
            )
            result = ActionResult(action_name=self._action.name, success=False, message=f"error: {error}")

        LOGGER.debug(
            "repository action completed",
            extra={
                "event": "dispatcher.unit.completed",
                "root_path": str(repository.root_path),
                "mode": result.action_name,
                "success": result.success,
            },
        )

        if result.should_report:
            self._output.write_block(f"{repository.root_path}: {result.message}")
        return result
