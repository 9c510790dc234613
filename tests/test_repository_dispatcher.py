from __future__ import annotations

import io
import threading
import time
from pathlib import Path
from typing import Sequence

import pytest

from my_repos.adapters.console.console_output import ConsoleOutputAdapter
from my_repos.application.use_cases.repository_dispatcher import RepositoryDispatcher
from my_repos.domain.actions import RepositoryAction
from my_repos.domain.entities import CommandOutput, RepositoryRecord
from my_repos.domain.modes import Mode
from my_repos.domain.ports import DiskUsagePort, GitClientPort
from my_repos.domain.result_store import ResultStore


class _SlowGitClient(GitClientPort):
    """Multi-line output per call; records the peak number of concurrent calls."""

    def __init__(self, delay: float = 0.01) -> None:
        self._delay = delay
        self._lock = threading.Lock()
        self._active = 0
        self.peak = 0

    def run(self, repository: RepositoryRecord, args: Sequence[str]) -> CommandOutput:
        with self._lock:
            self._active += 1
            self.peak = max(self.peak, self._active)
        try:
            time.sleep(self._delay)
            if repository.root_path.name == "broken":
                raise OSError("boom")
            if args[0] == "rev-parse":
                return CommandOutput(success=True, output=f"{repository.root_path.name}\n", return_code=0)
            return CommandOutput(
                success=True,
                output=f"line one of {repository.root_path.name}\nline two of {repository.root_path.name}\n",
                return_code=0,
            )
        finally:
            with self._lock:
                self._active -= 1


class _NoDiskUsage(DiskUsagePort):
    def size_of(self, path: Path) -> str:
        return ""


def _records(count: int) -> list[RepositoryRecord]:
    return [RepositoryRecord.from_marker(Path(f"/work/repo{i:03d}") / ".git") for i in range(count)]


def _dispatcher(mode: Mode, git: GitClientPort, stream: io.StringIO, *, store: ResultStore | None = None, jobs: int = 4):
    action = RepositoryAction(
        mode,
        git_client=git,
        disk_usage=_NoDiskUsage(),
        result_store=store if store is not None else ResultStore(),
    )
    return RepositoryDispatcher(action, ConsoleOutputAdapter(stream), max_workers=jobs)


def test_every_unit_completes_and_blocks_do_not_tear() -> None:
    git = _SlowGitClient()
    stream = io.StringIO()
    records = _records(60)

    dispatcher = _dispatcher(Mode.STATUS, git, stream, jobs=4)
    for record in records:
        dispatcher.submit(record)
    results = dispatcher.wait()

    assert len(results) == 60
    assert all(result.success for result in results)

    lines = stream.getvalue().splitlines()
    assert len(lines) == 120
    for first, second in zip(lines[0::2], lines[1::2]):
        root, _, rest = first.partition(": ")
        name = Path(root).name
        assert rest == f"line one of {name}"
        assert second == f"line two of {name}"


def test_concurrency_is_bounded_by_max_workers() -> None:
    git = _SlowGitClient(delay=0.02)
    dispatcher = _dispatcher(Mode.FETCH, git, io.StringIO(), jobs=3)

    for record in _records(20):
        dispatcher.submit(record)
    dispatcher.wait()

    assert 1 <= git.peak <= 3


def test_summary_writes_one_entry_per_repository() -> None:
    store = ResultStore()
    stream = io.StringIO()
    dispatcher = _dispatcher(Mode.SUMMARY, _SlowGitClient(delay=0), stream, store=store, jobs=8)

    for record in _records(55):
        dispatcher.submit(record)
    dispatcher.wait()

    assert len(store) == 55
    assert stream.getvalue() == ""
    for root, text in store.items():
        assert text.splitlines()[0] == f"Branch: {Path(root).name}"


def test_crashing_unit_is_reported_and_others_continue() -> None:
    stream = io.StringIO()
    dispatcher = _dispatcher(Mode.STATUS, _SlowGitClient(delay=0), stream)

    dispatcher.submit(RepositoryRecord.from_marker(Path("/work/broken/.git")))
    dispatcher.submit(RepositoryRecord.from_marker(Path("/work/fine/.git")))
    results = dispatcher.wait()

    assert [result.success for result in results] == [False, True]
    output = stream.getvalue()
    assert f"{Path('/work/broken')}: error: boom" in output
    assert f"{Path('/work/fine')}: line one of fine" in output


def test_wait_only_once() -> None:
    dispatcher = _dispatcher(Mode.NOP, _SlowGitClient(), io.StringIO())
    dispatcher.wait()

    with pytest.raises(RuntimeError):
        dispatcher.wait()
    with pytest.raises(RuntimeError):
        dispatcher.submit(_records(1)[0])


def test_rejects_non_positive_worker_count() -> None:
    with pytest.raises(ValueError):
        _dispatcher(Mode.NOP, _SlowGitClient(), io.StringIO(), jobs=0)


def test_result_store_survives_concurrent_writers() -> None:
    store = ResultStore()

    def writer(index: int) -> None:
        for attempt in range(50):
            store.add(f"/work/repo{index}", f"value {attempt}")

    threads = [threading.Thread(target=writer, args=(i,)) for i in range(50)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(store) == 50
    assert all(value == "value 49" for _, value in store.items())
