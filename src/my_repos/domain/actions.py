from __future__ import annotations
"""Per-repository action for the selected mode and its post-scan step."""

from dataclasses import dataclass

from .entities import ActionResult, CommandOutput, RepositoryRecord
from .modes import Mode
from .ports import DiskUsagePort, GitClientPort
from .result_store import ResultStore


DEFAULT_LOG_SINCE = "2023-01-01"


@dataclass(frozen=True, slots=True)
class LogFilter:
    """Filters applied by the `log` mode.

    Attributes:
        author: Value for `git log --author`; `None` disables the filter.
        since: Value for `git log --since`.
    """

    author: str | None = None
    since: str = DEFAULT_LOG_SINCE


class RepositoryAction:
    """Runs one `Mode` against a single repository.

    Expected usage:
    - Construct once per scan with the selected mode and shared collaborators.
    - Call `execute()` from any worker thread, once per repository.
    - Call `post_scan()` once after every repository finished.
    """

    def __init__(
        self,
        mode: Mode,
        *,
        git_client: GitClientPort,
        disk_usage: DiskUsagePort,
        result_store: ResultStore,
        log_filter: LogFilter | None = None,
    ) -> None:
        self._mode = mode
        self._git_client = git_client
        self._disk_usage = disk_usage
        self._result_store = result_store
        self._log_filter = log_filter or LogFilter()

    @property
    def name(self) -> str:
        return self._mode.value

    @property
    def mode(self) -> Mode:
        return self._mode

    def git_args(self) -> list[str]:
        """Arguments passed to git by the command-style modes."""
        if self._mode is Mode.STATUS:
            return ["status"]
        if self._mode is Mode.PULL:
            return ["pull"]
        if self._mode is Mode.FETCH:
            return ["fetch"]
        if self._mode is Mode.LOG:
            args = ["log", "--oneline"]
            if self._log_filter.author:
                args.extend(["--author", self._log_filter.author])
            args.extend(["--since", self._log_filter.since])
            return args
        return []

    def execute(self, repository: RepositoryRecord) -> ActionResult:
        """Execute the mode for one repository.

        Args:
            repository: Repository located by the walk.

        Returns:
            ActionResult whose message is printed when non-empty or failed.
        """
        if self._mode is Mode.NOP:
            return ActionResult(action_name=self.name, success=True, message=f"NOP: {repository.marker_path}")

        if self._mode is Mode.SUMMARY:
            self._result_store.add(str(repository.root_path), self._summarize(repository))
            return ActionResult(action_name=self.name, success=True)

        output = self._git_client.run(repository, self.git_args())
        return self._to_result(output)

    def post_scan(self) -> str | None:
        """Text to print once after all repositories completed, if any."""
        if not self._mode.has_post_scan:
            return None
        blocks = [f"{root}:\n{text}\n" for root, text in self._result_store.items()]
        if not blocks:
            return None
        return "\n" + "\n".join(blocks)

    def _summarize(self, repository: RepositoryRecord) -> str:
        lines: list[str] = []

        branch = self._current_branch(repository)
        if branch:
            lines.append(f"Branch: {branch}")

        remotes = self._git_client.run(repository, ["remote", "-v"])
        if remotes.success:
            lines.append(f"remote: {_first_line(remotes.output) or '(none)'}")

        lines.append(f"Size: {self._disk_usage.size_of(repository.marker_path)}")
        return "\n".join(lines)

    def _current_branch(self, repository: RepositoryRecord) -> str:
        result = self._git_client.run(repository, ["rev-parse", "--abbrev-ref", "HEAD"])
        if result.success and _first_line(result.output):
            return _first_line(result.output)

        # rev-parse fails on an unborn branch (no commits yet)
        result = self._git_client.run(repository, ["symbolic-ref", "--short", "HEAD"])
        if result.success:
            return _first_line(result.output)
        return ""

    def _to_result(self, output: CommandOutput) -> ActionResult:
        if output.success:
            return ActionResult(action_name=self.name, success=True, message=output.output.rstrip("\n"))
        message = f"{output.error} {output.output}".rstrip()
        return ActionResult(action_name=self.name, success=False, message=message)


def _first_line(text: str) -> str:
    return text.split("\n", 1)[0].strip()
