from __future__ import annotations
"""Core domain entities shared by the locator, dispatcher and mode actions.

These data models are framework-agnostic and can be reused across adapters
(CLI, tests).
"""

from dataclasses import dataclass
from pathlib import Path


REPOSITORY_MARKER = ".git"


@dataclass(frozen=True, slots=True)
class RepositoryRecord:
    """Repository found by the locator.

    Attributes:
        root_path: Working-tree root, the directory containing the marker.
        marker_path: The `.git` metadata directory itself.
    """

    root_path: Path
    marker_path: Path

    @classmethod
    def from_marker(cls, marker_path: Path) -> RepositoryRecord:
        return cls(root_path=marker_path.parent, marker_path=marker_path)


@dataclass(slots=True)
class ScanCounters:
    """Walk statistics, mutated only by the traversal thread.

    Attributes:
        visited: Directories considered by the walk (pruned subtrees excluded).
        matched: Repository roots found.
    """

    visited: int = 0
    matched: int = 0


@dataclass(frozen=True, slots=True)
class CommandOutput:
    """Outcome of one external command.

    `output` is stdout and stderr combined, verbatim.
    """

    success: bool
    output: str
    return_code: int | None = None

    @property
    def error(self) -> str:
        if self.success:
            return ""
        if self.return_code is None:
            return "command did not complete"
        return f"exit status {self.return_code}"


@dataclass(slots=True)
class ActionResult:
    """Result returned by each `RepositoryAction.execute()` call.

    Attributes:
        action_name: Mode name for logs.
        success: Whether the action succeeded.
        message: Text surfaced to the operator; empty means nothing to print.
    """

    action_name: str
    success: bool
    message: str = ""

    @property
    def should_report(self) -> bool:
        return bool(self.message) or not self.success
