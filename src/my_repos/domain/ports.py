from __future__ import annotations
"""Hexagonal architecture port interfaces.

Core use cases depend only on these abstractions. Adapters provide concrete
implementations for filesystem listing, shell commands and console output.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Sequence

from .entities import CommandOutput, RepositoryRecord


class GitClientPort(ABC):
    """Runs git subcommands scoped to one repository."""

    @abstractmethod
    def run(self, repository: RepositoryRecord, args: Sequence[str]) -> CommandOutput:
        """Run `git <args>` against the repository and capture combined output.

        A non-zero exit is returned as `CommandOutput(success=False, ...)`,
        never raised.
        """
        raise NotImplementedError

    def config_value(self, key: str) -> str | None:
        """Return the user's git configuration value for `key`, or `None` when unset."""
        return None


class DiskUsagePort(ABC):
    """Best-effort on-disk size lookups."""

    @abstractmethod
    def size_of(self, path: Path) -> str:
        """Return a human-readable size for `path`, or an empty string on failure."""
        raise NotImplementedError


class FileSystemPort(ABC):
    """Filesystem operations abstracted for testability and portability."""

    @abstractmethod
    def is_directory(self, path: Path) -> bool:
        """Return whether `path` is a directory (symlinks are not followed)."""
        raise NotImplementedError

    @abstractmethod
    def list_subdirectories(self, path: Path) -> list[Path]:
        """Return the immediate child directories of `path` in lexical order.

        Raises:
            OSError: When the directory cannot be read.
        """
        raise NotImplementedError


class OutputPort(ABC):
    """Operator-visible, append-only output sink shared by concurrent units."""

    @abstractmethod
    def write_block(self, text: str) -> None:
        """Write `text` plus a trailing newline as one uninterrupted block."""
        raise NotImplementedError
