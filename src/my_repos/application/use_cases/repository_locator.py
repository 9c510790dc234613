from __future__ import annotations
"""Directory walk that finds repository roots and hands them off for dispatch."""

import logging
from pathlib import Path
from typing import Callable

from my_repos.domain.entities import REPOSITORY_MARKER, RepositoryRecord, ScanCounters
from my_repos.domain.ports import FileSystemPort


LOGGER = logging.getLogger(__name__)


class RepositoryLocator:
    """Depth-first walk that claims every directory holding a `.git` marker.

    Responsibilities:
    - count every directory considered
    - claim the parent of each marker as a repository root
    - never descend into a marker, nor into anything else under a claimed root
    - keep walking siblings when a directory cannot be read

    The walk is single-threaded; the visited set and counters are local to one
    `walk()` call.
    """

    def __init__(self, filesystem: FileSystemPort, *, marker_name: str = REPOSITORY_MARKER) -> None:
        self._filesystem = filesystem
        self._marker_name = marker_name

    def walk(self, root: Path, on_repository: Callable[[RepositoryRecord], None]) -> ScanCounters:
        """Walk `root` and call `on_repository` once per repository found.

        Args:
            root: Directory to start from; it is counted as visited itself.
            on_repository: Called on the walking thread for each new record.
                It must not block; dispatchers schedule work and return.

        Returns:
            `ScanCounters` for the completed walk.
        """
        counters = ScanCounters()
        visited: set[Path] = set()

        if not self._filesystem.is_directory(root):
            LOGGER.error(
                "scan root is not a readable directory",
                extra={"event": "locator.root.invalid", "root": str(root)},
            )
            return counters

        stack: list[Path] = [root]
        while stack:
            path = stack.pop()

            if path.parent in visited:
                continue

            counters.visited += 1

            if path.name == self._marker_name:
                record = RepositoryRecord.from_marker(path)
                visited.add(record.root_path)
                counters.matched += 1
                LOGGER.debug(
                    "repository located",
                    extra={"event": "locator.repository.found", "root_path": str(record.root_path)},
                )
                on_repository(record)
                continue

            try:
                children = self._filesystem.list_subdirectories(path)
            except OSError as error:
                LOGGER.warning(
                    "directory could not be read; skipping subtree",
                    extra={"event": "locator.directory.unreadable", "path": str(path), "error": str(error)},
                )
                continue

            # stack is LIFO: push in reverse so the marker is popped first,
            # then the remaining children in lexical order
            stack.extend(reversed(self._order_children(children)))

        LOGGER.info(
            "directory walk completed",
            extra={
                "event": "locator.completed",
                "root": str(root),
                "visited": counters.visited,
                "matched": counters.matched,
            },
        )
        return counters

    def _order_children(self, children: list[Path]) -> list[Path]:
        markers = [child for child in children if child.name == self._marker_name]
        others = [child for child in children if child.name != self._marker_name]
        return markers + others
