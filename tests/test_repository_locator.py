from __future__ import annotations

import os
from pathlib import Path

from my_repos.adapters.filesystem.local_filesystem import LocalFileSystemAdapter
from my_repos.application.use_cases.repository_locator import RepositoryLocator
from my_repos.domain.entities import RepositoryRecord


def _make_repo(path: Path) -> Path:
    (path / ".git" / "objects" / "pack").mkdir(parents=True)
    (path / ".git" / "refs" / "heads").mkdir(parents=True)
    return path


def _walk(root: Path, filesystem=None) -> tuple[list[RepositoryRecord], int, int]:
    found: list[RepositoryRecord] = []
    locator = RepositoryLocator(filesystem or LocalFileSystemAdapter())
    counters = locator.walk(root, found.append)
    return found, counters.visited, counters.matched


class _UnreadableFileSystem(LocalFileSystemAdapter):
    def __init__(self, unreadable: Path) -> None:
        self._unreadable = unreadable

    def list_subdirectories(self, path: Path) -> list[Path]:
        if path == self._unreadable:
            raise PermissionError(13, "Permission denied", str(path))
        return super().list_subdirectories(path)


def test_empty_root_counts_only_itself(tmp_path: Path) -> None:
    found, visited, matched = _walk(tmp_path)
    assert found == []
    assert (visited, matched) == (1, 0)


def test_finds_each_non_overlapping_repository(tmp_path: Path) -> None:
    _make_repo(tmp_path / "a")
    _make_repo(tmp_path / "b")
    _make_repo(tmp_path / "c" / "d")
    (tmp_path / "c" / "notes").mkdir()

    found, visited, matched = _walk(tmp_path)

    assert [record.root_path for record in found] == [tmp_path / "a", tmp_path / "b", tmp_path / "c" / "d"]
    assert [record.marker_path for record in found] == [
        tmp_path / "a" / ".git",
        tmp_path / "b" / ".git",
        tmp_path / "c" / "d" / ".git",
    ]
    assert matched == 3
    # root, a, a/.git, b, b/.git, c, c/d, c/d/.git, c/notes
    assert visited == 9


def test_never_descends_into_marker(tmp_path: Path) -> None:
    repo = _make_repo(tmp_path / "repo")
    (repo / ".git" / "modules" / "sub" / ".git").mkdir(parents=True)

    found, visited, matched = _walk(tmp_path)

    assert [record.root_path for record in found] == [repo]
    assert matched == 1
    assert visited == 3


def test_claimed_root_prunes_nested_repositories(tmp_path: Path) -> None:
    outer = _make_repo(tmp_path / "outer")
    _make_repo(outer / "src" / "inner")
    # sorts before ".git" lexically
    _make_repo(outer / "-early")

    found, visited, matched = _walk(tmp_path)

    assert [record.root_path for record in found] == [outer]
    assert (visited, matched) == (3, 1)


def test_root_that_is_a_repository(tmp_path: Path) -> None:
    _make_repo(tmp_path)
    _make_repo(tmp_path / "vendor" / "lib")

    found, visited, matched = _walk(tmp_path)

    assert [record.root_path for record in found] == [tmp_path]
    assert (visited, matched) == (2, 1)


def test_marker_file_is_not_a_repository(tmp_path: Path) -> None:
    worktree = tmp_path / "worktree"
    worktree.mkdir()
    (worktree / ".git").write_text("gitdir: /elsewhere\n", encoding="utf-8")

    found, visited, matched = _walk(tmp_path)

    assert found == []
    assert (visited, matched) == (2, 0)


def test_symlinked_directories_are_not_followed(tmp_path: Path) -> None:
    elsewhere = _make_repo(tmp_path / "elsewhere" / "repo")
    root = tmp_path / "root"
    root.mkdir()
    os.symlink(elsewhere, root / "link", target_is_directory=True)

    found, visited, matched = _walk(root)

    assert found == []
    assert (visited, matched) == (1, 0)


def test_unreadable_directory_does_not_stop_siblings(tmp_path: Path) -> None:
    locked = tmp_path / "locked"
    _make_repo(locked / "hidden")
    _make_repo(tmp_path / "open")

    found, visited, matched = _walk(tmp_path, _UnreadableFileSystem(locked))

    assert [record.root_path for record in found] == [tmp_path / "open"]
    assert matched == 1
    # root, locked (counted, then unreadable), open, open/.git
    assert visited == 4


def test_missing_root_yields_zero_counts(tmp_path: Path) -> None:
    found, visited, matched = _walk(tmp_path / "missing")
    assert found == []
    assert (visited, matched) == (0, 0)


def test_walk_is_repeatable(tmp_path: Path) -> None:
    for name in ("x", "y", "z"):
        _make_repo(tmp_path / name)

    first = _walk(tmp_path)
    second = _walk(tmp_path)

    assert first[1:] == second[1:] == (7, 3)
