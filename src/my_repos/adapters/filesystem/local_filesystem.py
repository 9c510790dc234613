from __future__ import annotations

import os
from pathlib import Path

from my_repos.domain.ports import FileSystemPort


class LocalFileSystemAdapter(FileSystemPort):
    def is_directory(self, path: Path) -> bool:
        return path.is_dir() and not path.is_symlink()

    def list_subdirectories(self, path: Path) -> list[Path]:
        with os.scandir(path) as entries:
            names = [entry.name for entry in entries if entry.is_dir(follow_symlinks=False)]
        return [path / name for name in sorted(names)]
