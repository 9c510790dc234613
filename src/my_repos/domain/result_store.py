from __future__ import annotations

import threading


class ResultStore:
    """Per-invocation map of repository root to summary text.

    Shared by every dispatched unit; all access goes through one lock.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[str, str] = {}

    def add(self, key: str, value: str) -> None:
        with self._lock:
            self._entries[key] = value

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._entries.get(key)

    def items(self) -> list[tuple[str, str]]:
        """Sorted snapshot of all entries."""
        with self._lock:
            return sorted(self._entries.items())

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
