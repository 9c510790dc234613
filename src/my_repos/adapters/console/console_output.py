from __future__ import annotations

import sys
import threading
from typing import TextIO

from my_repos.domain.ports import OutputPort


class ConsoleOutputAdapter(OutputPort):
    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream
        self._lock = threading.Lock()

    def write_block(self, text: str) -> None:
        stream = self._stream if self._stream is not None else sys.stdout
        with self._lock:
            stream.write(f"{text}\n")
            stream.flush()
