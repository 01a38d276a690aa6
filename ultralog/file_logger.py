"""Thread-safe writer of log entries to a file."""

from __future__ import annotations

import threading
from typing import Optional, TextIO

from ultralog.common import Priority, format_entry


class FileLogger:
    """Writes formatted log entries to a single open file."""

    def __init__(self, filename: Optional[str] = None) -> None:
        self._lock = threading.Lock()
        self._file: Optional[TextIO] = None
        if filename is not None:
            self.open(filename)

    def open(self, filename: str) -> bool:
        """Open (and truncate) filename; return False if a file is already open."""
        with self._lock:
            if self._file is not None:
                return False
            self._file = open(filename, "w", encoding="utf-8")
            return True

    def is_open(self) -> bool:
        return self._file is not None

    def write(self, message: str, priority: Priority) -> bool:
        """Append one entry and flush; return False if no file is open."""
        with self._lock:
            if self._file is None:
                return False
            self._file.write(format_entry(message, priority))
            self._file.flush()
            return True

    def close(self) -> None:
        with self._lock:
            if self._file is not None:
                self._file.close()
                self._file = None

    def __enter__(self) -> "FileLogger":
        return self

    def __exit__(self, *args) -> None:
        self.close()