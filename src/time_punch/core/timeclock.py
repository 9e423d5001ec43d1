"""Append-only timeclock file storage."""

import glob
import logging
import sys
from collections import deque
from pathlib import Path
from typing import Any

from time_punch.core.models import TimeEntry

logger = logging.getLogger(__name__)


class TimeclockBoundaryError(Exception):
    """Timeclock file does not start with a clock-in or end with a clock-out."""


def _lock_file(file_obj: Any) -> None:
    """Take an exclusive advisory lock on an open file."""
    if sys.platform == "win32":
        import msvcrt  # type: ignore[import-not-found]

        msvcrt.locking(file_obj.fileno(), msvcrt.LK_LOCK, 1)
    else:
        import fcntl  # type: ignore[import-not-found]

        fcntl.flock(file_obj.fileno(), fcntl.LOCK_EX)


def _unlock_file(file_obj: Any) -> None:
    """Release a lock taken by _lock_file."""
    if sys.platform == "win32":
        import msvcrt  # type: ignore[import-not-found]

        msvcrt.locking(file_obj.fileno(), msvcrt.LK_UNLCK, 1)
    else:
        import fcntl  # type: ignore[import-not-found]

        fcntl.flock(file_obj.fileno(), fcntl.LOCK_UN)


def _entry_lines(path: Path) -> list[str]:
    with open(path, encoding="utf-8", errors="replace") as f:
        return [line.rstrip("\n") for line in f if line.strip()]


class TimeclockFile:
    """Reads and appends timeclock entries at a resolved path."""

    def __init__(self, path: Path):
        """Initialize timeclock storage.

        Args:
            path: Resolved timeclock file path
        """
        self.path = path

    def append(self, entry: TimeEntry) -> None:
        """Append one entry as a new line.

        The parent directory is created if needed. Errors propagate.

        Args:
            entry: Entry to write
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        line = entry.to_line()

        with open(self.path, "a", encoding="utf-8") as f:
            _lock_file(f)
            try:
                f.write(line + "\n")
                f.flush()
            finally:
                _unlock_file(f)

        logger.debug(f"Appended to {self.path}: {line}")

    def tail(self, count: int = 10) -> list[str]:
        """Get the last lines of the file.

        Args:
            count: Number of lines to return

        Returns:
            Up to ``count`` lines, oldest first
        """
        if count <= 0:
            return []
        with open(self.path, encoding="utf-8", errors="replace") as f:
            return [line.rstrip("\n") for line in deque(f, maxlen=count)]


def check_boundaries(pattern: str) -> list[Path]:
    """Check that every timeclock file matching a glob is balanced at its ends.

    Each file must begin with a clock-in and end with a clock-out. Empty
    files are ignored; files are never modified.

    Args:
        pattern: Glob of timeclock files

    Returns:
        Files that were checked

    Raises:
        TimeclockBoundaryError: On the first file that fails the check
    """
    paths = [Path(p) for p in sorted(glob.glob(pattern))]
    for path in paths:
        lines = _entry_lines(path)
        if not lines:
            continue

        first, last = lines[0], lines[-1]
        if first.startswith("o"):
            logger.debug(f"{path} starts with {first!r}")
            raise TimeclockBoundaryError("time file does not start with a i entry")
        if last.startswith("i"):
            logger.debug(f"{path} ends with {last!r}")
            raise TimeclockBoundaryError("time file does not end with a o entry")

    return paths
