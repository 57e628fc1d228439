#
# logfile.py
# Odoo USB Backup
#
# Keeps the append-only log file bounded by trimming it to its newest lines before each run.
#
"""Line-capped log file maintenance."""
from __future__ import annotations

import os
import tempfile
from collections import deque
from pathlib import Path
from typing import Optional

from .errors import LogFileError


def count_lines(path: Path) -> int:
    """Count lines split on ``\\n`` only; a ``\\r`` inside a line does not end it."""
    # Binary iteration splits on b"\n" alone; rsync --progress output is full of \r.
    with open(path, "rb") as f:
        return sum(1 for _ in f)


def trim_log_file(path: Path, max_lines: int) -> Optional[int]:
    """
    Keep only the last ``max_lines`` lines of ``path``.

    A missing file (and its directory) is created empty. Returns the line
    count found before trimming, or ``None`` when nothing had to be removed.
    Kept lines are written back byte for byte.
    """
    if max_lines < 1:
        raise ValueError(f"max_lines must be >= 1, got {max_lines}")

    path = Path(path)
    if not path.exists():
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.touch()
        except OSError as e:
            raise LogFileError(f"Failed to create log file [{path}]: {e}") from e
        return None

    try:
        total = count_lines(path)
        if total <= max_lines:
            return None
        with open(path, "rb") as f:
            tail = deque(f, maxlen=max_lines)
    except OSError as e:
        raise LogFileError(f"Failed to read log file [{path}]: {e}") from e

    # Write the kept tail next to the log and swap it in atomically.
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
    except OSError as e:
        raise LogFileError(f"Failed to trim log file [{path}]: {e}") from e
    try:
        with os.fdopen(fd, "wb") as out:
            out.writelines(tail)
        os.replace(tmp_name, path)
    except OSError as e:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise LogFileError(f"Failed to trim log file [{path}]: {e}") from e
    return total


__all__ = ["count_lines", "trim_log_file"]
