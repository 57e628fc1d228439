"""Filesystem helpers for the Odoo USB backup run."""
from __future__ import annotations

import fnmatch
import os
from pathlib import Path
from typing import Optional

from .errors import MountError


def find_source_folder(root: Path, pattern: str) -> Optional[Path]:
    """
    Return the first directory under ``root`` whose name matches ``pattern``.

    Behaves like ``find ROOT -type d -name PATTERN | head -n 1``: the root
    itself is a candidate, the walk is top-down, symlinked directories are
    neither matched nor entered, and unreadable directories are skipped.
    Siblings are visited in sorted order so repeated runs agree.
    """
    root = Path(root)
    if not root.is_dir():
        return None

    # os.walk is pre-order and skips unreadable directories when onerror is unset.
    for dirpath, dirnames, _ in os.walk(root):
        if fnmatch.fnmatchcase(os.path.basename(os.path.normpath(dirpath)), pattern):
            return Path(dirpath)
        dirnames[:] = sorted(d for d in dirnames if not os.path.islink(os.path.join(dirpath, d)))
    return None


def ensure_mount_point(mount_point: Path) -> bool:
    """Create ``mount_point`` if needed; returns True when it was created."""
    if mount_point.is_dir():
        return False
    try:
        mount_point.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise MountError(f"Failed to create mount point [{mount_point}]: {e}") from e
    return True


__all__ = ["find_source_folder", "ensure_mount_point"]
