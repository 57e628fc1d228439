#
# mount.py
# Odoo USB Backup
#
# Thin wrappers around the mount and umount binaries.
#
"""Mount and unmount the backup volume."""
from __future__ import annotations

import subprocess
from pathlib import Path

from .errors import MountError


def _run(cmd):
    try:
        res = subprocess.run(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE, universal_newlines=True)
    except OSError as e:
        raise MountError(f"{cmd[0]} could not be started: {e}") from e
    if res.returncode != 0:
        detail = res.stderr.strip()
        raise MountError(f"{cmd[0]} failed with status {res.returncode}" + (f": {detail}" if detail else ""))


def mount(device: str, target: Path):
    """Mount device on target."""
    _run(["mount", str(device), str(target)])


def umount(target: Path):
    _run(["umount", str(target)])


__all__ = ["mount", "umount"]
