#
# sync.py
# Odoo USB Backup
#
# Mirrors the source folder onto the USB volume with rsync and records rsync's own output in the log file.
#
"""rsync invocation."""
from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence

from .errors import SyncError


def build_rsync_command(source_dir: Path, destination: Path, options: Sequence[str]) -> List[str]:
    # Trailing slashes copy the contents of source_dir, not the folder itself.
    src = str(source_dir).rstrip("/") + "/"
    dst = str(destination).rstrip("/") + "/"
    return ["rsync", *options, src, dst]


def progress_line(raw: bytes) -> str:
    """Reduce one rsync output line to its final ``\\r`` segment (the last progress update)."""
    segments = [s.strip() for s in raw.rstrip(b"\n").split(b"\r")]
    segments = [s for s in segments if s]
    return segments[-1].decode("utf-8", errors="replace") if segments else ""


def run_rsync(
    source_dir: Path,
    destination: Path,
    options: Sequence[str] = ("-av", "--progress"),
    logger: Optional[logging.Logger] = None,
):
    log = logger or logging.getLogger("odoo_usb_backup")
    cmd = build_rsync_command(source_dir, destination, options)
    log.debug("Running: %s", " ".join(cmd))
    try:
        proc = subprocess.Popen(cmd, stdout=subprocess.PIPE, stderr=subprocess.STDOUT)
    except OSError as e:
        raise SyncError(f"Rsync failed to start: {e}") from e

    with proc:
        # Bytes so only b"\n" splits records; --progress ticks stay on one line.
        for raw in proc.stdout:
            line = progress_line(raw)
            if line:
                log.debug("rsync: %s", line)

    if proc.returncode != 0:
        raise SyncError(f"Rsync failed with status {proc.returncode}")


__all__ = ["build_rsync_command", "progress_line", "run_rsync"]
