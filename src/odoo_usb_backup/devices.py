#
# devices.py
# Odoo USB Backup
#
# Enumerates block devices through lsblk, picks the USB volume by label and reports its size and free space.
#
"""Block device discovery."""
from __future__ import annotations

import json
import logging
import math
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

from .errors import DeviceQueryError

LSBLK_COLUMNS = "NAME,LABEL,MOUNTPOINT"


@dataclass
class BlockDevice:
    name: str  # full device path, e.g. /dev/sdb1
    label: Optional[str] = None
    mountpoint: Optional[Path] = None


@dataclass
class UsbStats:
    label: str
    size: str
    available: str


def _flatten(entries) -> Iterable[dict]:
    for e in entries or []:
        yield e
        yield from _flatten(e.get("children"))


def _mountpoint_of(entry: dict) -> Optional[Path]:
    mnt = entry.get("mountpoint")
    if mnt is None and entry.get("mountpoints"):
        # util-linux >= 2.37 reports a list; the first entry is the primary mount.
        mnt = entry["mountpoints"][0]
    return Path(mnt) if mnt else None


def parse_lsblk_json(output: str) -> List[BlockDevice]:
    try:
        data = json.loads(output)
        return [
            BlockDevice(name=e["name"], label=e.get("label") or None, mountpoint=_mountpoint_of(e))
            for e in _flatten(data["blockdevices"])
        ]
    except (ValueError, KeyError, TypeError, AttributeError) as e:
        raise DeviceQueryError(f"Unexpected lsblk output: {e!r}") from e


def list_block_devices() -> List[BlockDevice]:
    command = ["lsblk", "-J", "-p", "-o", LSBLK_COLUMNS]
    try:
        res = subprocess.run(command, stdout=subprocess.PIPE, stderr=subprocess.PIPE, universal_newlines=True)
    except OSError as e:
        raise DeviceQueryError(f"Failed to run lsblk: {e}") from e
    if res.returncode != 0:
        raise DeviceQueryError(f"lsblk failed with status {res.returncode}: {res.stderr.strip()}")
    return parse_lsblk_json(res.stdout)


def find_usb_device(devices: Iterable[BlockDevice], patterns: Iterable[str]) -> Optional[BlockDevice]:
    """Return the first device whose label contains every pattern, ignoring case."""
    wanted = [p.lower() for p in patterns]
    for dev in devices:
        if not dev.label:
            continue
        label = dev.label.lower()
        if all(p in label for p in wanted):
            return dev
    return None


def find_device(devices: Iterable[BlockDevice], name: str) -> Optional[BlockDevice]:
    for dev in devices:
        if dev.name == name:
            return dev
    return None


def human_size(num_bytes: int) -> str:
    """Format a byte count the way ``df -h`` does (1024-based, rounded up)."""
    units = ("B", "K", "M", "G", "T", "P", "E")
    value = float(num_bytes)
    idx = 0
    while value >= 1024 and idx < len(units) - 1:
        value /= 1024
        idx += 1
    if idx == 0:
        return f"{int(value)}B"
    if value < 10:
        tenths = math.ceil(value * 10) / 10
        if tenths < 10:
            return f"{tenths:.1f}{units[idx]}"
    rounded = math.ceil(value)
    if rounded >= 1024 and idx < len(units) - 1:
        # Rounding up crossed into the next unit, as df prints 1.0M, not 1024K.
        return f"1.0{units[idx + 1]}"
    return f"{rounded}{units[idx]}"


def usb_stats(device: BlockDevice, mount_point: Path, logger: Optional[logging.Logger] = None) -> UsbStats:
    log = logger or logging.getLogger("odoo_usb_backup")
    try:
        usage = shutil.disk_usage(str(mount_point))
        size, available = human_size(usage.total), human_size(usage.free)
    except OSError as e:
        log.warning("Could not read disk usage of [%s]: %s", mount_point, e)
        size = available = "unknown"
    return UsbStats(label=device.label or "", size=size, available=available)


__all__ = [
    "BlockDevice",
    "UsbStats",
    "parse_lsblk_json",
    "list_block_devices",
    "find_usb_device",
    "find_device",
    "human_size",
    "usb_stats",
]
