#
# runner.py
# Odoo USB Backup
#
# Coordinates one full backup run: rotating the log, checking binaries, locating the source folder and USB volume, mounting, syncing and unmounting.
#
"""Run a single backup cycle."""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional, Tuple

from .binaries import check_required_binaries
from .config import BackupConfig, DEFAULT_CONFIG
from .devices import BlockDevice, find_device, find_usb_device, list_block_devices, usb_stats
from .errors import DeviceNotFoundError, MountError, SourceNotFoundError, SyncError
from .fs_utils import ensure_mount_point, find_source_folder
from .logging_setup import bracket, rotate_log, setup_logging
from .mount import mount, umount
from .sync import run_rsync


def _labels_text(patterns) -> str:
    return " and ".join(f"'{p}'" for p in patterns)


def locate_source_folder(config: BackupConfig, log: logging.Logger) -> Path:
    root = config.paths.source_root
    pattern = config.settings.source_folder_pattern
    log.info("Searching for pattern %s folder in %s...", bracket(pattern), bracket(root))
    source_dir = find_source_folder(root, pattern)
    if source_dir is None:
        raise SourceNotFoundError(f"No folder inside {bracket(root)} with pattern {bracket(pattern)} found")
    log.info("-> Found source folder: %s", bracket(source_dir))
    return source_dir


def locate_usb_device(config: BackupConfig, log: logging.Logger) -> BlockDevice:
    patterns = config.settings.usb_label_patterns
    log.info("Searching for USB drive with volume containing %s...", _labels_text(patterns))
    device = find_usb_device(list_block_devices(), patterns)
    if device is None:
        raise DeviceNotFoundError(f"No USB drive with volume containing both {_labels_text(patterns)} found")
    log.info("-> Found in %s !", bracket(device.name))
    return device


def attach_usb_device(device: BlockDevice, config: BackupConfig, log: logging.Logger) -> Tuple[Path, bool]:
    """
    Return ``(mount_point, mounted_here)``.

    An already mounted volume is used where it is; otherwise it is mounted on
    the configured mount point and ``mounted_here`` is True.
    """
    # Re-query so a mount made since detection is not mounted twice.
    current = find_device(list_block_devices(), device.name) or device
    if current.mountpoint is not None:
        log.debug("USB device %s already mounted at %s", bracket(device.name), bracket(current.mountpoint))
        return current.mountpoint, False

    mount_point = config.paths.mount_point
    if not mount_point.is_dir():
        log.info("Creating mount point %s...", bracket(mount_point))
        ensure_mount_point(mount_point)
        log.info("-> Mount point %s created successfully", bracket(mount_point))

    if os.geteuid() != 0:
        log.warning("Not running as root; mounting %s may be refused", bracket(device.name))

    log.info("Mounting USB device %s to %s...", device.name, bracket(mount_point))
    try:
        mount(device.name, mount_point)
    except MountError as e:
        raise MountError(f"Failed to mount USB device {device.name} to {bracket(mount_point)}: {e}") from e
    return mount_point, True


def log_usb_stats(device: BlockDevice, mount_point: Path, log: logging.Logger):
    stats = usb_stats(device, mount_point, logger=log)
    log.info(
        "-> Looking at USB device: %s, Label: %s, Size: %s, Available: %s, mounted at: %s",
        device.name,
        bracket(stats.label),
        bracket(stats.size),
        bracket(stats.available),
        bracket(mount_point),
    )


def detach_usb_device(mount_point: Path, log: logging.Logger):
    log.info("Unmounting USB device from %s...", bracket(mount_point))
    try:
        umount(mount_point)
    except MountError as e:
        raise MountError(f"Failed to unmount USB device from {bracket(mount_point)}: {e}") from e
    log.info("-> USB device unmounted successfully from %s", bracket(mount_point))


def run_once(config: BackupConfig = DEFAULT_CONFIG, logger: Optional[logging.Logger] = None):
    log = logger or setup_logging(config)
    # Trim before anything else is written this run.
    rotate_log(config, logger=log)

    log.info("Starting Odoo backup script...")
    check_required_binaries(config.settings.required_bins, logger=log)

    source_dir = locate_source_folder(config, log)
    device = locate_usb_device(config, log)
    mount_point, mounted_here = attach_usb_device(device, config, log)
    log_usb_stats(device, mount_point, log)

    log.info("Starting rsync from %s to %s", bracket(source_dir), bracket(mount_point))
    try:
        run_rsync(source_dir, mount_point, config.settings.rsync_options, logger=log)
    except SyncError:
        if mounted_here:
            log.info("Unmounting USB device from %s due to rsync failure...", bracket(mount_point))
            try:
                umount(mount_point)
                log.info("-> USB device unmounted successfully from %s", bracket(mount_point))
            except MountError as e:
                # The sync failure stays the reported error.
                log.error("Failed to unmount USB device from %s: %s", bracket(mount_point), e)
        raise
    log.info("Rsync completed successfully")

    if mounted_here:
        detach_usb_device(mount_point, log)

    log.info("Backup script completed")


__all__ = [
    "run_once",
    "locate_source_folder",
    "locate_usb_device",
    "attach_usb_device",
    "detach_usb_device",
    "log_usb_stats",
]
