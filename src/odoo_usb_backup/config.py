#
# config.py
# Odoo USB Backup
#
# Defines dataclasses for the source, mount and log paths plus runtime settings so a backup run can be configured and reused across runs and tests.
#
"""Configuration objects for the Odoo USB backup run.

The defaults mirror the production host. A BackupConfig bundles filesystem
paths and runtime settings, making it easy to point a run at temporary
directories during testing.
"""
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple

SCRIPT_NAME = "lp-fd-rsync"


@dataclass
class Paths:
    source_root: Path = Path("/var/lib/rancher/k3s/storage/")
    mount_point: Path = Path("/mnt/odoo_backup")
    log_file: Path = Path("/var/log/odoo_backup.log")

    def __post_init__(self):
        # Normalize inputs to Path objects even when callers pass strings.
        self.source_root = Path(self.source_root)
        self.mount_point = Path(self.mount_point)
        self.log_file = Path(self.log_file)


@dataclass
class Settings:
    source_folder_pattern: str = "*odoo-community_local-backups*"
    usb_label_patterns: Tuple[str, ...] = ("odoo", "backup")
    max_log_lines: int = 10_000
    required_bins: Tuple[str, ...] = ("lsblk", "rsync", "mount", "umount")
    rsync_options: Tuple[str, ...] = ("-av", "--progress")
    console_level: int = logging.INFO


@dataclass
class BackupConfig:
    paths: Paths = field(default_factory=Paths)
    settings: Settings = field(default_factory=Settings)


DEFAULT_CONFIG = BackupConfig()
