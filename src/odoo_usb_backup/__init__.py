#
# __init__.py
# Odoo USB Backup
#
# Package initializer exporting the config dataclass, the error base class and the single-run entry point.
#
"""Odoo Community local-backup to USB mirroring."""
from .config import BackupConfig, DEFAULT_CONFIG
from .errors import BackupError
from .runner import run_once

__all__ = ["BackupConfig", "DEFAULT_CONFIG", "BackupError", "run_once"]
