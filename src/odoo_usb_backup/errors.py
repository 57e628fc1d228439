#
# errors.py
# Odoo USB Backup
#
# Exception types raised by each step of a backup run; the entry point turns any of them into an error log line and exit status 1.
#
"""Exceptions that abort a backup run."""


class BackupError(Exception):
    """Base class for every failure detected during a run."""


class LogFileError(BackupError):
    """The log file could not be created or trimmed."""


class MissingBinaryError(BackupError):
    pass


class SourceNotFoundError(BackupError):
    pass


class DeviceQueryError(BackupError):
    """lsblk failed or printed something we could not parse."""


class DeviceNotFoundError(BackupError):
    pass


class MountError(BackupError):
    """Raised when the mount point cannot be prepared or mount/umount fails."""


class SyncError(BackupError):
    pass


__all__ = [
    "BackupError",
    "LogFileError",
    "MissingBinaryError",
    "SourceNotFoundError",
    "DeviceQueryError",
    "DeviceNotFoundError",
    "MountError",
    "SyncError",
]
