#
# logging_setup.py
# Odoo USB Backup
#
# Configures the log file and stdout handlers shared by the backup run and rotates the log file by line count.
#
"""Logging configuration helpers."""
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from .config import SCRIPT_NAME, BackupConfig
from .errors import LogFileError
from .logfile import trim_log_file

LOGGER_NAME = "odoo_usb_backup"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def bracket(value) -> str:
    return f"[{value}]"


class LevelTagFormatter(logging.Formatter):
    """Prefix warnings and errors with their level name (``ERROR: ...``)."""

    def format(self, record):
        text = super().format(record)
        if record.levelno >= logging.WARNING:
            prefix = f"{record.levelname}: "
            # Keep any bracketed header (timestamp or script tag) in front.
            head, sep, rest = text.partition("] ")
            if sep and text.startswith("["):
                return f"{head}{sep}{prefix}{rest}"
            return prefix + text
        return text


def setup_logging(config: BackupConfig, logger_name: str = LOGGER_NAME) -> logging.Logger:
    """
    Configure an appending file handler + stdout handler.
    Safe to call multiple times; existing handlers are reused.
    """
    logger = logging.getLogger(logger_name)
    if logger.handlers:
        return logger

    logger.setLevel(logging.DEBUG)

    log_file = config.paths.log_file
    # delay=True leaves the file (and its directory) untouched until the first
    # record; rotate_log creates and trims it before anything is written.
    fh = logging.FileHandler(str(log_file), mode="a", encoding="utf-8", delay=True)
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(LevelTagFormatter("[%(asctime)s] %(message)s", datefmt=DATE_FORMAT))

    ch = logging.StreamHandler(sys.stdout)
    ch.setLevel(config.settings.console_level)
    ch.setFormatter(LevelTagFormatter(f"[{SCRIPT_NAME}] %(message)s"))

    logger.addHandler(fh)
    logger.addHandler(ch)
    return logger


def _file_handlers(logger: logging.Logger, log_file: Path):
    target = os.path.abspath(str(log_file))
    return [h for h in logger.handlers if isinstance(h, logging.FileHandler) and h.baseFilename == target]


def _release_file_streams(logger: logging.Logger, log_file: Path):
    for handler in _file_handlers(logger, log_file):
        handler.acquire()
        try:
            # Same as a rollover: the handler reopens the path on its next record.
            if handler.stream:
                handler.stream.close()
                handler.stream = None
        finally:
            handler.release()


def rotate_log(config: BackupConfig, logger: Optional[logging.Logger] = None) -> Optional[int]:
    """
    Trim the log file to ``max_lines`` and record it; returns the pre-trim line count.

    When the log file cannot be created or trimmed its handler is dropped, so
    the resulting ``LogFileError`` is still reported on stdout.
    """
    log = logger or logging.getLogger(LOGGER_NAME)
    max_lines = config.settings.max_log_lines
    _release_file_streams(log, config.paths.log_file)
    try:
        trimmed_from = trim_log_file(config.paths.log_file, max_lines)
    except LogFileError:
        for handler in _file_handlers(log, config.paths.log_file):
            log.removeHandler(handler)
            handler.close()
        raise
    if trimmed_from is not None:
        log.info(
            "Log file exceeded %s lines (%s lines); trimmed to last %s lines",
            bracket(max_lines),
            bracket(trimmed_from),
            bracket(max_lines),
        )
    return trimmed_from


__all__ = ["LOGGER_NAME", "LevelTagFormatter", "bracket", "setup_logging", "rotate_log"]
