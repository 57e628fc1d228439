#!/usr/bin/env python3
#
# lp_fd_rsync.py
# Odoo USB Backup
#
# Entry point that sets up logging and runs one Odoo backup-to-USB cycle, exiting 0 on success and 1 on any failure.
#
"""
Command-line entry point. Takes no arguments; meant to be run from cron or
by hand, usually as root so the USB volume can be mounted.
"""
from __future__ import annotations

import sys
from typing import Optional

from odoo_usb_backup.config import DEFAULT_CONFIG, BackupConfig
from odoo_usb_backup.errors import BackupError
from odoo_usb_backup.logging_setup import setup_logging
from odoo_usb_backup.runner import run_once

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


def main(config: Optional[BackupConfig] = None):
    config = config or DEFAULT_CONFIG
    logger = setup_logging(config)
    try:
        run_once(config=config, logger=logger)
    except BackupError as e:
        logger.error("%s", e)
        sys.exit(EXIT_FAILURE)
    except Exception as e:
        logger.exception("Unexpected failure: %s", e)
        sys.exit(EXIT_FAILURE)
    sys.exit(EXIT_SUCCESS)


if __name__ == "__main__":  # pragma: no cover
    main()
