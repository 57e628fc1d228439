#
# binaries.py
# Odoo USB Backup
#
# Verifies that every external command the run shells out to is available on PATH before any work starts.
#
"""Required binary checks."""
from __future__ import annotations

import logging
import shutil
from typing import Dict, Iterable, Optional

from .errors import MissingBinaryError
from .logging_setup import LOGGER_NAME, bracket


def check_required_binaries(names: Iterable[str], logger: Optional[logging.Logger] = None) -> Dict[str, str]:
    log = logger or logging.getLogger(LOGGER_NAME)
    log.info("Checking for required binaries...")
    found = {}
    for name in names:
        resolved = shutil.which(name)
        if resolved is None:
            raise MissingBinaryError(f"Required binary {bracket(name)} not found; please install it")
        log.info("-> Found binary: %s", bracket(name))
        found[name] = resolved
    return found


__all__ = ["check_required_binaries"]
