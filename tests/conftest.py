#
# conftest.py
# Odoo USB Backup
#
# Creates reusable pytest fixtures that set up a temporary backup configuration, a source tree and a clean logger for tests.
#
import logging

import pytest

from odoo_usb_backup.config import BackupConfig, Paths, Settings
from odoo_usb_backup.logging_setup import LOGGER_NAME

SOURCE_FOLDER = "pvc-4f1c_odoo_odoo-community_local-backups"


@pytest.fixture
def temp_config(tmp_path):
    paths = Paths(
        source_root=tmp_path / "storage",
        mount_point=tmp_path / "mnt" / "odoo_backup",
        log_file=tmp_path / "log" / "odoo_backup.log",
    )
    # No binary checks by default; tests that need them set required_bins.
    settings = Settings(required_bins=())
    config = BackupConfig(paths=paths, settings=settings)

    paths.source_root.mkdir(parents=True, exist_ok=True)
    return config


@pytest.fixture
def source_tree(temp_config):
    root = temp_config.paths.source_root / SOURCE_FOLDER
    (root / "daily").mkdir(parents=True)
    (root / "odoo_2026-10-17.zip").write_bytes(bytes(range(256)) * 64)
    (root / "daily" / "odoo_2026-10-18.dump").write_bytes(b"\x00\x01dump\xff" * 100)
    (root / "README").write_text("local backups\n")
    return root


@pytest.fixture(autouse=True)
def reset_backup_logger():
    yield
    # setup_logging reuses existing handlers, so drop them between tests.
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
