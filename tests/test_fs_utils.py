#
# test_fs_utils.py
# Odoo USB Backup
#
# Covers the source folder search and mount point preparation.
#
import os

import pytest

from odoo_usb_backup.errors import MountError
from odoo_usb_backup.fs_utils import ensure_mount_point, find_source_folder

PATTERN = "*odoo-community_local-backups*"


def test_find_source_folder_nested(tmp_path):
    target = tmp_path / "pvc-1" / "data" / "x_odoo-community_local-backups_y"
    target.mkdir(parents=True)
    (tmp_path / "pvc-2").mkdir()

    assert find_source_folder(tmp_path, PATTERN) == target


def test_find_source_folder_depth_first_order(tmp_path):
    # Like find, a match deep in an earlier subtree wins over a later sibling.
    deep = tmp_path / "a" / "odoo-community_local-backups-1"
    deep.mkdir(parents=True)
    (tmp_path / "b-odoo-community_local-backups").mkdir()

    assert find_source_folder(tmp_path, PATTERN) == deep


def test_find_source_folder_ignores_files_and_case(tmp_path):
    (tmp_path / "ODOO-COMMUNITY_LOCAL-BACKUPS").mkdir()
    (tmp_path / "odoo-community_local-backups.txt").write_text("x")

    assert find_source_folder(tmp_path, PATTERN) is None


def test_find_source_folder_skips_symlinked_dirs(tmp_path):
    real = tmp_path / "elsewhere" / "odoo-community_local-backups"
    real.mkdir(parents=True)
    root = tmp_path / "root"
    root.mkdir()
    os.symlink(tmp_path / "elsewhere", root / "link")
    os.symlink(real, root / "link-odoo-community_local-backups")

    assert find_source_folder(root, PATTERN) is None


def test_find_source_folder_missing_root(tmp_path):
    assert find_source_folder(tmp_path / "missing", PATTERN) is None


def test_ensure_mount_point(tmp_path):
    mnt = tmp_path / "mnt" / "odoo_backup"
    assert ensure_mount_point(mnt) is True
    assert mnt.is_dir()
    assert ensure_mount_point(mnt) is False


def test_ensure_mount_point_blocked_by_file(tmp_path):
    blocker = tmp_path / "mnt"
    blocker.write_text("not a dir")
    with pytest.raises(MountError):
        ensure_mount_point(blocker / "odoo_backup")
