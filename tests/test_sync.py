#
# test_sync.py
# Odoo USB Backup
#
# Validates the rsync command line and, when rsync is installed, a real mirror of a source tree.
#
import filecmp
import os
import shutil

import pytest

from odoo_usb_backup.errors import SyncError
from odoo_usb_backup.sync import build_rsync_command, progress_line, run_rsync

needs_rsync = pytest.mark.skipif(shutil.which("rsync") is None, reason="rsync not installed")


def _assert_same_tree(left, right):
    cmp = filecmp.dircmp(str(left), str(right))
    assert not cmp.left_only
    files = [p.relative_to(left) for p in left.rglob("*") if p.is_file()]
    for rel in files:
        assert (right / rel).read_bytes() == (left / rel).read_bytes()


def test_build_rsync_command_copies_contents(tmp_path):
    cmd = build_rsync_command(tmp_path / "src", tmp_path / "dst/", ("-av", "--progress"))
    assert cmd == ["rsync", "-av", "--progress", f"{tmp_path}/src/", f"{tmp_path}/dst/"]


@needs_rsync
def test_run_rsync_mirrors_tree(source_tree, tmp_path, caplog):
    dest = tmp_path / "usb"
    dest.mkdir()
    (dest / "older.zip").write_bytes(b"kept")
    caplog.set_level("DEBUG")

    run_rsync(source_tree, dest, ("-a", "-v"))

    _assert_same_tree(source_tree, dest)
    # Nothing is deleted on the drive.
    assert (dest / "older.zip").read_bytes() == b"kept"
    assert "rsync: " in caplog.text


@needs_rsync
def test_run_rsync_failure(tmp_path):
    with pytest.raises(SyncError, match="status"):
        run_rsync(tmp_path / "does-not-exist", tmp_path / "usb", ("-a",))


def test_progress_line_keeps_last_update():
    assert progress_line(b"odoo.zip\r  1%\r 25%\r100%\n") == "100%"
    assert progress_line(b"sending incremental file list\n") == "sending incremental file list"
    assert progress_line(b"\r\n") == ""


def test_run_rsync_logs_one_record_per_line(tmp_path, monkeypatch, caplog):
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    fake = bin_dir / "rsync"
    fake.write_text(
        "#!/bin/sh\n"
        "printf 'sending incremental file list\\n'\n"
        "printf 'odoo.zip\\r  1%%\\r 25%%\\r 50%%\\r 75%%\\r100%%\\n'\n"
    )
    fake.chmod(0o755)
    monkeypatch.setenv("PATH", f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}")
    caplog.set_level("DEBUG")

    run_rsync(tmp_path / "src", tmp_path / "dst")

    records = [r.getMessage() for r in caplog.records if r.getMessage().startswith("rsync: ")]
    assert records == ["rsync: sending incremental file list", "rsync: 100%"]
