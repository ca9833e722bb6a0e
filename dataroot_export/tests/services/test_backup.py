from __future__ import annotations

import shutil
from datetime import datetime
from pathlib import Path

import pytest

from dataroot_export.errors import BackupFailed
from dataroot_export.models import ExportSettings
from dataroot_export.services.backup import BackupManager


def test_no_backup_when_disabled(backups, dataroot):
    target = dataroot / "a.txt"
    target.write_text("old", encoding="utf-8")
    assert backups.backup_if_needed(target, ExportSettings(backup_before_overwrite=False))
    assert not (dataroot / "backup").exists()


def test_no_backup_when_file_missing(backups, dataroot):
    assert backups.backup_if_needed(dataroot / "missing.txt", ExportSettings())
    assert backups.create_backup(dataroot / "missing.txt", ExportSettings()) is None
    assert not (dataroot / "backup").exists()


def test_backup_copies_existing_file_to_sibling_folder(backups, dataroot):
    target = dataroot / "a.txt"
    target.write_text("old", encoding="utf-8")

    backup_path = backups.create_backup(target, ExportSettings())

    assert backup_path == dataroot / "backup" / "a.txt.20240201_150405.bak"
    assert backup_path == backups.backup_path_for(target)
    assert backup_path.read_text(encoding="utf-8") == "old"
    assert target.read_text(encoding="utf-8") == "old"


def test_backups_taken_in_the_same_second_do_not_clobber(backups, dataroot):
    target = dataroot / "a.txt"
    target.write_text("first", encoding="utf-8")
    first = backups.create_backup(target, ExportSettings())
    target.write_text("second", encoding="utf-8")
    second = backups.create_backup(target, ExportSettings())

    assert first != second
    assert first.read_text(encoding="utf-8") == "first"
    assert second.read_text(encoding="utf-8") == "second"


def test_backup_dir_name_is_configurable(dataroot):
    manager = BackupManager("previous", clock=lambda: datetime(2024, 1, 1))
    target = dataroot / "a.txt"
    target.write_text("old", encoding="utf-8")
    assert manager.create_backup(target, ExportSettings()).parent == dataroot / "previous"


def test_failed_copy_is_reported(backups, dataroot, monkeypatch, caplog):
    target = dataroot / "a.txt"
    target.write_text("old", encoding="utf-8")

    def _denied(src, dst, *args, **kwargs):
        raise PermissionError("denied")

    monkeypatch.setattr(shutil, "copy2", _denied)

    with pytest.raises(BackupFailed):
        backups.create_backup(target, ExportSettings())
    assert backups.backup_if_needed(target, ExportSettings()) is False
    assert any(record.phase == "backup" for record in caplog.records if record.levelname == "ERROR")
    assert target.read_text(encoding="utf-8") == "old"


def test_backup_path_uses_original_name(backups):
    path = Path("/data/out/report.csv")
    assert backups.backup_path_for(path).name.startswith("report.csv.")
    assert backups.backup_path_for(path).suffix == ".bak"
