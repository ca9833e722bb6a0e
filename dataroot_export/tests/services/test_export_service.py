from __future__ import annotations

from pathlib import Path

import pytest

from dataroot_export.errors import AvailabilityError
from dataroot_export.models import DeliveryStatus, ExportSettings, FileBatch, RowBatch
from dataroot_export.services import ExportService


@pytest.fixture
def service(app_settings, fixed_clock) -> ExportService:
    return ExportService(app_settings, clock=fixed_clock)


def test_export_files_creates_destination_and_copies(service, dataroot, make_source):
    target = ExportSettings(base_path="exports", create_if_missing=True)
    result = service.export_files([make_source("a.txt", "A")], target)

    assert result.success is True
    assert (dataroot / "exports" / "a.txt").read_text(encoding="utf-8") == "A"


def test_export_files_uses_configured_target(dataroot, make_source, fixed_clock, tmp_path):
    from dataroot_export.config import Settings

    settings = Settings(
        dataroot=dataroot,
        target=ExportSettings(base_path="configured", create_if_missing=True),
    )
    result = ExportService(settings, clock=fixed_clock).export_files([make_source("a.txt")])
    assert result.outcomes[0].dest_path == dataroot / "configured" / "a.txt"


def test_unavailable_destination_aborts_the_job(service, make_source, dataroot):
    with pytest.raises(AvailabilityError):
        service.export_files([make_source("a.txt")], ExportSettings(base_path="missing"))
    with pytest.raises(AvailabilityError):
        service.export_rows([{"a": 1}], ExportSettings(base_path="missing", file_name="r.csv"))
    assert not (dataroot / "missing").exists()


def test_export_rows(service, dataroot):
    target = ExportSettings(base_path="rows", create_if_missing=True, file_name="r.csv")
    assert service.export_rows([{"a": 1, "b": "x"}], target) is True
    assert (dataroot / "rows" / "r.csv").read_text(encoding="utf-8") == "1,x\n"


def test_run_dispatches_on_batch_type(service, dataroot, make_source):
    target = ExportSettings(file_name="r.csv")

    file_result = service.run(FileBatch(paths=[make_source("a.txt")]), target)
    row_result = service.run(RowBatch(rows=[{"a": 1}]), target)

    assert file_result.outcomes[0].status is DeliveryStatus.COPIED
    # One file with a configured name is delivered under that name.
    assert file_result.outcomes[0].dest_path == dataroot / "r.csv"
    assert row_result is True


def test_run_rejects_unknown_batches(service):
    with pytest.raises(TypeError):
        service.run(["not", "a", "batch"])  # type: ignore[arg-type]


def test_backups_use_configured_folder(dataroot, make_source, fixed_clock):
    from dataroot_export.config import Settings

    settings = Settings(dataroot=dataroot, backup_dir_name="history")
    (dataroot / "a.txt").write_text("old", encoding="utf-8")
    ExportService(settings, clock=fixed_clock).export_files([make_source("a.txt", "new")])
    backups = list((dataroot / "history").iterdir())
    assert [path.read_text(encoding="utf-8") for path in backups] == ["old"]
    assert isinstance(backups[0], Path)
