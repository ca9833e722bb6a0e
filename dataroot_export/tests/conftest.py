from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest

from dataroot_export.config import Settings
from dataroot_export.services.backup import BackupManager
from dataroot_export.services.paths import PathResolver

FIXED_NOW = datetime(2024, 2, 1, 15, 4, 5)


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch):
    """Keep developer DATAROOT_EXPORT_* variables out of the tests."""
    import os

    for key in list(os.environ):
        if key.upper().startswith("DATAROOT_EXPORT_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def dataroot(tmp_path: Path) -> Path:
    root = tmp_path / "dataroot"
    root.mkdir()
    return root


@pytest.fixture
def resolver(dataroot: Path, fixed_clock) -> PathResolver:
    return PathResolver(dataroot, clock=fixed_clock)


@pytest.fixture
def backups(fixed_clock) -> BackupManager:
    return BackupManager(clock=fixed_clock)


@pytest.fixture
def app_settings(dataroot: Path) -> Settings:
    return Settings(dataroot=dataroot)


@pytest.fixture
def source_dir(tmp_path: Path) -> Path:
    sources = tmp_path / "sources"
    sources.mkdir()
    return sources


@pytest.fixture
def make_source(source_dir: Path):
    def _make(name: str, content: str = "payload") -> Path:
        path = source_dir / name
        path.write_text(content, encoding="utf-8")
        return path

    return _make
