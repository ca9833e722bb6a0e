from __future__ import annotations

import os
from pathlib import Path
import textwrap

import pytest

from dataroot_export.config import Settings, load_settings
from dataroot_export.errors import ConfigurationError
from dataroot_export.models import ExportSettings, TimestampFormat


def test_load_settings_reads_yaml_paths(tmp_path: Path) -> None:
    config_path = tmp_path / "basic.yaml"
    dataroot = tmp_path / "data-root"
    config_path.write_text(
        textwrap.dedent(
            f"""
            dataroot: {dataroot}
            backup_dir_name: previous
            show_progress: true
            """
        ),
        encoding="utf-8",
    )

    settings = load_settings(yaml_path=config_path)

    assert settings.dataroot == dataroot
    assert settings.backup_dir_name == "previous"
    assert settings.show_progress is True
    assert settings.target == ExportSettings()


def test_load_settings_reads_target_options(tmp_path: Path) -> None:
    config_path = tmp_path / "target.yaml"
    config_path.write_text(
        textwrap.dedent(
            """
            target:
              path: exports/daily
              createIfNotExist: true
              fileName: report.csv
              overwrite: false
              appendTimestamp: true
              timestampDelimiter: "_"
              timestampFormat: ydm_hi
              backupFiles: false
            """
        ),
        encoding="utf-8",
    )

    target = load_settings(yaml_path=config_path).target

    assert target.base_path == "exports/daily"
    assert target.create_if_missing is True
    assert target.file_name == "report.csv"
    assert target.overwrite is False
    assert target.append_timestamp is True
    assert target.timestamp_delimiter == "_"
    assert target.timestamp_format is TimestampFormat.YDM_SHORT_SEPARATED
    assert target.backup_before_overwrite is False


def test_overrides_take_precedence_over_yaml(tmp_path: Path) -> None:
    config_path = tmp_path / "override.yaml"
    config_path.write_text(
        textwrap.dedent(
            """
            target:
              path: from-yaml
              overwrite: false
            """
        ),
        encoding="utf-8",
    )

    settings = load_settings(
        yaml_path=config_path,
        overrides={"dataroot": tmp_path, "target": {"base_path": "from-cli"}},
    )

    assert settings.dataroot == tmp_path
    assert settings.target.base_path == "from-cli"
    # Options not overridden keep their YAML value.
    assert settings.target.overwrite is False


def test_environment_variables_are_read(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("DATAROOT_EXPORT_DATAROOT", str(tmp_path))
    monkeypatch.setenv("DATAROOT_EXPORT_TARGET__OVERWRITE", "false")

    settings = load_settings()

    assert settings.dataroot == tmp_path
    assert settings.target.overwrite is False


def test_yaml_overrides_environment(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("DATAROOT_EXPORT_BACKUP_DIR_NAME", "from-env")
    config_path = tmp_path / "env.yaml"
    config_path.write_text("backup_dir_name: from-yaml\n", encoding="utf-8")

    assert load_settings(yaml_path=config_path).backup_dir_name == "from-yaml"


def test_env_file_is_loaded(tmp_path: Path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("DATAROOT_EXPORT_LOG_LEVEL=DEBUG\n", encoding="utf-8")
    try:
        settings = load_settings(env_file=env_file)
    finally:
        os.environ.pop("DATAROOT_EXPORT_LOG_LEVEL", None)

    assert settings.log_level == "DEBUG"


def test_invalid_target_is_a_configuration_error(tmp_path: Path) -> None:
    config_path = tmp_path / "invalid.yaml"
    config_path.write_text(
        textwrap.dedent(
            """
            target:
              createIfNotExist: true
              path: ""
            """
        ),
        encoding="utf-8",
    )

    with pytest.raises(ConfigurationError):
        load_settings(yaml_path=config_path)


def test_yaml_root_must_be_a_mapping(tmp_path: Path) -> None:
    config_path = tmp_path / "list.yaml"
    config_path.write_text("- one\n- two\n", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_settings(yaml_path=config_path)


def test_missing_yaml_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_settings(yaml_path=tmp_path / "absent.yaml")


def test_merge_overrides_accepts_export_settings(tmp_path: Path) -> None:
    settings = Settings(dataroot=tmp_path)
    target = ExportSettings(base_path="x", overwrite=False)
    merged = settings.merge_overrides({"target": target})
    assert merged.target == target
    assert settings.merge_overrides({}) is settings


def test_backup_dir_name_must_be_plain(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError):
        Settings.from_dict({"dataroot": tmp_path, "backup_dir_name": "../escape"})


def test_default_dataroot_is_absolute(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.delenv("DATAROOT_EXPORT_DATAROOT", raising=False)
    monkeypatch.chdir(tmp_path)
    settings = Settings.from_dict({})
    assert settings.dataroot.is_absolute()
    assert settings.dataroot == (tmp_path / "dataroot").resolve()
