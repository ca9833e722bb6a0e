"""
Configuration for the export engine.
There are three levels of configuration in order of priority
1. cli options
2. yaml config file
3. environment variables
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from dataroot_export.errors import ConfigurationError
from dataroot_export.models import ExportSettings


class Settings(BaseSettings):
    """
    Application configuration with support for:
    - Environment variables (``DATAROOT_EXPORT_`` prefix)
    - YAML configuration file
    - CLI argument overrides

    Precedence: CLI args > YAML config > Environment variables > Defaults
    """

    model_config = SettingsConfigDict(
        env_prefix="DATAROOT_EXPORT_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # ===== Core directories =====
    dataroot: Path = Field(
        default=Path("./dataroot"),
        validate_default=True,
        description="Writable root directory that every export destination lives under",
    )
    backup_dir_name: str = Field(
        default="backup",
        description="Name of the sibling directory receiving pre-overwrite backups",
    )

    # ===== Export target =====
    target: ExportSettings = Field(
        default_factory=ExportSettings,
        description="Naming, collision and backup policy for the export target",
    )

    # ===== Behavior flags =====
    show_progress: bool = Field(
        default=False,
        description="Show tqdm progress bars while delivering files",
    )

    # ===== Logging =====
    log_level: str = Field(
        default="INFO",
        description="Minimum level for emitted log records",
    )
    log_to_file: bool = Field(
        default=False,
        description="Persist logs to ``log_file``",
    )
    log_to_console: bool = Field(
        default=True,
        description="Emit selected logs to the console",
    )
    log_file: Optional[Path] = Field(
        default=None,
        description="Log file path used when ``log_to_file`` is enabled",
    )

    @field_validator("dataroot", mode="before")
    @classmethod
    def _expand_path(cls, value: str | Path) -> Path:
        return Path(value).expanduser().resolve()

    @field_validator("log_file", mode="before")
    @classmethod
    def _expand_optional_path(cls, value: str | Path | None) -> Path | None:
        if value is None:
            return None
        return Path(value).expanduser().resolve()

    @field_validator("backup_dir_name")
    @classmethod
    def _check_backup_dir_name(cls, value: str) -> str:
        value = value.strip()
        if not value or "/" in value or "\\" in value or value in (".", ".."):
            raise ValueError("backup_dir_name must be a plain directory name")
        return value

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> Settings:
        """
        Load settings from a YAML file.

        The YAML file values override defaults and environment variables.

        Parameters
        ----------
        yaml_path : Path
            Path to YAML configuration file

        Returns
        -------
        Settings
            Configured settings instance
        """
        if not yaml_path.exists():
            raise FileNotFoundError(f"Settings file not found: {yaml_path}")

        with yaml_path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}

        if not isinstance(data, dict):
            raise ConfigurationError("Settings YAML must contain a mapping at the root")

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> Settings:
        """
        Create settings from a dictionary.

        Useful for programmatic configuration or CLI argument overrides.
        """
        try:
            return cls(**config_dict)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid settings: {exc}") from exc

    def merge_overrides(self, overrides: Optional[Dict[str, Any]]) -> Settings:
        """
        Create a new Settings instance with specific values overridden.

        A ``target`` entry may be an :class:`ExportSettings` or a partial
        mapping; partial mappings are merged into the current target settings.
        """
        overrides = dict(overrides or {})
        if not overrides:
            return self

        payload = self.model_dump()
        target_payload = payload.pop("target")
        target_overrides = overrides.pop("target", None)
        if isinstance(target_overrides, ExportSettings):
            target_payload = target_overrides.model_dump()
        elif target_overrides:
            target_payload.update(target_overrides)
        payload.update(overrides)
        payload["target"] = target_payload
        return type(self).from_dict(payload)

    def resolved_log_file(self) -> Path:
        """Return the log file path, defaulting to ``./logs/export.log``."""
        if self.log_file is not None:
            return self.log_file
        return Path("./logs/export.log").resolve()


def load_settings(
    yaml_path: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
    env_file: Optional[Path] = None,
) -> Settings:
    """
    Load settings with proper precedence handling.

    Precedence order (highest to lowest):
    1. Overrides (typically from CLI args)
    2. YAML config file
    3. Environment variables (optionally seeded from ``env_file``)
    4. Defaults

    Parameters
    ----------
    yaml_path : Path, optional
        Path to YAML configuration file
    overrides : dict, optional
        Dictionary of override values (typically from CLI)
    env_file : Path, optional
        ``.env`` file loaded into the environment before settings are read

    Returns
    -------
    Settings
        Configured settings instance
    """
    if env_file is not None and env_file.exists():
        load_dotenv(env_file)

    if yaml_path is not None:
        settings = Settings.from_yaml(yaml_path)
    else:
        settings = Settings.from_dict({})

    return settings.merge_overrides(overrides)


__all__ = ["Settings", "load_settings"]
