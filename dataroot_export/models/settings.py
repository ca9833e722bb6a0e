"""Immutable per-job export settings."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Any, Mapping

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from dataroot_export.errors import ConfigurationError

from .formats import DEFAULT_TIMESTAMP_FORMAT, TimestampFormat


class ExportSettings(BaseModel):
    """
    Settings for a single export job.

    Every field can be supplied under its Python name, the camel-case option
    name used by the configuration surface (``path``, ``createIfNotExist``,
    ``fileName``, ...) or the legacy lower-case key stored by older target
    configurations (``clreateifnotexist``, ``addtime``, ``dateformat``, ...).

    Invalid values raise :class:`~dataroot_export.errors.ConfigurationError`.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    base_path: str = Field(
        default="",
        validation_alias=AliasChoices("base_path", "path"),
        description="Destination directory relative to the dataroot",
    )
    create_if_missing: bool = Field(
        default=False,
        validation_alias=AliasChoices(
            "create_if_missing",
            "createIfNotExist",
            "clreateifnotexist",
        ),
        description="Create the destination directory when it does not exist",
    )
    file_name: str = Field(
        default="",
        validation_alias=AliasChoices("file_name", "fileName", "filename"),
        description="File name used for single-file and row exports",
    )
    overwrite: bool = Field(
        default=True,
        description="Overwrite destination files that already exist",
    )
    append_timestamp: bool = Field(
        default=False,
        validation_alias=AliasChoices("append_timestamp", "appendTimestamp", "addtime"),
        description="Append the current time to exported file names",
    )
    timestamp_delimiter: str = Field(
        default="",
        validation_alias=AliasChoices(
            "timestamp_delimiter",
            "timestampDelimiter",
            "delimiter",
        ),
        description="String placed between the file name and the timestamp",
    )
    timestamp_format: TimestampFormat = Field(
        default=DEFAULT_TIMESTAMP_FORMAT,
        validation_alias=AliasChoices(
            "timestamp_format",
            "timestampFormat",
            "dateformat",
        ),
        description="Date pattern used for the timestamp suffix",
    )
    backup_before_overwrite: bool = Field(
        default=True,
        validation_alias=AliasChoices(
            "backup_before_overwrite",
            "backupFiles",
            "backupfiles",
        ),
        description="Back up existing files before they are overwritten",
    )

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid export settings: {exc}") from exc

    @field_validator("base_path", mode="before")
    @classmethod
    def _normalize_base_path(cls, value: Any) -> str:
        if value is None:
            return ""
        raw = str(value).strip().replace("\\", "/")
        if raw.startswith("/"):
            raise ValueError("path must be relative to the dataroot")
        parts = [part for part in PurePosixPath(raw).parts if part not in ("", ".")]
        if ".." in parts:
            raise ValueError("path must not leave the dataroot")
        return "/".join(parts)

    @field_validator("file_name", mode="before")
    @classmethod
    def _check_file_name(cls, value: Any) -> str:
        if value is None:
            return ""
        name = str(value).strip()
        if "/" in name or "\\" in name or name in (".", ".."):
            raise ValueError("file name must not contain path separators")
        return name

    @field_validator("timestamp_delimiter", mode="before")
    @classmethod
    def _check_delimiter(cls, value: Any) -> str:
        if value is None:
            return ""
        delimiter = str(value)
        if "/" in delimiter or "\\" in delimiter:
            raise ValueError("timestamp delimiter must not contain path separators")
        return delimiter

    @model_validator(mode="after")
    def _require_path_for_creation(self) -> "ExportSettings":
        if self.create_if_missing and not self.base_path:
            raise ValueError("path can not be empty when create_if_missing is enabled")
        return self

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "ExportSettings":
        """Build settings from a mapping of configuration options."""
        return cls(**dict(options))

    def with_overrides(self, **overrides: Any) -> "ExportSettings":
        """Return a validated copy with ``overrides`` applied."""
        if not overrides:
            return self
        payload = self.model_dump()
        payload.update(overrides)
        return type(self)(**payload)


__all__ = ["ExportSettings"]
