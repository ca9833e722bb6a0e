"""Serialize row records into a comma-delimited export file."""

from __future__ import annotations

import csv
import logging
from collections.abc import Mapping
from dataclasses import fields, is_dataclass
from pathlib import Path
from typing import Any, Iterable, List, Optional

from dataroot_export.errors import (
    CannotOpenTarget,
    ConfigurationError,
    RowWriteFailed,
    WriteTargetIsDirectory,
)
from dataroot_export.models import ExportSettings
from dataroot_export.services.backup import BackupManager
from dataroot_export.services.logging import get_logger, phase_extra
from dataroot_export.services.paths import PathResolver

_logger = get_logger(__name__)

PHASE = "load_data"
FIELD_DELIMITER = ","


class RowSerializer:
    """
    Write a batch of rows to the single file named by the export settings.

    Unlike file delivery this is all-or-nothing: the first failure aborts the
    whole batch by raising. An existing destination is left untouched when
    ``overwrite`` is disabled.
    """

    def __init__(
        self,
        resolver: PathResolver,
        backups: BackupManager,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.resolver = resolver
        self.backups = backups
        self.logger = logger or _logger

    def write(self, rows: Iterable[Any], settings: ExportSettings) -> bool:
        """Serialize ``rows``; an intentional skip also counts as success."""
        self.serialize(rows, settings)
        return True

    def serialize(self, rows: Iterable[Any], settings: ExportSettings) -> Optional[Path]:
        """
        Write ``rows`` and return the target file.

        Returns ``None`` when the target exists and ``overwrite`` is off.
        """
        if not settings.file_name:
            self.logger.error(
                "No file name configured for the row export", extra=phase_extra(PHASE)
            )
            raise ConfigurationError("file_name is required to export rows")

        target = self.resolver.target_path(settings, settings.file_name)
        extra = phase_extra(PHASE, path=str(target))

        if target.is_dir():
            self.logger.error("Specified export file path is a dir: %s", target, extra=extra)
            raise WriteTargetIsDirectory(f"Specified export file path is a dir: {target}")

        if target.exists() and not settings.overwrite:
            self.logger.warning("Skip saving rows to %s. File exists.", target, extra=extra)
            return None

        self.backups.create_backup(target, settings)

        try:
            handle = target.open("w", newline="", encoding="utf-8")
        except OSError as exc:
            self.logger.error("Can't open the export file: %s (%s)", target, exc, extra=extra)
            raise CannotOpenTarget(f"Can't open the export file: {target}") from exc

        written = 0
        with handle:
            writer = csv.writer(handle, delimiter=FIELD_DELIMITER, lineterminator="\n")
            for row in rows:
                try:
                    writer.writerow(row_values(row))
                except (csv.Error, OSError, TypeError) as exc:
                    self.logger.error(
                        "Can't write to the export file: %s (row %d: %s)",
                        target,
                        written + 1,
                        exc,
                        extra=extra,
                    )
                    raise RowWriteFailed(f"Can't write to the export file: {target}") from exc
                written += 1

        self.logger.info("Saved %d rows to %s", written, target, extra=extra)
        return target


def row_values(row: Any) -> List[Any]:
    """Flatten a row record into its field values, in field order."""
    if isinstance(row, Mapping):
        return list(row.values())
    if is_dataclass(row) and not isinstance(row, type):
        return [getattr(row, item.name) for item in fields(row)]
    if hasattr(row, "__dict__"):
        return [value for key, value in vars(row).items() if not key.startswith("_")]
    raise TypeError(f"Unsupported row type: {type(row).__name__}")


__all__ = ["FIELD_DELIMITER", "RowSerializer", "row_values"]
