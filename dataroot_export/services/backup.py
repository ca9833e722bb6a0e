"""Pre-overwrite backups of export destination files."""

from __future__ import annotations

import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import Optional

from dataroot_export.errors import BackupFailed
from dataroot_export.models import ExportSettings
from dataroot_export.services.logging import get_logger, phase_extra
from dataroot_export.services.paths import Clock

BACKUP_MARKER = "bak"
_STAMP_FORMAT = "%Y%m%d_%H%M%S"

_logger = get_logger(__name__)


class BackupManager:
    """Copy files that are about to be replaced into a sibling backup folder."""

    def __init__(
        self,
        backup_dir_name: str = "backup",
        *,
        clock: Optional[Clock] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.backup_dir_name = backup_dir_name
        self.clock: Clock = clock or datetime.now
        self.logger = logger or _logger

    def backup_path_for(self, path: Path, now: Optional[datetime] = None) -> Path:
        """Location a backup of ``path`` taken at ``now`` is written to."""
        stamp = (now or self.clock()).strftime(_STAMP_FORMAT)
        return path.parent / self.backup_dir_name / f"{path.name}.{stamp}.{BACKUP_MARKER}"

    def create_backup(self, path: Path, settings: ExportSettings) -> Optional[Path]:
        """
        Back up ``path`` when the settings require it.

        Returns the backup location, or ``None`` when no backup was needed.
        Raises :class:`BackupFailed` when the copy cannot be completed.
        """
        if not settings.backup_before_overwrite or not path.exists():
            return None

        backup_path = _first_free(self.backup_path_for(path))
        try:
            backup_path.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(path, backup_path)
        except OSError as exc:
            self.logger.error(
                "Failed to back up %s to %s: %s",
                path,
                backup_path,
                exc,
                extra=phase_extra("backup", path=str(path)),
            )
            raise BackupFailed(f"Failed to back up {path}: {exc}") from exc

        self.logger.info(
            "Backed up %s to %s",
            path,
            backup_path,
            extra=phase_extra("backup", path=str(path)),
        )
        return backup_path

    def backup_if_needed(self, path: Path, settings: ExportSettings) -> bool:
        """Return ``False`` when a required backup could not be taken."""
        try:
            self.create_backup(path, settings)
        except BackupFailed:
            return False
        return True


def _first_free(candidate: Path) -> Path:
    if not candidate.exists():
        return candidate
    counter = 1
    while True:
        numbered = candidate.with_name(f"{candidate.name}.{counter}")
        if not numbered.exists():
            return numbered
        counter += 1


__all__ = ["BACKUP_MARKER", "BackupManager"]
