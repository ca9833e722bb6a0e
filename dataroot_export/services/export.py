"""Job-level entry point tying the export target components together."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, Optional, Sequence, Union

from dataroot_export.config import Settings
from dataroot_export.models import BatchResult, ExportBatch, ExportSettings, FileBatch, RowBatch
from dataroot_export.services.availability import AvailabilityChecker
from dataroot_export.services.backup import BackupManager
from dataroot_export.services.delivery import FileDeliverer
from dataroot_export.services.logging import get_logger
from dataroot_export.services.paths import Clock, PathResolver
from dataroot_export.services.rows import RowSerializer


logger = get_logger(__name__)


class ExportService:
    """Run export jobs against the configured dataroot."""

    def __init__(
        self,
        settings: Settings,
        *,
        clock: Optional[Clock] = None,
        log: Optional[logging.Logger] = None,
    ) -> None:
        self.settings = settings
        sink = log or logger
        self.resolver = PathResolver(settings.dataroot, clock=clock)
        self.backups = BackupManager(settings.backup_dir_name, clock=clock, logger=sink)
        self.availability = AvailabilityChecker(self.resolver, logger=sink)
        self.deliverer = FileDeliverer(
            self.resolver,
            self.backups,
            logger=sink,
            show_progress=settings.show_progress,
        )
        self.serializer = RowSerializer(self.resolver, self.backups, logger=sink)

    def _target(self, target: Optional[ExportSettings]) -> ExportSettings:
        return target if target is not None else self.settings.target

    def export_files(
        self,
        paths: Sequence[Union[str, Path]],
        target: Optional[ExportSettings] = None,
    ) -> BatchResult:
        """Deliver ``paths`` after checking the destination is writable."""
        target = self._target(target)
        self.availability.require_available(target)
        return self.deliverer.deliver(paths, target)

    def export_rows(
        self,
        rows: Iterable[Any],
        target: Optional[ExportSettings] = None,
    ) -> bool:
        """Serialize ``rows`` after checking the destination is writable."""
        self.write_rows(rows, target)
        return True

    def write_rows(
        self,
        rows: Iterable[Any],
        target: Optional[ExportSettings] = None,
    ) -> Optional[Path]:
        """Like :meth:`export_rows` but return the written file, ``None`` if skipped."""
        target = self._target(target)
        self.availability.require_available(target)
        return self.serializer.serialize(rows, target)

    def run(
        self,
        batch: ExportBatch,
        target: Optional[ExportSettings] = None,
    ) -> Union[BatchResult, bool]:
        """Dispatch a file or row batch to the matching export operation."""
        if isinstance(batch, FileBatch):
            return self.export_files(batch.paths, target)
        if isinstance(batch, RowBatch):
            return self.export_rows(batch.rows, target)
        raise TypeError(f"Unsupported export batch: {type(batch).__name__}")


__all__ = ["ExportService"]
