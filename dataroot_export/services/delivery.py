"""Copy batches of source files into the export target."""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import List, Optional, Sequence, Union

from dataroot_export.errors import BackupFailed, CopyFailed
from dataroot_export.models import BatchResult, DeliveryOutcome, DeliveryStatus, ExportSettings
from dataroot_export.services.backup import BackupManager
from dataroot_export.services.logging import get_logger, phase_extra
from dataroot_export.services.paths import PathResolver
from dataroot_export.utils.progress import create_progress_bar, emit_progress, progress_callback

_logger = get_logger(__name__)

PHASE = "load_data"


class FileDeliverer:
    """
    Deliver source files into the resolved destination directory.

    Files are handled independently and in input order: a file that cannot
    be delivered is recorded as failed and the batch carries on. Skipped
    files (destination exists without ``overwrite``, or destination is the
    source itself) never fail the batch.
    """

    def __init__(
        self,
        resolver: PathResolver,
        backups: BackupManager,
        *,
        logger: Optional[logging.Logger] = None,
        show_progress: bool = False,
    ) -> None:
        self.resolver = resolver
        self.backups = backups
        self.logger = logger or _logger
        self.show_progress = show_progress

    def deliver(
        self,
        source_files: Sequence[Union[str, Path]],
        settings: ExportSettings,
    ) -> BatchResult:
        sources = [Path(source) for source in source_files]
        # A configured name only applies when a single file is exported.
        use_configured_name = len(sources) == 1 and bool(settings.file_name)
        now = self.resolver.clock()

        outcomes: List[DeliveryOutcome] = []
        progress = create_progress_bar(self.show_progress, len(sources), "Delivering")
        hook = progress_callback(progress)
        try:
            for source in sources:
                name = settings.file_name if use_configured_name else source.name
                dest = self.resolver.target_path(settings, name, now=now)
                outcomes.append(self.deliver_one(source, dest, settings))
                emit_progress(hook)
        finally:
            if progress is not None:
                progress.close()

        return BatchResult(outcomes=tuple(outcomes))

    def deliver_one(self, source: Path, dest: Path, settings: ExportSettings) -> DeliveryOutcome:
        """Apply the collision and backup policy to one file and copy it."""
        extra = phase_extra(PHASE, source_path=str(source), dest_path=str(dest))

        if _same_file(source, dest):
            self.logger.warning(
                "Skip copying file %s to %s. The same files.", source, dest, extra=extra
            )
            return DeliveryOutcome(source, dest, DeliveryStatus.SKIPPED_IDENTICAL)

        if dest.exists() and not settings.overwrite:
            self.logger.warning(
                "Skip copying file %s to %s. File exists.", source, dest, extra=extra
            )
            return DeliveryOutcome(source, dest, DeliveryStatus.SKIPPED_EXISTS)

        if dest.is_dir():
            return self._failed(
                source, dest, CopyFailed(f"Destination is a directory: {dest}"), extra
            )

        try:
            self.backups.create_backup(dest, settings)
        except BackupFailed as exc:
            # Never overwrite a file whose backup was required but not taken.
            return self._failed(source, dest, exc, extra)

        try:
            shutil.copy2(source, dest)
        except OSError as exc:
            error = CopyFailed(f"Failed to copy file {source} to {dest}: {exc}")
            return self._failed(source, dest, error, extra)

        self.logger.info("Successfully copied file %s to %s", source, dest, extra=extra)
        return DeliveryOutcome(source, dest, DeliveryStatus.COPIED)

    def _failed(self, source: Path, dest: Path, error: Exception, extra: dict) -> DeliveryOutcome:
        self.logger.error("Failed to copy file %s to %s: %s", source, dest, error, extra=extra)
        return DeliveryOutcome(source, dest, DeliveryStatus.FAILED, error=str(error))


def _same_file(source: Path, dest: Path) -> bool:
    if source.resolve() == dest.resolve():
        return True
    try:
        return os.path.samefile(source, dest)
    except OSError:
        return False


__all__ = ["FileDeliverer"]
