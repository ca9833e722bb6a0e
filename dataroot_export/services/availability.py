"""Destination directory availability checks."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from dataroot_export.errors import AvailabilityError
from dataroot_export.models import ExportSettings
from dataroot_export.services.logging import get_logger, phase_extra
from dataroot_export.services.paths import PathResolver

_logger = get_logger(__name__)


class AvailabilityChecker:
    """Gate export jobs on a writable destination directory."""

    def __init__(self, resolver: PathResolver, logger: Optional[logging.Logger] = None) -> None:
        self.resolver = resolver
        self.logger = logger or _logger

    def ensure_available(self, settings: ExportSettings) -> bool:
        """
        Return ``True`` when the destination is a writable directory.

        Creates the directory first when ``create_if_missing`` is set.
        """
        return self._check(self.resolver.resolve(settings), settings)

    def require_available(self, settings: ExportSettings) -> Path:
        """Like :meth:`ensure_available` but raise :class:`AvailabilityError`."""
        destination = self.resolver.resolve(settings)
        if not self._check(destination, settings):
            raise AvailabilityError(f"Directory is not writable {destination}")
        return destination

    def _check(self, destination: Path, settings: ExportSettings) -> bool:
        if settings.create_if_missing:
            try:
                destination.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                # Fall through: the checks below report the failure.
                self.logger.debug("Could not create %s: %s", destination, exc)

        if _is_writable_dir(destination):
            return True

        self.logger.error(
            "Directory is not writable %s",
            destination,
            extra=phase_extra("availability", path=str(destination)),
        )
        return False


def _is_writable_dir(path: Path) -> bool:
    return path.is_dir() and os.access(path, os.W_OK | os.X_OK)


__all__ = ["AvailabilityChecker"]
