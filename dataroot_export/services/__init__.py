"""Service layer of the export target engine."""

from __future__ import annotations

from importlib import import_module

from . import logging
from .availability import AvailabilityChecker
from .backup import BackupManager
from .delivery import FileDeliverer
from .paths import PathResolver
from .rows import RowSerializer

__all__ = [
    "AvailabilityChecker",
    "BackupManager",
    "ExportService",
    "FileDeliverer",
    "logging",
    "PathResolver",
    "RowSerializer",
]


def __getattr__(name: str):
    if name == "ExportService":
        module = import_module(".export", __name__)
        return getattr(module, "ExportService")
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
