"""Convenience re-exports for export data models."""

from .delivery import (
    BatchResult,
    DeliveryOutcome,
    DeliveryStatus,
    ExportBatch,
    FileBatch,
    RowBatch,
    RowRecord,
)
from .formats import DEFAULT_TIMESTAMP_FORMAT, TimestampFormat
from .settings import ExportSettings

__all__ = [
    "BatchResult",
    "DEFAULT_TIMESTAMP_FORMAT",
    "DeliveryOutcome",
    "DeliveryStatus",
    "ExportBatch",
    "ExportSettings",
    "FileBatch",
    "RowBatch",
    "RowRecord",
    "TimestampFormat",
]
