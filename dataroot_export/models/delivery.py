"""Result and batch models for export deliveries."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

# A row is an ordered field-name to scalar mapping; objects exposing public
# attributes are accepted as well and flattened in attribute order.
RowRecord = Mapping[str, Any]


class DeliveryStatus(str, Enum):
    """Outcome of delivering a single source file."""

    COPIED = "copied"
    SKIPPED_EXISTS = "skipped_exists"
    SKIPPED_IDENTICAL = "skipped_identical"
    FAILED = "failed"


@dataclass(frozen=True)
class DeliveryOutcome:
    """Result of delivering one source file to its destination."""

    source_path: Path
    dest_path: Path
    status: DeliveryStatus
    error: Optional[str] = None

    @property
    def skipped(self) -> bool:
        return self.status in (DeliveryStatus.SKIPPED_EXISTS, DeliveryStatus.SKIPPED_IDENTICAL)

    def to_dict(self) -> Dict[str, object]:
        return {
            "source_path": str(self.source_path),
            "dest_path": str(self.dest_path),
            "status": self.status.value,
            "error": self.error,
        }


@dataclass(frozen=True)
class BatchResult:
    """Ordered outcomes of a file delivery batch."""

    outcomes: Tuple[DeliveryOutcome, ...] = ()

    @property
    def success(self) -> bool:
        """True unless at least one file failed; skipped files do not count."""
        return not any(outcome.status is DeliveryStatus.FAILED for outcome in self.outcomes)

    def with_status(self, status: DeliveryStatus) -> List[DeliveryOutcome]:
        return [outcome for outcome in self.outcomes if outcome.status is status]

    @property
    def copied(self) -> int:
        return len(self.with_status(DeliveryStatus.COPIED))

    @property
    def skipped(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.skipped)

    @property
    def failed(self) -> int:
        return len(self.with_status(DeliveryStatus.FAILED))

    def __len__(self) -> int:
        return len(self.outcomes)

    def to_dict(self) -> Dict[str, object]:
        return {
            "success": self.success,
            "copied": self.copied,
            "skipped": self.skipped,
            "failed": self.failed,
            "outcomes": [outcome.to_dict() for outcome in self.outcomes],
        }


@dataclass(frozen=True)
class FileBatch:
    """Source files to deliver into the export target."""

    paths: Sequence[Path] = field(default_factory=tuple)


@dataclass(frozen=True)
class RowBatch:
    """Rows to serialize into the single export target file."""

    rows: Sequence[Any] = field(default_factory=tuple)


ExportBatch = Union[FileBatch, RowBatch]


__all__ = [
    "BatchResult",
    "DeliveryOutcome",
    "DeliveryStatus",
    "ExportBatch",
    "FileBatch",
    "RowBatch",
    "RowRecord",
]
