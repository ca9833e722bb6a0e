"""Destination path and file name resolution."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path, PurePath
from typing import Callable, Optional, Union

from dataroot_export.models import ExportSettings

Clock = Callable[[], datetime]


class PathResolver:
    """Map export settings onto concrete locations under the dataroot."""

    def __init__(self, dataroot: Union[str, Path], clock: Optional[Clock] = None) -> None:
        self.dataroot = Path(dataroot)
        self.clock: Clock = clock or datetime.now

    def resolve(self, settings: ExportSettings) -> Path:
        """Return the destination directory for ``settings``."""
        if not settings.base_path:
            return self.dataroot
        return self.dataroot.joinpath(*PurePath(settings.base_path).parts)

    def resolve_file_name(
        self,
        settings: ExportSettings,
        name: Union[str, Path],
        now: Optional[datetime] = None,
    ) -> str:
        """
        Return the final file name for ``name``.

        Only the last component of ``name`` is used. With ``append_timestamp``
        the formatted time is joined to the stem with the configured
        delimiter, ahead of the extension.
        """
        file_name = PurePath(str(name)).name
        if not settings.append_timestamp:
            return file_name

        stamp = settings.timestamp_format.render(now or self.clock())
        stem, suffix = _split_suffix(file_name)
        return f"{stem}{settings.timestamp_delimiter}{stamp}{suffix}"

    def target_path(
        self,
        settings: ExportSettings,
        name: Union[str, Path],
        now: Optional[datetime] = None,
    ) -> Path:
        """Full destination path for ``name``."""
        return self.resolve(settings) / self.resolve_file_name(settings, name, now=now)


def _split_suffix(file_name: str) -> tuple[str, str]:
    path = PurePath(file_name)
    if not path.suffix or path.stem == "":
        return file_name, ""
    return file_name[: -len(path.suffix)], path.suffix


__all__ = ["Clock", "PathResolver"]
