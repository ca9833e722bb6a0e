"""Timestamp suffix formats accepted by export targets."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Dict

# PHP date() codes used by the format names, mapped to strftime directives.
_DATE_CODES = {
    "d": "%d",
    "m": "%m",
    "Y": "%Y",
    "y": "%y",
    "h": "%I",
    "i": "%M",
}


class TimestampFormat(str, Enum):
    """The fixed set of date patterns a timestamp suffix can use.

    Names follow PHP ``date()`` codes: ``d`` day, ``m`` month, ``Y``/``y``
    four/two digit year, ``h`` 12-hour clock hour and ``i`` minutes.
    """

    DMY_LONG_SEPARATED = "dmY_hi"
    DMY_SHORT_SEPARATED = "dmy_hi"
    YDM_LONG_SEPARATED = "Ydm_hi"
    YDM_SHORT_SEPARATED = "ydm_hi"
    DMY_LONG = "dmYhi"
    DMY_SHORT = "dmyhi"
    YDM_LONG = "Ydmhi"
    YDM_SHORT = "ydmhi"

    @property
    def strftime_pattern(self) -> str:
        return "".join(_DATE_CODES.get(char, char) for char in self.value)

    def render(self, moment: datetime) -> str:
        """Format ``moment`` with this pattern."""
        return moment.strftime(self.strftime_pattern)

    @classmethod
    def previews(cls, moment: datetime) -> Dict["TimestampFormat", str]:
        """Return every format rendered for ``moment``, in declaration order."""
        return {fmt: fmt.render(moment) for fmt in cls}


DEFAULT_TIMESTAMP_FORMAT = TimestampFormat.DMY_LONG_SEPARATED


__all__ = ["DEFAULT_TIMESTAMP_FORMAT", "TimestampFormat"]
