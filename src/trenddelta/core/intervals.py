from __future__ import annotations

"""Calendar intervals used to bucket trend samples.

Each :class:`CalendarInterval` member knows how to align a *local* wall-clock
timestamp down to the start of its enclosing interval and how to step from one
interval start to the next.  Alignment is time-zone aware, stepping is not:
:meth:`CalendarInterval.step` adds one calendar unit to whatever instant it is
given, so boundaries stepped in UTC across a daylight-saving transition keep
their UTC spacing rather than snapping back to local midnight.
"""

import logging
from datetime import datetime, timedelta, timezone, tzinfo
from enum import Enum
from typing import Callable, Dict, List

from dateutil.relativedelta import relativedelta

from ..utils.timeparse import MONDAY

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Alignment (local wall-clock time)
# ---------------------------------------------------------------------------


def _align_hour(local: datetime, first_day_of_week: int) -> datetime:
    return local.replace(minute=0, second=0, microsecond=0)


def _align_day(local: datetime, first_day_of_week: int) -> datetime:
    return local.replace(hour=0, minute=0, second=0, microsecond=0)


def _align_week(local: datetime, first_day_of_week: int) -> datetime:
    midnight = _align_day(local, first_day_of_week)
    offset = (midnight.weekday() - first_day_of_week + 7) % 7
    return midnight - timedelta(days=offset)


def _align_month(local: datetime, first_day_of_week: int) -> datetime:
    return local.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def _align_year(local: datetime, first_day_of_week: int) -> datetime:
    return local.replace(month=1, day=1, hour=0, minute=0, second=0, microsecond=0)


class CalendarInterval(Enum):
    """Supported interval granularities, valued by their display name."""

    HOUR = "Hour"
    DAY = "Day"
    WEEK = "Week"
    MONTH = "Month"
    YEAR = "Year"

    @property
    def display_name(self) -> str:
        return self.value

    def align_start(self, local: datetime, first_day_of_week: int = MONDAY) -> datetime:
        """Truncate ``local`` to the start of its enclosing interval."""

        return _ALIGNERS[self](local, first_day_of_week)

    def step(self, start: datetime) -> datetime:
        """Return the start of the interval following ``start``."""

        return start + _STEPS[self]

    def align_utc(
        self,
        timestamp: datetime,
        tz: tzinfo,
        first_day_of_week: int = MONDAY,
    ) -> datetime:
        """Align a UTC ``timestamp`` in the wall-clock time of ``tz``.

        The result is converted back to UTC.
        """

        local = timestamp.astimezone(tz)
        return self.align_start(local, first_day_of_week).astimezone(timezone.utc)


_ALIGNERS: Dict[CalendarInterval, Callable[[datetime, int], datetime]] = {
    CalendarInterval.HOUR: _align_hour,
    CalendarInterval.DAY: _align_day,
    CalendarInterval.WEEK: _align_week,
    CalendarInterval.MONTH: _align_month,
    CalendarInterval.YEAR: _align_year,
}

_STEPS: Dict[CalendarInterval, timedelta | relativedelta] = {
    CalendarInterval.HOUR: timedelta(hours=1),
    CalendarInterval.DAY: timedelta(days=1),
    CalendarInterval.WEEK: timedelta(days=7),
    CalendarInterval.MONTH: relativedelta(months=1),
    CalendarInterval.YEAR: relativedelta(years=1),
}

DEFAULT_INTERVAL = CalendarInterval.DAY


def interval_names() -> List[str]:
    """Return the display names of all intervals in ascending width."""

    return [interval.display_name for interval in CalendarInterval]


def interval_by_name(name: str | None) -> CalendarInterval:
    """Look up an interval by display name, falling back to ``Day``."""

    for interval in CalendarInterval:
        if interval.display_name == name:
            return interval
    logger.debug("Unknown interval %r, using %s", name, DEFAULT_INTERVAL.display_name)
    return DEFAULT_INTERVAL


__all__ = [
    "MONDAY",
    "CalendarInterval",
    "DEFAULT_INTERVAL",
    "interval_by_name",
    "interval_names",
]
