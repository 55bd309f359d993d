from __future__ import annotations

"""Named relative time ranges resolved against a reference instant."""

import logging
from dataclasses import dataclass
from datetime import datetime, time, timezone, tzinfo
from typing import Callable, List

from dateutil.relativedelta import relativedelta

from ..types import ALL_TIME, AbsoluteRange

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RelativeRange:
    """A named range whose bounds depend on the current instant.

    ``resolver`` receives ``now`` in UTC and the local time zone and returns
    the matching :class:`~trenddelta.types.AbsoluteRange`.
    """

    name: str
    resolver: Callable[[datetime, tzinfo], AbsoluteRange]

    def resolve(self, now: datetime, tz: tzinfo = timezone.utc) -> AbsoluteRange:
        return self.resolver(now, tz)


def _last(unit: relativedelta) -> Callable[[datetime, tzinfo], AbsoluteRange]:
    """Build a resolver for the local calendar period ending at midnight today."""

    def resolve(now: datetime, tz: tzinfo) -> AbsoluteRange:
        local_now = now.astimezone(tz)
        local_end = datetime.combine(local_now.date(), time(), tzinfo=tz)
        local_start = local_end - unit
        return AbsoluteRange(
            local_start.astimezone(timezone.utc),
            local_end.astimezone(timezone.utc),
        )

    return resolve


ALL_TIME_RANGE = RelativeRange("All time", lambda now, tz: ALL_TIME)

TIME_RANGES: tuple[RelativeRange, ...] = (
    ALL_TIME_RANGE,
    RelativeRange("Last day", _last(relativedelta(days=1))),
    RelativeRange("Last week", _last(relativedelta(days=7))),
    RelativeRange("Last month", _last(relativedelta(months=1))),
    RelativeRange("Last year", _last(relativedelta(years=1))),
)


def time_range_names() -> List[str]:
    return [time_range.name for time_range in TIME_RANGES]


def time_range_by_name(name: str | None) -> RelativeRange:
    """Look up a range by name, falling back to ``All time``."""

    for time_range in TIME_RANGES:
        if time_range.name == name:
            return time_range
    logger.debug("Unknown time range %r, using %s", name, ALL_TIME_RANGE.name)
    return ALL_TIME_RANGE


def resolve_time_range(
    name: str | None,
    now: datetime,
    tz: tzinfo = timezone.utc,
) -> AbsoluteRange:
    """Resolve the range called ``name`` against ``now`` in zone ``tz``."""

    return time_range_by_name(name).resolve(now, tz)


__all__ = [
    "RelativeRange",
    "ALL_TIME_RANGE",
    "TIME_RANGES",
    "resolve_time_range",
    "time_range_by_name",
    "time_range_names",
]
