from __future__ import annotations

"""Run a trend delta query end to end."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from ..config import Settings
from ..ingest.providers import ProviderFailure, TrendProvider
from ..types import ElementRef, ensure_utc
from .bucketizer import iter_interval_rows
from .intervals import interval_by_name
from .ranges import time_range_by_name
from .tables import IntervalTable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrendDeltaQuery:
    """Selection of one element parameter and the reporting granularity.

    ``time_range`` and ``interval`` are display names; ``None`` selects the
    configured defaults and unknown names fall back to ``All time`` and
    ``Day``.
    """

    element: ElementRef
    parameter_id: int
    time_range: str | None = None
    interval: str | None = None


def run_trend_delta(
    query: TrendDeltaQuery,
    provider: TrendProvider,
    *,
    settings: Settings | None = None,
    now: datetime | None = None,
) -> IntervalTable:
    """Fetch the trend selected by ``query`` and summarise it per interval.

    Parameters
    ----------
    query:
        Element, parameter and range/interval selection.
    provider:
        Trend source queried exactly once for the resolved range.
    settings:
        Optional :class:`~trenddelta.config.Settings` supplying the local time
        zone, first day of week and default selections.
    now:
        Reference instant for relative ranges, current UTC time by default.

    Returns
    -------
    IntervalTable
        Complete intervals in ascending order; empty when the trend holds too
        few samples to close any interval.

    Raises
    ------
    ProviderFailure
        If the provider returns no payload.
    """
    if settings is None:
        settings = Settings()

    now = datetime.now(timezone.utc) if now is None else ensure_utc(now)
    tz = settings.calendar.tzinfo()
    first_day = settings.calendar.first_day_of_week

    time_range = time_range_by_name(query.time_range or settings.query.time_range)
    interval = interval_by_name(query.interval or settings.query.interval)
    bounds = time_range.resolve(now, tz)
    logger.debug(
        "Query %s parameter %s: range %s [%s, %s), interval %s",
        query.element,
        query.parameter_id,
        time_range.name,
        bounds.start.isoformat(),
        bounds.end.isoformat(),
        interval.display_name,
    )

    samples = provider.fetch(query.element, query.parameter_id, bounds)
    if samples is None:
        raise ProviderFailure(detail=f"no response for parameter {query.parameter_id} on element {query.element}")

    table = IntervalTable(
        iter_interval_rows(samples, interval, tz=tz, first_day_of_week=first_day)
    )
    logger.info(
        "Trend delta for %s parameter %s: %d %s interval(s)",
        query.element,
        query.parameter_id,
        len(table),
        interval.display_name.lower(),
    )
    return table


__all__ = ["TrendDeltaQuery", "run_trend_delta"]
