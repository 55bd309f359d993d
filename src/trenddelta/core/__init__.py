"""Core algorithms and data structures for trenddelta."""

from .intervals import CalendarInterval, DEFAULT_INTERVAL, interval_by_name, interval_names
from .ranges import RelativeRange, TIME_RANGES, resolve_time_range, time_range_by_name, time_range_names
from .bucketizer import SampleCursor, iter_interval_rows
from .tables import COLUMNS, IntervalTable, export_rows
from .delta import TrendDeltaQuery, run_trend_delta

__all__ = [
    "CalendarInterval",
    "DEFAULT_INTERVAL",
    "interval_by_name",
    "interval_names",
    "RelativeRange",
    "TIME_RANGES",
    "resolve_time_range",
    "time_range_by_name",
    "time_range_names",
    "SampleCursor",
    "iter_interval_rows",
    "COLUMNS",
    "IntervalTable",
    "export_rows",
    "TrendDeltaQuery",
    "run_trend_delta",
]
