"""Trend series sources for trenddelta queries."""

from .trend import read_trend, TrendParseError
from .providers import (
    FileTrendProvider,
    InMemoryTrendProvider,
    ProviderFailure,
    TrendProvider,
    provider_from_mapping,
)

__all__ = [
    "read_trend",
    "TrendParseError",
    "FileTrendProvider",
    "InMemoryTrendProvider",
    "ProviderFailure",
    "TrendProvider",
    "provider_from_mapping",
]
