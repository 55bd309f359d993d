"""Common type helpers for trenddelta.

This module defines the small containers exchanged between the provider,
the bucketizer and the output table.  All instants are timezone-aware and
normalised to UTC.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone


def ensure_utc(value: datetime) -> datetime:
    """Return ``value`` converted to UTC, rejecting naive datetimes."""

    if value.tzinfo is None:
        raise ValueError("timestamp must be timezone-aware")
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class Sample:
    """Averaged trend value observed at ``timestamp``."""

    timestamp: datetime
    value: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "timestamp", ensure_utc(self.timestamp))
        object.__setattr__(self, "value", float(self.value))


@dataclass(frozen=True)
class AbsoluteRange:
    """Half-open ``[start, end)`` range of UTC instants."""

    start: datetime
    end: datetime

    def contains(self, timestamp: datetime) -> bool:
        return self.start <= timestamp < self.end


# datetime.min/max carry no room for offsets, so keep them in UTC only.
ALL_TIME = AbsoluteRange(
    datetime.min.replace(tzinfo=timezone.utc),
    datetime.max.replace(tzinfo=timezone.utc),
)


@dataclass(frozen=True)
class ElementRef:
    """Identity of a monitored element (agent id and element id)."""

    dma_id: int
    element_id: int

    def __str__(self) -> str:
        return f"{self.dma_id}/{self.element_id}"


@dataclass(frozen=True)
class IntervalRow:
    """Start/end values of a single calendar interval."""

    start: datetime
    end: datetime
    start_value: float
    end_value: float

    @property
    def delta(self) -> float:
        """Return the change over the interval."""

        return self.end_value - self.start_value
