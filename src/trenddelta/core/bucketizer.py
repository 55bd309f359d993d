from __future__ import annotations

"""Turn an ascending sample stream into complete calendar interval rows."""

from datetime import datetime, timezone, tzinfo
from typing import Iterable, Iterator, Optional, Tuple

from ..types import IntervalRow, Sample
from .intervals import MONDAY, CalendarInterval


class SampleCursor:
    """Forward-only cursor over an ascending sample stream.

    ``position`` counts the samples consumed so far (``-1`` before the first
    :meth:`move_next`).  Once the stream is exhausted the cursor stays on the
    final sample.
    """

    def __init__(self, samples: Iterable[Sample]) -> None:
        self._iter = iter(samples)
        self.current: Optional[Sample] = None
        self.position = -1
        self.exhausted = False

    def move_next(self) -> bool:
        if self.exhausted:
            return False
        try:
            sample = next(self._iter)
        except StopIteration:
            self.exhausted = True
            return False
        self.current = sample
        self.position += 1
        return True

    def advance_to(self, target: datetime) -> Tuple[int, Sample]:
        """Return ``(position, sample)`` of the last observation before ``target``.

        Starting from the current sample, move forward while the next sample
        is strictly earlier than ``target``.  The cursor is left on the first
        sample at or after ``target`` or, when the stream runs out, on the
        final sample.
        """

        if self.current is None:
            raise RuntimeError("cursor has no current sample")
        while True:
            position, point = self.position, self.current
            if not self.move_next() or self.current.timestamp >= target:
                return position, point


def _next_start(interval: CalendarInterval, start: datetime) -> Optional[datetime]:
    """Step ``start`` by one ``interval``, or ``None`` past the last representable year."""

    try:
        return interval.step(start)
    except (OverflowError, ValueError):
        return None


def iter_interval_rows(
    samples: Iterable[Sample],
    interval: CalendarInterval,
    *,
    tz: tzinfo = timezone.utc,
    first_day_of_week: int = MONDAY,
) -> Iterator[IntervalRow]:
    """Yield start/end rows for every complete ``interval`` in ``samples``.

    The interval holding the first sample is skipped since it may be partial.
    Each boundary is sampled with the last observation strictly before it.
    The sequence ends as soon as a boundary probe makes no progress, so the
    trailing interval that the data has not yet closed is never emitted, nor
    is any interval ending beyond year 9999.
    """

    cursor = SampleCursor(samples)
    if not cursor.move_next():
        return

    first_aligned = interval.align_utc(cursor.current.timestamp, tz, first_day_of_week)
    interval_start = _next_start(interval, first_aligned)
    if interval_start is None:
        return
    start_index, start_point = cursor.advance_to(interval_start)

    while True:
        interval_end = _next_start(interval, interval_start)
        if interval_end is None:
            return
        end_index, end_point = cursor.advance_to(interval_end)
        if end_index == start_index:
            return

        yield IntervalRow(
            start=interval_start,
            end=interval_end,
            start_value=start_point.value,
            end_value=end_point.value,
        )

        interval_start = interval_end
        start_index, start_point = end_index, end_point


__all__ = ["SampleCursor", "iter_interval_rows"]
