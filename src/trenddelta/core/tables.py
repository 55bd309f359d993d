"""In-memory result table for trend delta queries.

A query produces a single page of rows, one per complete calendar interval,
with the columns listed in :data:`COLUMNS`.  The table only accepts rows that
continue the previous one, so a materialised table always describes a
contiguous, strictly increasing run of intervals.
"""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Mapping, Optional

from ..types import IntervalRow

START_TIME = "Start time"
END_TIME = "End time"
START_VALUE = "Start value"
END_VALUE = "End value"
DELTA = "Delta"

COLUMNS = (START_TIME, END_TIME, START_VALUE, END_VALUE, DELTA)


class IntervalTable:
    """Ordered table of :class:`~trenddelta.types.IntervalRow` objects."""

    def __init__(self, rows: Iterable[IntervalRow] = ()) -> None:
        self._rows: List[IntervalRow] = []
        for row in rows:
            self.add(row)

    def add(self, row: IntervalRow) -> None:
        """Append ``row``.

        Raises
        ------
        ValueError
            If ``row`` does not start where the previous row ended or does not
            end after it starts.
        """

        if row.end <= row.start:
            raise ValueError(f"interval must end after it starts: {row.start} -> {row.end}")
        if self._rows and self._rows[-1].end != row.start:
            raise ValueError(
                f"non-contiguous interval: previous ends at {self._rows[-1].end}, "
                f"next starts at {row.start}"
            )
        self._rows.append(row)

    def to_records(self) -> List[Mapping[str, object]]:
        """Return the table contents as dictionaries keyed by column name."""

        return [
            {
                START_TIME: row.start,
                END_TIME: row.end,
                START_VALUE: row.start_value,
                END_VALUE: row.end_value,
                DELTA: row.delta,
            }
            for row in self._rows
        ]

    @property
    def first(self) -> Optional[IntervalRow]:
        return self._rows[0] if self._rows else None

    @property
    def last(self) -> Optional[IntervalRow]:
        return self._rows[-1] if self._rows else None

    def __iter__(self) -> Iterator[IntervalRow]:
        return iter(self._rows)

    def __len__(self) -> int:
        return len(self._rows)

    def __getitem__(self, idx: int) -> IntervalRow:
        return self._rows[idx]


def export_rows(table: IntervalTable) -> List[Dict[str, object]]:
    """Export ``table`` as JSON friendly records.

    Instants are rendered as ISO-8601 strings in UTC.
    """

    out: List[Dict[str, object]] = []
    for record in table.to_records():
        row = dict(record)
        row[START_TIME] = row[START_TIME].isoformat()  # type: ignore[union-attr]
        row[END_TIME] = row[END_TIME].isoformat()  # type: ignore[union-attr]
        out.append(row)
    return out


__all__ = [
    "COLUMNS",
    "IntervalTable",
    "export_rows",
]
