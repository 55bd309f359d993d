from __future__ import annotations

"""Utilities for converting interval tables into NumPy arrays."""

from pathlib import Path
from typing import Iterable

import numpy as np

from ..types import IntervalRow


def _naive_utc(rows: Iterable[IntervalRow], attr: str) -> list[np.datetime64]:
    return [np.datetime64(getattr(row, attr).replace(tzinfo=None), "us") for row in rows]


def to_numpy(
    rows: Iterable[IntervalRow],
    *,
    save_csv: str | Path | None = None,
    save_npz: str | Path | None = None,
) -> tuple[np.ndarray, np.ndarray]:
    """Return ``(times, values)`` NumPy arrays for interval ``rows``.

    Parameters
    ----------
    rows:
        Interval rows, typically an :class:`~trenddelta.core.tables.IntervalTable`.
    save_csv, save_npz:
        Optional paths.  ``save_csv`` receives the value columns with a header
        row; ``save_npz`` an archive with ``times`` and ``values`` entries.

    Returns
    -------
    times:
        ``datetime64[us]`` array of shape ``(n, 2)`` holding the UTC start and
        end of each interval.
    values:
        Float array of shape ``(n, 3)`` with start value, end value and delta.
    """

    rows = list(rows)
    times = np.empty((len(rows), 2), dtype="datetime64[us]")
    values = np.empty((len(rows), 3), dtype=float)
    if rows:
        times[:, 0] = _naive_utc(rows, "start")
        times[:, 1] = _naive_utc(rows, "end")
        values[:, 0] = [row.start_value for row in rows]
        values[:, 1] = [row.end_value for row in rows]
        values[:, 2] = [row.delta for row in rows]

    if save_csv:
        np.savetxt(Path(save_csv), values, delimiter=",", header="Start value,End value,Delta", comments="")

    if save_npz:
        np.savez(Path(save_npz), times=times, values=values)

    return times, values


def load(path: str | Path) -> tuple[np.ndarray, np.ndarray]:
    """Load arrays previously saved via :func:`to_numpy`."""

    data = np.load(Path(path))
    return data["times"], data["values"]
