# src/trenddelta/ingest/trend.py
"""Parser for exported trend files.

Supports:
A) CSV with header:
   timestamp,value            (extra columns are ignored)
   -> value column: the configured name, else the first column whose name
      contains 'value' or 'average', else the first non-timestamp column

B) Simple one-line:
   <timestamp> <value>
   <timestamp>,<value>

Timestamps are ISO-8601 (naive values are UTC), ``YYYY-MM-DD HH:MM:SS`` or
floating-point seconds since the Unix epoch.  Samples must be in ascending
time order; equal timestamps are allowed.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterator, List, Optional, TextIO, Union
import csv
import pathlib
import re

from ..types import Sample
from ..utils.timeparse import parse_instant

_TS_ALIASES = ("timestamp", "time", "datetime")
_VALUE_HINTS = ("value", "average", "avg")


class TrendParseError(ValueError):
    """Raised when a trend file cannot be parsed."""

    def __init__(self, message: str, *, path: Union[str, pathlib.Path], line: Optional[int] = None):
        self.path = str(path)
        self.line = line
        where = self.path if line is None else f"{self.path}:{line}"
        super().__init__(f"{where}: {message}")


def _split(line: str) -> List[str]:
    return [t for t in re.split(r"[,;\s]+", line.strip()) if t]


def _pick_columns(headers: List[str], value_column: Optional[str]) -> tuple[int, int]:
    lower = [name.strip().lower() for name in headers]
    ts_idx = next((i for i, name in enumerate(lower) if name in _TS_ALIASES), -1)
    if ts_idx < 0:
        raise ValueError("CSV header must include a timestamp column")
    others = [i for i in range(len(headers)) if i != ts_idx]
    if not others:
        raise ValueError("CSV header must include at least one value column")
    if value_column is not None:
        wanted = value_column.strip().lower()
        for i in others:
            if lower[i] == wanted:
                return ts_idx, i
        raise ValueError(f"value column {value_column!r} not found in header")
    for i in others:
        if any(hint in lower[i] for hint in _VALUE_HINTS):
            return ts_idx, i
    return ts_idx, others[0]


def _looks_like_header(tokens: List[str]) -> bool:
    return any(token.strip().lower() in _TS_ALIASES for token in tokens)


def _parse_value(token: str) -> float:
    try:
        return float(token)
    except ValueError:
        raise ValueError(f"Invalid value {token!r}") from None


def _read_trend_text(
    fh: TextIO,
    *,
    value_column: Optional[str],
    path: Union[str, pathlib.Path] = "<stream>",
) -> Iterator[Sample]:
    columns: Optional[tuple[int, int]] = None
    previous: Optional[datetime] = None
    for lineno, raw in enumerate(fh, start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        try:
            if columns is None and "," in line and _looks_like_header(line.split(",")):
                columns = _pick_columns(next(csv.reader([line])), value_column)
                continue

            if columns is not None:
                cells = next(csv.reader([line]))
                ts_idx, value_idx = columns
                if max(ts_idx, value_idx) >= len(cells):
                    raise ValueError(f"expected {max(columns) + 1} columns, got {len(cells)}")
                ts_token, value_token = cells[ts_idx], cells[value_idx]
            else:
                parts = _split(line)
                if len(parts) < 2:
                    raise ValueError(f"Unrecognised trend line: {line!r}")
                # 'YYYY-MM-DD HH:MM:SS value' splits into three tokens
                if len(parts) >= 3 and re.fullmatch(r"\d{4}-\d{2}-\d{2}", parts[0]):
                    ts_token, value_token = f"{parts[0]} {parts[1]}", parts[2]
                else:
                    ts_token, value_token = parts[0], parts[1]

            timestamp = parse_instant(ts_token)
            sample = Sample(timestamp, _parse_value(value_token.strip()))
        except ValueError as e:
            raise TrendParseError(str(e), path=path, line=lineno) from e

        if previous is not None and sample.timestamp < previous:
            raise TrendParseError(
                f"timestamp {sample.timestamp.isoformat()} precedes {previous.isoformat()}",
                path=path,
                line=lineno,
            )
        previous = sample.timestamp
        yield sample


def read_trend(
    path: Union[str, pathlib.Path, TextIO],
    *,
    value_column: Optional[str] = None,
) -> Iterator[Sample]:
    """Yield :class:`~trenddelta.types.Sample` objects from a trend source.

    Files are read as UTF-8, with or without a byte order mark.  Undecodable
    bytes raise :class:`TrendParseError` without a line number.
    """
    is_path = isinstance(path, (str, pathlib.Path))
    name = pathlib.Path(path) if is_path else getattr(path, "name", "<stream>")
    try:
        if is_path:
            with open(name, "r", encoding="utf-8-sig", newline="") as fh:
                yield from _read_trend_text(fh, value_column=value_column, path=name)
        else:
            yield from _read_trend_text(path, value_column=value_column, path=name)
    except UnicodeDecodeError as e:
        raise TrendParseError(f"not valid {e.encoding} text: {e.reason}", path=name) from e
