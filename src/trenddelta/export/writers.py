from __future__ import annotations

"""Render interval tables as text, CSV or JSON."""

import csv
import json
from pathlib import Path
from typing import List, TextIO

from ..core.tables import COLUMNS, IntervalTable, export_rows
from .to_numpy import to_numpy


def write_csv(table: IntervalTable, fh: TextIO) -> None:
    """Write ``table`` to ``fh`` with a header row of column names."""

    writer = csv.writer(fh)
    writer.writerow(COLUMNS)
    for record in export_rows(table):
        writer.writerow([record[name] for name in COLUMNS])


def write_json(table: IntervalTable, fh: TextIO) -> None:
    json.dump(export_rows(table), fh, indent=2)
    fh.write("\n")


def format_table(table: IntervalTable) -> List[str]:
    """Return aligned plain-text lines for terminal output."""

    header = list(COLUMNS)
    body = [
        [
            row.start.isoformat(),
            row.end.isoformat(),
            f"{row.start_value:g}",
            f"{row.end_value:g}",
            f"{row.delta:g}",
        ]
        for row in table
    ]
    widths = [max(len(cell) for cell in column) for column in zip(header, *body)]
    return [
        "  ".join(cell.ljust(width) for cell, width in zip(line, widths)).rstrip()
        for line in [header, *body]
    ]


def save(table: IntervalTable, path: str | Path, fmt: str) -> Path:
    """Persist ``table`` at ``path`` in format ``fmt`` (csv, json or npz)."""

    out = Path(path)
    if fmt == "npz":
        to_numpy(table, save_npz=out)
    elif fmt == "csv":
        with open(out, "w", encoding="utf8", newline="") as fh:
            write_csv(table, fh)
    elif fmt == "json":
        with open(out, "w", encoding="utf8") as fh:
            write_json(table, fh)
    else:
        raise ValueError(f"cannot save format {fmt!r}")
    return out
