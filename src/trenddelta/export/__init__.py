"""Output sinks for interval tables."""

from .to_numpy import load, to_numpy
from .writers import format_table, save, write_csv, write_json

__all__ = ["format_table", "load", "save", "to_numpy", "write_csv", "write_json"]
