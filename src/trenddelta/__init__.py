"""Calendar interval deltas of averaged trend data."""

__version__ = "0.1.0"
