"""Bar charts of per-interval trend deltas."""

from __future__ import annotations

from pathlib import Path

import matplotlib.pyplot as plt

from ..core.tables import IntervalTable
from .styles import FALL_COLOR, RISE_COLOR, apply_style


def plot_deltas(table: IntervalTable, ax: plt.Axes | None = None, *, title: str = "Trend delta") -> plt.Axes:
    """Draw one bar per interval, spanning the interval, with height ``delta``.

    Rising intervals are drawn in :data:`RISE_COLOR`, falling ones in
    :data:`FALL_COLOR`.  Returns the axes drawn on.
    """
    if ax is None:
        apply_style()
        _, ax = plt.subplots()

    rows = list(table)
    if rows:
        starts = [row.start for row in rows]
        widths = [row.end - row.start for row in rows]
        deltas = [row.delta for row in rows]
        colors = [RISE_COLOR if delta >= 0 else FALL_COLOR for delta in deltas]
        ax.bar(starts, deltas, width=widths, align="edge", color=colors, edgecolor="black", linewidth=0.5)
    ax.axhline(0.0, color="black", linewidth=0.8)
    ax.set_title(title)
    ax.set_xlabel("Interval start (UTC)")
    ax.set_ylabel("Delta")
    return ax


def save_or_show(fig: plt.Figure, save: str | Path | None = None, show: bool = False) -> None:
    """Save ``fig`` to ``save`` or display it interactively.

    If ``save`` is ``None`` the figure will only be shown when ``show`` is
    True.  When both are unset the figure is shown by default to give quick
    feedback during inspection.
    """
    if save:
        fig.savefig(save, bbox_inches="tight")
    if show or not save:
        plt.show()
