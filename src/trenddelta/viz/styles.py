"""Matplotlib styles for trend delta bar charts.

:data:`RISE_COLOR` and :data:`FALL_COLOR` colour intervals whose value went up
or down.
"""

from __future__ import annotations

import matplotlib.pyplot as plt

# Base style configuration used across all plots.  The values can be
# overridden by supplying a different style mapping to :func:`apply_style`.
BASE_STYLE = {
    "figure.figsize": (10, 4),
    "axes.grid": True,
    "grid.linestyle": "--",
    "grid.alpha": 0.5,
    "axes.titlesize": "large",
    "axes.labelsize": "medium",
}

RISE_COLOR = "tab:green"
FALL_COLOR = "tab:red"


def apply_style(extra: dict | None = None) -> None:
    """Apply a consistent matplotlib style.

    Parameters
    ----------
    extra:
        Optional dictionary of rcParams that override the base style.
    """
    style = BASE_STYLE.copy()
    if extra:
        style.update(extra)
    plt.rcParams.update(style)
