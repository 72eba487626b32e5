# parktrack/visualize/plot.py
"""
Plotting routines for parktrack
"""

from __future__ import annotations

from typing import Any, Iterable, Optional

import matplotlib.pyplot as plt

from parktrack.formats.points import ensure_points


def plot_track(points: Iterable[Any], simplified: Optional[Iterable[Any]] = None, *, show: bool = True):
    """Scatter the raw track coloured by speed, with the simplified line on top."""
    usable = [(p.valid_coords(), p.valid_speed()) for p in ensure_points(points)]
    usable = [(c, s if s is not None else 0.0) for c, s in usable if c is not None]

    lats = [c[0] for c, _ in usable]
    lons = [c[1] for c, _ in usable]
    speeds = [s for _, s in usable]

    fig, ax = plt.subplots(figsize=(8, 6))
    sc = ax.scatter(lons, lats, c=speeds, s=5, cmap="viridis")
    fig.colorbar(sc, ax=ax, label="Speed (m/s)")

    if simplified is not None:
        line = [c for c in (p.valid_coords() for p in ensure_points(simplified)) if c is not None]
        ax.plot([c[1] for c in line], [c[0] for c in line], color="tab:red", linewidth=1,
                label=f"Simplified ({len(line)} pts)")
        ax.legend(loc="best")

    ax.set_xlabel("Longitude")
    ax.set_ylabel("Latitude")
    ax.set_title("Track coloured by speed")
    if show:
        plt.show()
    return fig
