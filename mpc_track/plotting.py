from __future__ import annotations

from typing import Optional

from mpc_track.planning.nearest import NearestPoseResult
from mpc_track.planning.trajectory import Trajectory


def plot_resampled(
    source: Trajectory,
    resampled: Trajectory,
    ax=None,
    nearest: Optional[NearestPoseResult] = None,
):
    """
    Plot the reference path, its resampled points, and optionally the matched pose.

    Returns the figure and axes.
    """
    import matplotlib.pyplot as plt

    if ax is None:
        fig, ax = plt.subplots(figsize=(7, 6))
    else:
        fig = ax.figure

    ax.plot(source.x, source.y, "-o", color="0.5", markersize=3, label="reference")
    ax.plot(resampled.x, resampled.y, "x", color="tab:orange", label="resampled")
    if nearest is not None:
        nx, ny, _ = nearest.nearest_pose
        ax.plot([nx], [ny], "*", color="tab:red", markersize=12, label="nearest")

    ax.set_xlabel("x, m")
    ax.set_ylabel("y, m")
    ax.set_aspect("equal", adjustable="datalim")
    ax.grid(True, linestyle=":")
    ax.legend()
    return fig, ax
