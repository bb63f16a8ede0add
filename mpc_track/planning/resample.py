"""
Whole-trajectory resampling onto a new time grid.
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from mpc_track.errors import InvalidInputError
from mpc_track.planning.interpolation import fill_increase, interp1d_many, is_strictly_increasing
from mpc_track.planning.trajectory import CHANNELS, Trajectory

logger = logging.getLogger(__name__)

_INTERPOLATED = tuple(name for name in CHANNELS if name != "relative_time")


def resample(
    source_time: Sequence[float],
    traj: Trajectory,
    query_times: Sequence[float],
) -> Trajectory:
    """
    Interpolate every channel of ``traj`` at ``query_times``.

    Parameters
    ----------
    source_time : sequence of float
        Time key of ``traj``, one entry per sample, strictly increasing.
        Usually ``traj.relative_time``.
    traj : Trajectory
        Source trajectory. Its heading channel should already be unwrapped,
        otherwise interpolation across a wrap produces a spurious sweep.
    query_times : sequence of float
        Requested times, strictly increasing.

    Returns
    -------
    Trajectory
        New trajectory with one sample per query time. Its ``relative_time``
        is ``query_times`` verbatim. Queries outside the source time range
        hold the first or last sample.

    Raises
    ------
    InvalidInputError
        If either time sequence is not strictly increasing, or
        ``source_time`` does not match the trajectory length. Nothing is
        produced in that case.
    """
    source_time = np.asarray(source_time, dtype=float)
    query_times = np.asarray(query_times, dtype=float)

    if len(source_time) != traj.size():
        raise InvalidInputError(
            f"Time key has {len(source_time)} entries but trajectory has {traj.size()} samples"
        )
    if not is_strictly_increasing(source_time):
        raise InvalidInputError("Source time key must be strictly increasing")
    if not is_strictly_increasing(query_times):
        raise InvalidInputError("Query times must be strictly increasing")

    channels = {
        name: interp1d_many(source_time, getattr(traj, name), query_times)
        for name in _INTERPOLATED
    }
    logger.debug("Resampled %d samples onto %d query times", traj.size(), len(query_times))
    return Trajectory(
        **channels,
        relative_time=query_times.copy(),
        metadata={**traj.metadata, "resampled": True},
    )


def resample_on_horizon(traj: Trajectory, start: float, dt: float, n_steps: int) -> Trajectory:
    """Resample ``traj`` on the grid ``start + i * dt`` for ``i < n_steps``."""
    if dt <= 0:
        raise InvalidInputError(f"Horizon step must be positive, got {dt}")
    return resample(traj.relative_time, traj, fill_increase(n_steps, start, dt))
