"""
Nearest-pose search against a reference trajectory.

Two queries are provided:

* :func:`calc_nearest_pose` scans every sample and reports the closest one.
* :func:`calc_nearest_pose_interp` starts from that sample and projects the
  query onto the infinite line through an adjacent segment, giving a
  sub-sample distance, heading and time. The projection is not clamped to the
  segment, so a query before the first sample yields a negative time and a
  query past the last sample yields a time beyond the path duration.

Matching uses planar (x, y) distance only. Yaw errors are raw differences
``query.yaw - path yaw`` and are not normalized.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from mpc_track.errors import EmptyTrajectoryError
from mpc_track.geometry.angles import yaw_from_quaternion
from mpc_track.planning.trajectory import Trajectory

logger = logging.getLogger(__name__)

# Segments shorter than this are treated as degenerate and skipped
_MIN_SEGMENT_LENGTH = 1e-9


@dataclass
class QueryPose:
    """Vehicle pose supplied by localization, reduced to position and yaw."""

    x: float
    y: float
    z: float = 0.0
    yaw: float = 0.0

    @classmethod
    def from_quaternion(cls, x: float, y: float, z: float, q) -> "QueryPose":
        """Build a pose from a position and an ``[x, y, z, w]`` quaternion."""
        return cls(x=float(x), y=float(y), z=float(z), yaw=yaw_from_quaternion(q))


@dataclass
class NearestPoseResult:
    """
    Outcome of a nearest-pose query.

    Attributes
    ----------
    index : int
        Index of the closest trajectory sample
    min_dist_error : float
        Planar distance from the query to the matched location (>= 0)
    yaw_error : float
        ``query.yaw`` minus the path heading at the matched location
    nearest_time : float
        Relative time of the matched location; may lie outside the path's
        time range for the interpolated query
    nearest_pose : tuple of float
        Matched position ``(x, y, z)``
    """

    index: int
    min_dist_error: float
    yaw_error: float
    nearest_time: float
    nearest_pose: Tuple[float, float, float]


def _require_points(traj: Trajectory) -> None:
    if traj.size() == 0:
        raise EmptyTrajectoryError("Cannot search for the nearest pose on an empty trajectory")


def calc_nearest_index(traj: Trajectory, pose: QueryPose) -> int:
    """
    Index of the sample closest to ``pose`` in the plane.

    Exact ties go to the lowest index. Near-ties are not merged: the
    smallest squared distance as computed in floating point wins.
    """
    _require_points(traj)
    dist_sq = (traj.x - pose.x) ** 2 + (traj.y - pose.y) ** 2
    # argmin returns the first occurrence of the minimum
    return int(np.argmin(dist_sq))


def calc_nearest_pose(traj: Trajectory, pose: QueryPose) -> NearestPoseResult:
    """
    Brute-force nearest sample.

    Parameters
    ----------
    traj : Trajectory
        Reference path with at least one sample.
    pose : QueryPose
        Current vehicle pose.

    Returns
    -------
    NearestPoseResult

    Raises
    ------
    EmptyTrajectoryError
        If ``traj`` has no samples.
    """
    i = calc_nearest_index(traj, pose)
    dx = float(traj.x[i]) - pose.x
    dy = float(traj.y[i]) - pose.y
    return NearestPoseResult(
        index=i,
        min_dist_error=math.sqrt(dx * dx + dy * dy),
        yaw_error=pose.yaw - float(traj.yaw[i]),
        nearest_time=float(traj.relative_time[i]),
        nearest_pose=(float(traj.x[i]), float(traj.y[i]), float(traj.z[i])),
    )


def _project_onto_segment(
    traj: Trajectory, i: int, j: int, pose: QueryPose
) -> Optional[Tuple[float, float]]:
    """
    Project ``pose`` onto the line from sample ``i`` towards sample ``j``.

    Returns ``(t, perpendicular distance)`` with the point at
    ``p[i] + t * (p[j] - p[i])``, or None for a degenerate segment.
    """
    sx = float(traj.x[j] - traj.x[i])
    sy = float(traj.y[j] - traj.y[i])
    length = math.hypot(sx, sy)
    if length < _MIN_SEGMENT_LENGTH:
        return None

    qx = pose.x - float(traj.x[i])
    qy = pose.y - float(traj.y[i])
    t = (qx * sx + qy * sy) / (sx * sx + sy * sy)
    dist = abs(sx * qy - sy * qx) / length
    return t, dist


def calc_nearest_pose_interp(traj: Trajectory, pose: QueryPose) -> NearestPoseResult:
    """
    Nearest location on the path, refined by projecting onto a segment.

    The brute-force nearest sample ``i`` is found first. Of the segments
    ``(i, i-1)`` and ``(i, i+1)`` that exist, the one whose line passes
    closer to the query is used; the previous segment wins ties. The
    projection parameter ``t`` is not clamped, and position, heading, z and
    time are all interpolated with it. ``index`` stays ``i``.

    If neither neighbouring segment is usable (single sample, or repeated
    positions) the brute-force result is returned.

    Raises
    ------
    EmptyTrajectoryError
        If ``traj`` has no samples.
    """
    i = calc_nearest_index(traj, pose)

    best = None
    for j in (i - 1, i + 1):
        if j < 0 or j >= traj.size():
            continue
        proj = _project_onto_segment(traj, i, j, pose)
        if proj is None:
            continue
        if best is None or proj[1] < best[2]:
            best = (j, proj[0], proj[1])

    if best is None:
        logger.debug("No usable segment next to index %d, falling back to sample", i)
        return calc_nearest_pose(traj, pose)

    j, t, dist = best
    logger.debug("Projected onto segment (%d, %d) with t=%.6f", i, j, t)

    def lerp(channel: np.ndarray) -> float:
        return float(channel[i] + t * (channel[j] - channel[i]))

    return NearestPoseResult(
        index=i,
        min_dist_error=dist,
        yaw_error=pose.yaw - lerp(traj.yaw),
        nearest_time=lerp(traj.relative_time),
        nearest_pose=(lerp(traj.x), lerp(traj.y), lerp(traj.z)),
    )
