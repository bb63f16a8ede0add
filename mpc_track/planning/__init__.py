"""Reference trajectory utilities."""

from .trajectory import CHANNELS, Trajectory, TrajectoryPoint
from .interpolation import (
    fill_increase,
    interp1d,
    interp1d_many,
    is_strictly_increasing,
)
from .nearest import (
    NearestPoseResult,
    QueryPose,
    calc_nearest_index,
    calc_nearest_pose,
    calc_nearest_pose_interp,
)
from .resample import resample, resample_on_horizon

__all__ = [
    "CHANNELS",
    "Trajectory",
    "TrajectoryPoint",
    "fill_increase",
    "interp1d",
    "interp1d_many",
    "is_strictly_increasing",
    "NearestPoseResult",
    "QueryPose",
    "calc_nearest_index",
    "calc_nearest_pose",
    "calc_nearest_pose_interp",
    "resample",
    "resample_on_horizon",
]
