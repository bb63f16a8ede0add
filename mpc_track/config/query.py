"""
Tracking Query Specification Parser.

This module defines the YAML schema for tracking queries: which reference
trajectory to load, which prediction-horizon grid to resample it on, and
optionally which vehicle pose to match against it.

Example YAML format:
    query:
      trajectory:
        path: "reference.csv"   # CSV or NPZ, relative to this file
        unwrap_yaw: true

      horizon:
        start: 0.0
        dt: 0.1
        n_steps: 20
        # or an explicit grid:
        # times: [0.0, 0.1, 0.25, 0.5]

      pose:                     # optional
        x: 0.3
        y: 0.3
        yaw: 0.785
        # or quaternion: [0, 0, 0.383, 0.924]

      interpolate_nearest: true
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import numpy as np
import yaml

from mpc_track.planning.interpolation import fill_increase, is_strictly_increasing


@dataclass
class TrajectorySource:
    """
    Where to read the reference trajectory from.

    Attributes
    ----------
    path : str
        Path to a .csv or .npz trajectory file
    unwrap_yaw : bool
        Whether to unwrap the heading channel after loading
    """

    path: str
    unwrap_yaw: bool = True

    def __post_init__(self):
        if not self.path:
            raise ValueError("Trajectory source requires 'path' to be specified")

    def load(self, base_path: Optional[Path] = None) -> "Trajectory":
        """
        Load the trajectory.

        Parameters
        ----------
        base_path : Path, optional
            Base path for resolving relative file paths

        Returns
        -------
        Trajectory
        """
        from mpc_track.planning.trajectory import Trajectory

        file_path = Path(self.path)
        if base_path and not file_path.is_absolute():
            file_path = Path(base_path) / file_path

        traj = Trajectory.load(file_path)
        if self.unwrap_yaw:
            traj = traj.with_unwrapped_yaw()
        return traj

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TrajectorySource":
        return cls(
            path=data.get("path", ""),
            unwrap_yaw=bool(data.get("unwrap_yaw", True)),
        )


@dataclass
class HorizonSpec:
    """
    Prediction-horizon time grid.

    Attributes
    ----------
    start : float
        First query time [s]
    dt : float
        Step between query times [s]
    n_steps : int
        Number of query times
    times : list[float] or None
        Explicit grid; overrides start/dt/n_steps when given
    """

    start: float = 0.0
    dt: float = 0.1
    n_steps: int = 20
    times: Optional[List[float]] = None

    def __post_init__(self):
        if self.times is not None:
            if len(self.times) == 0:
                raise ValueError("Explicit horizon times must not be empty")
            if not is_strictly_increasing(self.times):
                raise ValueError(f"Horizon times must be strictly increasing, got {self.times}")
            return
        if self.dt <= 0:
            raise ValueError(f"Horizon dt must be positive, got {self.dt}")
        if self.n_steps < 1:
            raise ValueError(f"Need at least 1 horizon step, got {self.n_steps}")

    def to_grid(self) -> np.ndarray:
        """
        Generate the query time grid.

        Returns
        -------
        np.ndarray
            Strictly increasing array of query times
        """
        if self.times is not None:
            return np.asarray(self.times, dtype=float)
        return fill_increase(self.n_steps, self.start, self.dt)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HorizonSpec":
        times = data.get("times")
        return cls(
            start=float(data.get("start", 0.0)),
            dt=float(data.get("dt", 0.1)),
            n_steps=int(data.get("n_steps", 20)),
            times=[float(t) for t in times] if times is not None else None,
        )


@dataclass
class PoseSpec:
    """
    Vehicle pose to match against the trajectory.

    Either ``yaw`` or ``quaternion`` ([x, y, z, w]) gives the heading.
    """

    x: float
    y: float
    z: float = 0.0
    yaw: Optional[float] = None
    quaternion: Optional[List[float]] = None

    def __post_init__(self):
        if self.yaw is None and self.quaternion is None:
            raise ValueError("Pose requires either 'yaw' or 'quaternion'")
        if self.yaw is not None and self.quaternion is not None:
            raise ValueError("Pose accepts only one of 'yaw' and 'quaternion'")
        if self.quaternion is not None and len(self.quaternion) != 4:
            raise ValueError(f"Quaternion must have 4 components, got {len(self.quaternion)}")

    def to_query_pose(self) -> "QueryPose":
        from mpc_track.planning.nearest import QueryPose

        if self.quaternion is not None:
            return QueryPose.from_quaternion(self.x, self.y, self.z, self.quaternion)
        return QueryPose(x=self.x, y=self.y, z=self.z, yaw=self.yaw)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PoseSpec":
        if "x" not in data or "y" not in data:
            raise ValueError("Pose requires 'x' and 'y'")
        yaw = data.get("yaw")
        quat = data.get("quaternion")
        return cls(
            x=float(data["x"]),
            y=float(data["y"]),
            z=float(data.get("z", 0.0)),
            yaw=float(yaw) if yaw is not None else None,
            quaternion=[float(v) for v in quat] if quat is not None else None,
        )


@dataclass
class TrackingQuery:
    """
    Complete tracking query specification.

    Attributes
    ----------
    trajectory : TrajectorySource
        Reference trajectory to load
    horizon : HorizonSpec
        Grid to resample the trajectory on
    pose : PoseSpec or None
        Pose for the nearest-pose query (skipped when None)
    interpolate_nearest : bool
        Use the segment-projected nearest pose instead of the nearest sample
    """

    trajectory: TrajectorySource
    horizon: HorizonSpec = field(default_factory=HorizonSpec)
    pose: Optional[PoseSpec] = None
    interpolate_nearest: bool = True

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "TrackingQuery":
        """
        Load query specification from a YAML file.

        Parameters
        ----------
        path : str or Path
            Path to the YAML file

        Returns
        -------
        TrackingQuery
            Parsed query specification
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Query file not found: {path}")
        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_yaml_str(cls, yaml_str: str) -> "TrackingQuery":
        """Load from a YAML string."""
        data = yaml.safe_load(yaml_str)
        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TrackingQuery":
        """
        Create TrackingQuery from a parsed dictionary.

        Parameters
        ----------
        data : dict
            Parsed YAML data (expects a "query" key or direct fields)

        Returns
        -------
        TrackingQuery
        """
        # Handle nested "query" key
        if "query" in data:
            data = data["query"] or {}

        traj_data = data.get("trajectory")
        if not traj_data:
            raise ValueError("Query requires a 'trajectory' section")

        pose_data = data.get("pose")

        return cls(
            trajectory=TrajectorySource.from_dict(traj_data),
            horizon=HorizonSpec.from_dict(data.get("horizon") or {}),
            pose=PoseSpec.from_dict(pose_data) if pose_data else None,
            interpolate_nearest=bool(data.get("interpolate_nearest", True)),
        )
