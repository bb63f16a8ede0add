"""
Pytest configuration and shared fixtures for mpc_track tests.
"""

import math

import matplotlib
import numpy as np
import pytest

from mpc_track.planning.trajectory import Trajectory

matplotlib.use("Agg")


@pytest.fixture
def diagonal_trajectory():
    """Three samples along the 45 degree line, one second apart."""
    traj = Trajectory()
    #              x    y    z    yaw          vx   k    time
    traj.push_back(0.0, 0.0, 0.0, math.pi / 4, 0.0, 0.0, 0.0)
    traj.push_back(1.0, 1.0, 0.0, math.pi / 4, 1.0, 0.0, 1.0)
    traj.push_back(2.0, 2.0, 0.0, math.pi / 4, 1.0, 0.0, 2.0)
    return traj


@pytest.fixture
def bent_trajectory():
    """Three samples with varying heading and speed, used for resampling."""
    traj = Trajectory()
    #              x    y    z    yaw   vx   k    time
    traj.push_back(0.0, 0.0, 0.0, 0.2, 0.0, 0.0, 0.0)
    traj.push_back(1.0, 2.0, 0.0, 0.5, 1.0, 0.0, 1.0)
    traj.push_back(2.0, 3.0, 0.0, -0.2, 1.0, 0.0, 2.0)
    return traj


@pytest.fixture
def circle_trajectory():
    """Counter-clockwise circle of radius 5 whose wrapped heading crosses +-pi."""
    n = 40
    theta = np.linspace(0.0, 2.0 * np.pi, n, endpoint=False)
    heading = theta + np.pi / 2
    wrapped = (heading + np.pi) % (2.0 * np.pi) - np.pi
    return Trajectory(
        x=5.0 * np.cos(theta),
        y=5.0 * np.sin(theta),
        z=np.zeros(n),
        yaw=wrapped,
        vx=np.full(n, 2.0),
        k=np.full(n, 0.2),
        relative_time=np.linspace(0.0, 15.0, n),
    )


@pytest.fixture
def trajectory_csv(tmp_path, bent_trajectory):
    """The bent trajectory written to a CSV file."""
    return bent_trajectory.to_csv(tmp_path / "reference.csv")
