"""
Angle utilities for heading channels.

Headings coming from the planner are individually wrapped, so they jump by
2*pi whenever the path turns through the +-pi boundary. Linear interpolation
across such a jump is wrong, so the heading channel is unwrapped once into a
continuous sequence before any interpolation or nearest-pose refinement.

The localization side exchanges orientations as quaternions; they are reduced
to a single yaw angle here, at the boundary.
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np
from scipy.spatial.transform import Rotation

TWO_PI = 2.0 * math.pi


def normalize_to_semicircle(angle: float) -> float:
    """
    Reduce an angle to the semicircle around zero.

    Parameters
    ----------
    angle : float
        Angle in radians.

    Returns
    -------
    float
        Equivalent angle in [-pi, pi]. Exact multiples of 2*pi map to 0.0,
        and pi / -pi are returned unchanged.
    """
    reduced = math.fmod(angle, TWO_PI)
    if reduced > math.pi:
        reduced -= TWO_PI
    elif reduced < -math.pi:
        reduced += TWO_PI
    # fmod keeps the sign of the dividend, so -2*pi would give -0.0
    return reduced + 0.0


def normalize_to_semicircle_array(angles) -> np.ndarray:
    """Elementwise :func:`normalize_to_semicircle` over an array-like."""
    arr = np.asarray(angles, dtype=float)
    return np.array([normalize_to_semicircle(a) for a in arr.ravel()]).reshape(arr.shape)


def unwrap_to_continuous(angles: Sequence[float]) -> np.ndarray:
    """
    Unwrap a sequence of wrapped angles into a continuous one.

    The first element is kept as is. Every later element is shifted by a
    multiple of 2*pi so that its step from the already corrected predecessor
    lies within [-pi, pi]. The result tracks cumulative rotation instead of
    wrapping, and normalizing it elementwise gives back the input.

    Parameters
    ----------
    angles : sequence of float
        Angles in radians, each in [-pi, pi].

    Returns
    -------
    np.ndarray
        New array of unwrapped angles; the input is not modified.
    """
    raw = np.asarray(angles, dtype=float)
    out = raw.copy()
    for i in range(1, len(out)):
        out[i] = out[i - 1] + normalize_to_semicircle(raw[i] - out[i - 1])
    return out


def quaternion_from_yaw(yaw: float) -> np.ndarray:
    """Quaternion ``[x, y, z, w]`` for a pure rotation about the z axis."""
    return Rotation.from_euler("z", yaw).as_quat()


def yaw_from_quaternion(q) -> float:
    """
    Extract the yaw angle from a quaternion.

    Parameters
    ----------
    q : array-like
        Quaternion in scalar-last order ``[x, y, z, w]``.

    Returns
    -------
    float
        Yaw in radians, in [-pi, pi].
    """
    q = np.asarray(q, dtype=float)
    if q.shape != (4,):
        raise ValueError(f"Quaternion must have 4 components, got shape {q.shape}")
    yaw, _, _ = Rotation.from_quat(q).as_euler("zyx")
    return float(yaw)
