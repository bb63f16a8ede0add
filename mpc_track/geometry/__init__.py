"""
Geometric utilities for mpc_track.

This module contains angle normalization, heading unwrapping and the
yaw/quaternion conversions used at the localization boundary.
"""

from . import angles
from .angles import (
    normalize_to_semicircle,
    normalize_to_semicircle_array,
    unwrap_to_continuous,
    quaternion_from_yaw,
    yaw_from_quaternion,
)

__all__ = [
    "angles",
    "normalize_to_semicircle",
    "normalize_to_semicircle_array",
    "unwrap_to_continuous",
    "quaternion_from_yaw",
    "yaw_from_quaternion",
]
