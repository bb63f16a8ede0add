"""
Exceptions raised by the trajectory core.

All failures are reported synchronously to the caller. Nothing is retried
and no partial result is returned.
"""

from __future__ import annotations


class TrackingError(ValueError):
    """Base class for trajectory core failures."""


class InvalidInputError(TrackingError):
    """
    Raised when an independent-variable sequence is not strictly increasing,
    when paired sequences differ in length, or when a required sequence is
    empty.
    """


class EmptyTrajectoryError(TrackingError):
    """Raised when a nearest-pose query is made against a trajectory with no points."""
