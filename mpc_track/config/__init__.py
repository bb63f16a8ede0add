"""
mpc_track Configuration Module - YAML-based tracking query specifications.

Example usage:
    from mpc_track.config import TrackingQuery

    query = TrackingQuery.from_yaml("query.yaml")
    result = run_query(query, base_path=Path("query.yaml").parent)
"""

from mpc_track.config.query import TrackingQuery, TrajectorySource, HorizonSpec, PoseSpec

__all__ = [
    "TrackingQuery",
    "TrajectorySource",
    "HorizonSpec",
    "PoseSpec",
]
