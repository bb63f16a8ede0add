#!/usr/bin/env python3
"""
Example: Resampling a reference path and matching a vehicle pose against it.

This script demonstrates the end-to-end workflow:
1. Build a reference trajectory (a lane change) and save it as CSV
2. Load the query specification from YAML
3. Resample the path on the prediction horizon and run the nearest-pose query
4. Display and save results

Usage:
    python run_tracking.py
"""

import sys
from pathlib import Path

import numpy as np

# Path setup
SCRIPT_DIR = Path(__file__).parent
OUTPUT_DIR = SCRIPT_DIR / "results"


def build_reference():
    """Write a lane-change reference path to reference.csv."""
    from mpc_track.planning.trajectory import Trajectory

    t = np.linspace(0.0, 6.0, 61)
    speed = 5.0
    x = speed * t
    # Smooth 3.5 m lateral offset between t=1 and t=5
    s = np.clip((t - 1.0) / 4.0, 0.0, 1.0)
    y = 3.5 * (10 * s**3 - 15 * s**4 + 6 * s**5)
    dy = np.gradient(y, x)
    ddy = np.gradient(dy, x)

    traj = Trajectory(
        x=x,
        y=y,
        z=np.zeros_like(t),
        yaw=np.arctan2(dy, 1.0),
        vx=np.full_like(t, speed),
        k=ddy / (1.0 + dy**2) ** 1.5,
        relative_time=t,
    )
    path = traj.to_csv(SCRIPT_DIR / "reference.csv")
    print(f"  -> Saved reference to {path}")
    return path


def display_results(result):
    """Display query results."""
    print("\n" + "=" * 60)
    print("TRACKING QUERY RESULTS")
    print("=" * 60)

    summary = result["summary"]
    print(f"\nReference samples: {summary['n_source']} over {summary['duration']:.2f} s")
    print(f"Horizon samples: {summary['n_resampled']}")

    resampled = result["resampled"]
    print("\n  time      x        y       yaw")
    for t, x, y, yaw in zip(resampled.relative_time, resampled.x, resampled.y, resampled.yaw):
        print(f"  {t:5.2f}  {x:7.3f}  {y:7.3f}  {yaw:7.4f}")

    nearest = result["nearest"]
    if nearest is not None:
        print(f"\nNearest index: {nearest.index}")
        print(f"Lateral error: {nearest.min_dist_error:.4f} m")
        print(f"Yaw error: {nearest.yaw_error:.4f} rad")
        print(f"Nearest time: {nearest.nearest_time:.4f} s")

    print(f"\nResults saved to: {OUTPUT_DIR}/")


def main():
    """Main entry point."""
    from mpc_track.config.query import TrackingQuery
    from mpc_track.workflows import run_query

    print("mpc_track Workflow Example")
    print("-" * 40)

    build_reference()

    query_file = SCRIPT_DIR / "tracking_query.yaml"
    try:
        query = TrackingQuery.from_yaml(query_file)
        result = run_query(query, base_path=SCRIPT_DIR, output_dir=OUTPUT_DIR)
    except (FileNotFoundError, ValueError) as e:
        print(f"\nError: {e}")
        return 1

    display_results(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
