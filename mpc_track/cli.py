"""
mpc_track Command Line Interface.

This module provides a CLI for inspecting reference trajectories, resampling
them onto a prediction horizon and matching a vehicle pose against them.

Usage:
    mpc_track info --trajectory path.csv
    mpc_track resample --trajectory path.csv --dt 0.1 --steps 20 -o out.csv
    mpc_track nearest --trajectory path.csv --x 0.3 --y 0.3 --yaw 0.78 --interp
    mpc_track run --query query.yaml --output results/
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path


def _add_verbose(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="mpc_track",
        description="mpc_track: reference trajectory resampling and nearest-pose queries",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # info command
    info_parser = subparsers.add_parser(
        "info",
        help="Display trajectory information",
    )
    info_parser.add_argument(
        "--trajectory",
        required=True,
        help="Path to trajectory CSV or NPZ file",
    )
    _add_verbose(info_parser)

    # resample command
    resample_parser = subparsers.add_parser(
        "resample",
        help="Resample a trajectory onto an evenly spaced time grid",
    )
    resample_parser.add_argument(
        "--trajectory",
        required=True,
        help="Path to trajectory CSV or NPZ file",
    )
    resample_parser.add_argument(
        "--start",
        type=float,
        default=0.0,
        help="First query time in seconds (default: 0.0)",
    )
    resample_parser.add_argument(
        "--dt",
        type=float,
        required=True,
        help="Query time step in seconds",
    )
    resample_parser.add_argument(
        "--steps",
        type=int,
        required=True,
        help="Number of query times",
    )
    resample_parser.add_argument(
        "--no-unwrap",
        action="store_true",
        help="Do not unwrap the heading channel before resampling",
    )
    resample_parser.add_argument(
        "--output", "-o",
        help="Write the resampled trajectory to this CSV file",
    )
    _add_verbose(resample_parser)

    # nearest command
    nearest_parser = subparsers.add_parser(
        "nearest",
        help="Find the trajectory location nearest to a pose",
    )
    nearest_parser.add_argument(
        "--trajectory",
        required=True,
        help="Path to trajectory CSV or NPZ file",
    )
    nearest_parser.add_argument("--x", type=float, required=True, help="Query x [m]")
    nearest_parser.add_argument("--y", type=float, required=True, help="Query y [m]")
    nearest_parser.add_argument("--z", type=float, default=0.0, help="Query z [m]")
    nearest_parser.add_argument("--yaw", type=float, default=0.0, help="Query yaw [rad]")
    nearest_parser.add_argument(
        "--interp",
        action="store_true",
        help="Refine the match by projecting onto the adjacent segment",
    )
    _add_verbose(nearest_parser)

    # run command
    run_parser = subparsers.add_parser(
        "run",
        help="Run a tracking query from a YAML file",
    )
    run_parser.add_argument(
        "--query",
        required=True,
        help="Path to query YAML file",
    )
    run_parser.add_argument(
        "--output", "-o",
        help="Output directory for results",
    )
    run_parser.add_argument(
        "--plot",
        help="Save an XY plot of the reference and resampled path to this file",
    )
    _add_verbose(run_parser)

    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load(path: str, unwrap: bool = True):
    from mpc_track.planning.trajectory import Trajectory

    traj = Trajectory.load(path)
    return traj.with_unwrapped_yaw() if unwrap else traj


def cmd_info(args) -> int:
    """Display trajectory information."""
    try:
        traj = _load(args.trajectory, unwrap=False)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error loading trajectory: {e}", file=sys.stderr)
        return 1

    print(f"Trajectory: {args.trajectory}")
    print(f"  Samples: {traj.size()}")
    if traj.size() == 0:
        return 0

    print(f"  Time range: [{traj.relative_time[0]:.3f}, {traj.relative_time[-1]:.3f}] s")
    print(f"  Duration: {traj.duration():.3f} s")
    print(f"  Time strictly increasing: {traj.is_time_increasing()}")
    print(f"  x range: [{traj.x.min():.3f}, {traj.x.max():.3f}] m")
    print(f"  y range: [{traj.y.min():.3f}, {traj.y.max():.3f}] m")
    print(f"  Speed range: [{traj.vx.min():.3f}, {traj.vx.max():.3f}] m/s")
    return 0


def cmd_resample(args) -> int:
    """Resample a trajectory onto an evenly spaced grid."""
    from mpc_track.planning.resample import resample_on_horizon
    from mpc_track.planning.trajectory import CHANNELS

    try:
        traj = _load(args.trajectory, unwrap=not args.no_unwrap)
        result = resample_on_horizon(traj, args.start, args.dt, args.steps)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.output:
        result.to_csv(args.output)
        print(f"Resampled {traj.size()} samples onto {result.size()} times -> {args.output}")
    else:
        print(",".join(CHANNELS))
        for row in result.as_array():
            print(",".join(f"{v:.6f}" for v in row))
    return 0


def cmd_nearest(args) -> int:
    """Find the nearest trajectory location to a pose."""
    from mpc_track.planning.nearest import QueryPose, calc_nearest_pose, calc_nearest_pose_interp

    pose = QueryPose(x=args.x, y=args.y, z=args.z, yaw=args.yaw)
    try:
        traj = _load(args.trajectory)
        if args.interp:
            res = calc_nearest_pose_interp(traj, pose)
        else:
            res = calc_nearest_pose(traj, pose)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Nearest index: {res.index}")
    print(f"  Distance error: {res.min_dist_error:.6f} m")
    print(f"  Yaw error: {res.yaw_error:.6f} rad")
    print(f"  Nearest time: {res.nearest_time:.6f} s")
    print(f"  Nearest position: ({res.nearest_pose[0]:.6f}, {res.nearest_pose[1]:.6f}, {res.nearest_pose[2]:.6f})")
    return 0


def cmd_run(args) -> int:
    """Run a tracking query from YAML."""
    from mpc_track.config.query import TrackingQuery
    from mpc_track.workflows import run_query

    try:
        query = TrackingQuery.from_yaml(args.query)
        result = run_query(
            query,
            base_path=Path(args.query).parent,
            output_dir=args.output,
        )
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error during query: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1

    summary = result["summary"]
    print(f"Source samples: {summary['n_source']} ({summary['duration']:.3f} s)")
    print(f"Resampled samples: {summary['n_resampled']}")

    nearest = result["nearest"]
    if nearest is not None:
        print(f"Nearest index: {nearest.index}")
        print(f"  Distance error: {nearest.min_dist_error:.6f} m")
        print(f"  Yaw error: {nearest.yaw_error:.6f} rad")
        print(f"  Nearest time: {nearest.nearest_time:.6f} s")

    if args.plot:
        import matplotlib

        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
        from mpc_track.plotting import plot_resampled

        fig, _ = plot_resampled(result["source"], result["resampled"], nearest=nearest)
        fig.savefig(args.plot)
        plt.close(fig)
        print(f"Plot saved to: {args.plot}")

    if args.output:
        print(f"\nResults saved to: {args.output}")
    return 0


def main(argv=None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    _configure_logging(args.verbose)

    if args.command == "info":
        return cmd_info(args)
    elif args.command == "resample":
        return cmd_resample(args)
    elif args.command == "nearest":
        return cmd_nearest(args)
    elif args.command == "run":
        return cmd_run(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
