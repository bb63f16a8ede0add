from __future__ import annotations

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, Optional, Union

from mpc_track.config.query import TrackingQuery
from mpc_track.planning.nearest import calc_nearest_pose, calc_nearest_pose_interp
from mpc_track.planning.resample import resample

logger = logging.getLogger(__name__)


def run_query(
    query: TrackingQuery,
    base_path: Optional[Union[str, Path]] = None,
    output_dir: Optional[Union[str, Path]] = None,
) -> Dict[str, Any]:
    """
    Execute a tracking query.

    Loads the reference trajectory, resamples it on the horizon grid and,
    when the query carries a pose, matches that pose against the
    (unresampled) trajectory.

    Parameters
    ----------
    query : TrackingQuery
        Parsed query
    base_path : str or Path, optional
        Directory that relative trajectory paths are resolved against
    output_dir : str or Path, optional
        If given, ``resampled.csv`` and ``summary.json`` are written here

    Returns
    -------
    dict
        ``source`` and ``resampled`` trajectories, ``nearest`` result (or
        None) and a JSON-friendly ``summary``.
    """
    source = query.trajectory.load(Path(base_path) if base_path else None)
    logger.debug("Loaded reference trajectory with %d samples", source.size())

    grid = query.horizon.to_grid()
    resampled = resample(source.relative_time, source, grid)

    nearest = None
    if query.pose is not None:
        pose = query.pose.to_query_pose()
        if query.interpolate_nearest:
            nearest = calc_nearest_pose_interp(source, pose)
        else:
            nearest = calc_nearest_pose(source, pose)

    summary: Dict[str, Any] = {
        "n_source": source.size(),
        "duration": source.duration(),
        "n_resampled": resampled.size(),
        "horizon": [float(t) for t in grid],
        "nearest": asdict(nearest) if nearest is not None else None,
    }

    if output_dir is not None:
        out = Path(output_dir)
        out.mkdir(parents=True, exist_ok=True)
        resampled.to_csv(out / "resampled.csv")
        with open(out / "summary.json", "w") as f:
            json.dump(summary, f, indent=2)
        logger.debug("Wrote results to %s", out)

    return {
        "source": source,
        "resampled": resampled,
        "nearest": nearest,
        "summary": summary,
    }
