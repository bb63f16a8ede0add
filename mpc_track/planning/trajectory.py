from __future__ import annotations

import csv
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, NamedTuple, Union

import numpy as np

from mpc_track.errors import InvalidInputError
from mpc_track.geometry.angles import unwrap_to_continuous
from mpc_track.planning.interpolation import is_strictly_increasing

logger = logging.getLogger(__name__)

CHANNELS = ("x", "y", "z", "yaw", "vx", "k", "relative_time")


class TrajectoryPoint(NamedTuple):
    """Row view of a single trajectory sample."""

    x: float
    y: float
    z: float
    yaw: float
    vx: float
    k: float
    relative_time: float


def _empty() -> np.ndarray:
    return np.zeros(0, dtype=float)


@dataclass
class Trajectory:
    """
    Reference path stored as parallel per-channel arrays.

    Attributes
    ----------
    x, y, z : np.ndarray
        Position [m], shape (N,)
    yaw : np.ndarray
        Heading [rad], continuous once unwrapped
    vx : np.ndarray
        Signed longitudinal velocity [m/s]
    k : np.ndarray
        Signed curvature [1/m]
    relative_time : np.ndarray
        Time from the start of the path [s]
    metadata : dict
        Free-form information about where the trajectory came from

    All channels always have the same length. Samples are kept in insertion
    order; time monotonicity is not enforced here, it is checked by the
    operations that need it.
    """

    x: np.ndarray = field(default_factory=_empty)
    y: np.ndarray = field(default_factory=_empty)
    z: np.ndarray = field(default_factory=_empty)
    yaw: np.ndarray = field(default_factory=_empty)
    vx: np.ndarray = field(default_factory=_empty)
    k: np.ndarray = field(default_factory=_empty)
    relative_time: np.ndarray = field(default_factory=_empty)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        for name in CHANNELS:
            arr = np.atleast_1d(np.asarray(getattr(self, name), dtype=float))
            if arr.ndim != 1:
                raise InvalidInputError(f"Channel '{name}' must be 1-D, got shape {arr.shape}")
            setattr(self, name, arr)
        self.validate()

    # ---------------------------------------------------------
    # Construction
    # ---------------------------------------------------------
    @classmethod
    def empty(cls) -> "Trajectory":
        return cls()

    def push_back(
        self,
        x: float,
        y: float,
        z: float,
        yaw: float,
        vx: float,
        k: float,
        relative_time: float,
    ) -> None:
        """
        Append one sample to every channel.

        Each call copies all channel arrays, so building a long path point by
        point is quadratic. Bulk builders should pass whole arrays to the
        constructor instead.
        """
        row = (x, y, z, yaw, vx, k, relative_time)
        # Convert first so a bad value leaves the trajectory untouched
        values = [float(v) for v in row]
        for name, v in zip(CHANNELS, values):
            setattr(self, name, np.append(getattr(self, name), v))

    def clear(self) -> None:
        for name in CHANNELS:
            setattr(self, name, _empty())

    def copy(self) -> "Trajectory":
        return Trajectory(
            **{name: getattr(self, name).copy() for name in CHANNELS},
            metadata=dict(self.metadata),
        )

    # ---------------------------------------------------------
    # Queries
    # ---------------------------------------------------------
    def size(self) -> int:
        return len(self.relative_time)

    def __len__(self) -> int:
        return self.size()

    def point(self, i: int) -> TrajectoryPoint:
        return TrajectoryPoint(*(float(getattr(self, name)[i]) for name in CHANNELS))

    def validate(self) -> None:
        """Raise InvalidInputError if the channels differ in length."""
        lengths = {name: len(getattr(self, name)) for name in CHANNELS}
        if len(set(lengths.values())) > 1:
            raise InvalidInputError(f"Trajectory channels differ in length: {lengths}")

    def is_time_increasing(self) -> bool:
        return is_strictly_increasing(self.relative_time)

    def duration(self) -> float:
        if self.size() == 0:
            return 0.0
        return float(self.relative_time[-1] - self.relative_time[0])

    def with_unwrapped_yaw(self) -> "Trajectory":
        """Copy of this trajectory with a continuous heading channel."""
        out = self.copy()
        out.yaw = unwrap_to_continuous(self.yaw)
        return out

    def as_array(self) -> np.ndarray:
        """Stack the channels into an (N, 7) array in CHANNELS order."""
        return np.column_stack([getattr(self, name) for name in CHANNELS])

    # ---------------------------------------------------------
    # File I/O
    # ---------------------------------------------------------
    @classmethod
    def load(cls, path: Union[str, Path]) -> "Trajectory":
        """Load a trajectory from a .csv or .npz file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Trajectory file not found: {path}")

        suffix = path.suffix.lower()
        if suffix == ".csv":
            return cls.from_csv(path)
        if suffix == ".npz":
            return cls.from_npz(path)
        raise ValueError(f"Unknown trajectory file format: {suffix}. Use .csv or .npz")

    @classmethod
    def from_csv(cls, path: Union[str, Path]) -> "Trajectory":
        """
        Read a CSV file whose header names every channel.

        Column order is free; extra columns are ignored.
        """
        path = Path(path)
        with open(path, "r", newline="") as f:
            reader = csv.reader(f)
            first = next(reader, None)
            if first is None:
                raise ValueError(f"Trajectory CSV {path} is empty")
            header = [h.strip() for h in first]
            rows = []
            for row in reader:
                if not row:
                    continue
                if len(row) < len(header):
                    raise ValueError(
                        f"Trajectory CSV {path} line {reader.line_num} has {len(row)} fields, "
                        f"expected {len(header)}"
                    )
                rows.append(row)

        missing = [name for name in CHANNELS if name not in header]
        if missing:
            raise ValueError(f"Trajectory CSV {path} is missing columns: {missing}")

        cols = {name: header.index(name) for name in CHANNELS}
        data = {
            name: np.array([float(row[col]) for row in rows], dtype=float)
            for name, col in cols.items()
        }
        logger.debug("Loaded %d samples from %s", len(rows), path)
        return cls(**data, metadata={"source": "csv", "path": str(path)})

    @classmethod
    def from_npz(cls, path: Union[str, Path]) -> "Trajectory":
        path = Path(path)
        with np.load(path) as data:
            missing = [name for name in CHANNELS if name not in data.files]
            if missing:
                raise ValueError(f"Trajectory archive {path} is missing arrays: {missing}")
            channels = {name: np.asarray(data[name], dtype=float) for name in CHANNELS}
        return cls(**channels, metadata={"source": "npz", "path": str(path)})

    def to_csv(self, path: Union[str, Path]) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(CHANNELS)
            for row in self.as_array():
                writer.writerow([repr(float(v)) for v in row])
        return path

    def to_npz(self, path: Union[str, Path]) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        np.savez(path, **{name: getattr(self, name) for name in CHANNELS})
        return path
