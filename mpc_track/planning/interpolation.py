"""
Monotonic 1-D linear interpolation.

The primitives here accept any indexable sequence of reals (lists, tuples,
numpy arrays) for both the independent variable ``idx`` and the dependent
variable ``value``. Queries outside ``[idx[0], idx[-1]]`` are clamped to the
boundary values; there is no extrapolation.
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from mpc_track.errors import InvalidInputError

logger = logging.getLogger(__name__)


def is_strictly_increasing(seq: Sequence[float]) -> bool:
    """Check that every element is strictly greater than its predecessor."""
    return all(seq[i] < seq[i + 1] for i in range(len(seq) - 1))


def _check_pair(idx: Sequence[float], value: Sequence[float]) -> None:
    if len(idx) == 0:
        raise InvalidInputError("Interpolation requires at least one sample")
    if len(idx) != len(value):
        raise InvalidInputError(
            f"idx and value must have equal length, got {len(idx)} and {len(value)}"
        )
    if not is_strictly_increasing(idx):
        logger.debug("Rejecting non-increasing independent variable: %s", list(idx))
        raise InvalidInputError("Independent variable must be strictly increasing")


def _interp_checked(idx: Sequence[float], value: Sequence[float], ref: float) -> float:
    if ref <= idx[0]:
        return float(value[0])
    if ref >= idx[-1]:
        return float(value[-1])

    # Linear scan for idx[i] <= ref < idx[i + 1]
    i = 0
    while ref >= idx[i + 1]:
        i += 1

    ratio = (ref - idx[i]) / (idx[i + 1] - idx[i])
    return float(value[i] + (value[i + 1] - value[i]) * ratio)


def interp1d(idx: Sequence[float], value: Sequence[float], ref: float) -> float:
    """
    Linearly interpolate ``value`` at ``ref``.

    Parameters
    ----------
    idx : sequence of float
        Independent variable, strictly increasing.
    value : sequence of float
        Dependent variable, same length as ``idx``.
    ref : float
        Query point.

    Returns
    -------
    float
        ``value[0]`` if ``ref <= idx[0]``, ``value[-1]`` if
        ``ref >= idx[-1]``, otherwise the linear interpolation between the
        bracketing samples.

    Raises
    ------
    InvalidInputError
        If ``idx`` is empty, not strictly increasing, or differs in length
        from ``value``.
    """
    _check_pair(idx, value)
    return _interp_checked(idx, value, ref)


def interp1d_many(
    idx: Sequence[float], value: Sequence[float], refs: Sequence[float]
) -> np.ndarray:
    """
    Interpolate ``value`` at every point of ``refs``.

    The precondition on ``idx`` is checked once, before any query is
    evaluated, so either all results are produced or none.
    """
    _check_pair(idx, value)
    return np.array([_interp_checked(idx, value, ref) for ref in refs], dtype=float)


def fill_increase(n: int, start: float, step: float) -> np.ndarray:
    """
    Build an evenly spaced grid ``[start, start + step, ...]`` of length ``n``.

    Each element is computed as ``start + i * step`` rather than by
    accumulation, so long grids do not drift.
    """
    if n < 0:
        raise ValueError(f"Grid length must be non-negative, got {n}")
    return start + step * np.arange(n, dtype=float)
