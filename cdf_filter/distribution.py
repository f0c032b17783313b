"""Cumulative distribution series for the filter chart.

Small datasets are plotted point-by-point so every value is visible; larger
ones are summarized on a fixed grid of evenly spaced boundaries. Both modes
yield a non-decreasing cumulative count.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Tuple

import numpy as np

from .scale import ScaleConfig

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

__all__ = [
    "EXACT_POINTS_LIMIT",
    "MAX_BINS",
    "DistributionPoint",
    "Distribution",
    "sort_values",
    "build_distribution",
]

# Datasets up to this size keep one point per value.
EXACT_POINTS_LIMIT = 50
MAX_BINS = 100


@dataclass(frozen=True)
class DistributionPoint:
    """One vertex of the cumulative series."""

    value: float
    cumulative_count: int


@dataclass(frozen=True, eq=False)
class Distribution:
    """Sorted data, axis domain and plottable cumulative series.

    Parameters
    ----------
    sorted_values : numpy.ndarray
        Ascending float64 copy of the finite input values.
    scale : ScaleConfig
        Domain spanning the first and last sorted value.
    points : tuple[DistributionPoint, ...]
        Cumulative series in plotting order.
    """

    sorted_values: np.ndarray
    scale: ScaleConfig
    points: Tuple[DistributionPoint, ...] = field(default_factory=tuple)

    @property
    def total(self) -> int:
        return int(self.sorted_values.size)

    @property
    def is_empty(self) -> bool:
        return self.total == 0

    @property
    def x(self) -> np.ndarray:
        return np.asarray([p.value for p in self.points], dtype=float)

    @property
    def y(self) -> np.ndarray:
        return np.asarray([p.cumulative_count for p in self.points], dtype=float)


def sort_values(values: Iterable[float]) -> np.ndarray:
    """Return an ascending float64 copy of ``values`` without NaN/inf entries."""
    if not isinstance(values, np.ndarray):
        values = list(values)
    arr = np.asarray(values, dtype=float).ravel()
    finite = np.isfinite(arr)
    if not finite.all():
        logger.debug("Dropping %d non-finite value(s)", int((~finite).sum()))
        arr = arr[finite]
    return np.sort(arr, kind="stable")


def _binned_points(sorted_values: np.ndarray, lo: float, hi: float) -> Tuple[DistributionPoint, ...]:
    n = int(sorted_values.size)
    bin_count = min(MAX_BINS, n)
    boundaries = np.linspace(lo, hi, bin_count + 1)
    boundaries[-1] = hi

    points = []
    idx = 0
    for boundary in boundaries:
        # The boundaries ascend, so the index only ever moves forward.
        while idx < n and sorted_values[idx] <= boundary:
            idx += 1
        points.append(DistributionPoint(float(boundary), idx))
    return tuple(points)


def build_distribution(values: Iterable[float], *, log_scale: bool = False) -> Distribution:
    """Sort ``values`` and derive the cumulative series to plot.

    Parameters
    ----------
    values : iterable of float
        Raw dataset; order and duplicates are irrelevant.
    log_scale : bool, optional
        Recorded on the resulting :class:`ScaleConfig`.

    Returns
    -------
    Distribution
        - empty input: no points, domain ``[0, 0]``;
        - all values equal: ``[(v, 0), (v, n)]``;
        - ``n <= 50``: ``(sorted[i], i + 1)`` for every value;
        - otherwise ``min(100, n) + 1`` evenly spaced boundaries, each paired
          with the number of values ``<=`` it.
    """
    sorted_values = sort_values(values)
    n = int(sorted_values.size)
    if n == 0:
        return Distribution(sorted_values, ScaleConfig(0.0, 0.0, bool(log_scale)), ())

    lo = float(sorted_values[0])
    hi = float(sorted_values[-1])
    scale = ScaleConfig(lo, hi, bool(log_scale))

    if lo == hi:
        points: Tuple[DistributionPoint, ...] = (DistributionPoint(lo, 0), DistributionPoint(lo, n))
    elif n <= EXACT_POINTS_LIMIT:
        points = tuple(DistributionPoint(float(v), i + 1) for i, v in enumerate(sorted_values))
    else:
        points = _binned_points(sorted_values, lo, hi)

    return Distribution(sorted_values, scale, points)
