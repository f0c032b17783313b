"""Axis tick placement for the filter chart's x-axis."""

from __future__ import annotations

import math
from typing import List, Optional

import numpy as np

__all__ = ["MIN_AUTO_TICKS", "PX_PER_TICK", "resolve_tick_count", "compute_ticks"]

MIN_AUTO_TICKS = 6
PX_PER_TICK = 40


def resolve_tick_count(container_width: float, requested: Optional[int] = None) -> int:
    """Number of ticks to draw for a plot ``container_width`` pixels wide.

    An explicit ``requested`` count always wins. Otherwise one tick per
    ``PX_PER_TICK`` pixels, rounded half-up, and never fewer than
    ``MIN_AUTO_TICKS``.
    """
    if requested is not None:
        return int(requested)
    width = float(container_width or 0)
    if not math.isfinite(width):
        width = 0.0
    return max(MIN_AUTO_TICKS, int(math.floor(width / PX_PER_TICK + 0.5)))


def compute_ticks(
    min_value: float,
    max_value: float,
    log_scale: bool,
    container_width: float,
    x_axis_ticks: Optional[int] = None,
) -> Optional[List[float]]:
    """Evenly spaced tick values spanning ``[min_value, max_value]``.

    Parameters
    ----------
    min_value, max_value : float
        Axis domain.
    log_scale : bool
        Space ticks evenly in log space (only when ``min_value > 0``).
    container_width : float
        Available plot width in pixels, used when ``x_axis_ticks`` is ``None``.
    x_axis_ticks : int, optional
        Explicit tick count.

    Returns
    -------
    list of float or None
        ``None`` for a degenerate domain or fewer than two ticks. The first
        and last entries are exactly ``min_value`` and ``max_value``.

    Examples
    --------
    >>> compute_ticks(0, 100, False, 0, 5)
    [0.0, 25.0, 50.0, 75.0, 100.0]
    >>> compute_ticks(3, 3, False, 800) is None
    True
    """
    if max_value == min_value:
        return None
    count = resolve_tick_count(container_width, x_axis_ticks)
    if count < 2:
        return None

    if log_scale and min_value > 0:
        ticks = np.exp(np.linspace(math.log(min_value), math.log(max_value), count))
    else:
        ticks = np.linspace(min_value, max_value, count)
    ticks[0] = min_value
    ticks[-1] = max_value
    return [float(t) for t in ticks]
