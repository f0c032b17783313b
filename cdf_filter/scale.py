"""Value <-> axis-position conversion for linear and logarithmic axes.

Positions are expressed as percentages in ``[0, 100]`` measured from the
left edge of the plotting area. Logarithmic mapping is only used when the
whole range (and, for the forward mapping, the value) is strictly positive;
anything else silently falls back to linear interpolation.

Examples
--------
>>> threshold_to_percentage(0, 100, 50, False)
50.0
>>> round(value_to_fraction(1, 100, 10, True), 6)
50.0
>>> fraction_to_value(0, 100, 25.0, False)
25.0
"""

from __future__ import annotations

import math
from dataclasses import dataclass

__all__ = [
    "ScaleConfig",
    "value_to_fraction",
    "fraction_to_value",
    "threshold_to_percentage",
]


def value_to_fraction(min_value: float, max_value: float, value: float, log_scale: bool) -> float:
    """Return the axis position of ``value`` as a percentage in ``[0, 100]``.

    Parameters
    ----------
    min_value, max_value : float
        Axis domain. A degenerate domain (``max_value == min_value``) maps
        every value to ``0``.
    value : float
        Value to position. Values outside the domain map outside ``[0, 100]``.
    log_scale : bool
        Request logarithmic mapping. Honored only when ``min_value``,
        ``max_value`` and ``value`` are all positive.
    """
    if max_value == min_value:
        return 0.0
    if log_scale and min_value > 0 and max_value > 0 and value > 0:
        log_min = math.log(min_value)
        log_max = math.log(max_value)
        return (math.log(value) - log_min) / (log_max - log_min) * 100.0
    return (value - min_value) / (max_value - min_value) * 100.0


threshold_to_percentage = value_to_fraction


def fraction_to_value(min_value: float, max_value: float, fraction: float, log_scale: bool) -> float:
    """Inverse of :func:`value_to_fraction`.

    ``fraction`` is a percentage in ``[0, 100]``. The logarithmic branch
    interpolates in log space and exponentiates back; it requires a positive
    ``min_value``.
    """
    if max_value == min_value:
        return float(min_value)
    t = fraction / 100.0
    if log_scale and min_value > 0:
        log_min = math.log(min_value)
        log_max = math.log(max_value)
        return math.exp(log_min + t * (log_max - log_min))
    return min_value + t * (max_value - min_value)


@dataclass(frozen=True)
class ScaleConfig:
    """Axis domain derived from the first and last sorted value.

    Parameters
    ----------
    min : float
        Smallest value in the dataset (``0`` for an empty dataset).
    max : float
        Largest value in the dataset (``0`` for an empty dataset).
    logarithmic : bool
        Whether a logarithmic axis was requested.
    """

    min: float = 0.0
    max: float = 0.0
    logarithmic: bool = False

    @property
    def log_active(self) -> bool:
        """Whether logarithmic mapping is actually in effect for this domain."""
        return self.logarithmic and self.min > 0

    @property
    def is_degenerate(self) -> bool:
        return self.max == self.min

    def value_to_fraction(self, value: float) -> float:
        return value_to_fraction(self.min, self.max, value, self.logarithmic)

    def fraction_to_value(self, fraction: float) -> float:
        return fraction_to_value(self.min, self.max, fraction, self.logarithmic)

    def midpoint(self) -> float:
        """Arithmetic midpoint of the domain, the default initial threshold."""
        return (self.min + self.max) / 2.0
