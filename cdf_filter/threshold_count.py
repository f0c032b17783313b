"""Counting sorted values against a threshold with a comparison operator.

Both bound primitives are binary searches over an ascending array
(``numpy.searchsorted``), so a count costs ``O(log n)`` regardless of how
often the threshold moves. Duplicates of the threshold are always counted or
skipped as a block.
"""

from __future__ import annotations

import logging
from typing import Literal, Sequence, Tuple, Union

import numpy as np

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

__all__ = [
    "FilterMode",
    "FILTER_MODES",
    "DEFAULT_FILTER_MODE",
    "normalize_filter_mode",
    "lower_bound",
    "upper_bound",
    "get_count_at_threshold",
    "passing_side",
    "highlight_span",
]

FilterMode = Literal["lt", "lte", "gt", "gte"]
FILTER_MODES: Tuple[str, ...] = ("lt", "lte", "gt", "gte")
DEFAULT_FILTER_MODE: FilterMode = "lte"

_MODE_ALIASES = {
    "<": "lt",
    "<=": "lte",
    "≤": "lte",
    ">": "gt",
    ">=": "gte",
    "≥": "gte",
}

SortedLike = Union[Sequence[float], np.ndarray]


def normalize_filter_mode(mode: object) -> FilterMode:
    """Return the canonical operator name for ``mode``.

    Accepts the canonical names (any case) and the comparison symbols
    ``<``, ``<=``, ``≤``, ``>``, ``>=``, ``≥``. Anything else falls back to
    ``"lte"``.
    """
    if isinstance(mode, str):
        key = mode.strip()
        if key.lower() in FILTER_MODES:
            return key.lower()  # type: ignore[return-value]
        if key in _MODE_ALIASES:
            return _MODE_ALIASES[key]  # type: ignore[return-value]
    logger.debug("Unknown filter mode %r; using %r", mode, DEFAULT_FILTER_MODE)
    return DEFAULT_FILTER_MODE


def lower_bound(sorted_values: SortedLike, x: float) -> int:
    """Smallest index ``i`` with ``sorted_values[i] >= x`` (count of values ``< x``)."""
    return int(np.searchsorted(np.asarray(sorted_values, dtype=float), x, side="left"))


def upper_bound(sorted_values: SortedLike, x: float) -> int:
    """Smallest index ``i`` with ``sorted_values[i] > x`` (count of values ``<= x``)."""
    return int(np.searchsorted(np.asarray(sorted_values, dtype=float), x, side="right"))


def get_count_at_threshold(mode: object, sorted_values: SortedLike, threshold: float) -> int:
    """Count how many of ``sorted_values`` satisfy ``value <op> threshold``.

    Parameters
    ----------
    mode : str
        Comparison operator, one of ``"lt"``, ``"lte"``, ``"gt"``, ``"gte"``.
        Unknown operators are treated as ``"lte"``.
    sorted_values : sequence of float
        Values in ascending order.
    threshold : float
        Cutoff to compare against.

    Returns
    -------
    int
        Number of passing values, ``0`` for an empty input.

    Examples
    --------
    >>> s = [1, 2, 2, 5, 9]
    >>> get_count_at_threshold("lt", s, 2), get_count_at_threshold("lte", s, 2)
    (1, 3)
    >>> get_count_at_threshold("gt", s, 5), get_count_at_threshold("gte", s, 5)
    (1, 2)
    """
    arr = np.asarray(sorted_values, dtype=float)
    n = int(arr.size)
    if n == 0:
        return 0

    op = normalize_filter_mode(mode)
    if op == "lt":
        return lower_bound(arr, threshold)
    if op == "gt":
        return max(0, n - upper_bound(arr, threshold))
    if op == "gte":
        return max(0, n - lower_bound(arr, threshold))
    return upper_bound(arr, threshold)


def passing_side(mode: object) -> Literal["below", "above"]:
    """Which side of the threshold holds the passing values."""
    return "below" if normalize_filter_mode(mode) in ("lt", "lte") else "above"


def highlight_span(mode: object, percentage: float) -> Tuple[float, float]:
    """Axis band ``(start, end)`` in percent covered by passing values.

    The threshold position is clamped to ``[0, 100]`` first.
    """
    p = min(100.0, max(0.0, float(percentage)))
    if passing_side(mode) == "below":
        return (0.0, p)
    return (p, 100.0)
