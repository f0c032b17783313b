"""Standardized threshold-change event payloads.

This module defines ``ThresholdEvent``, the immutable structure emitted by
``DragController`` on every drag update and consumed by change hooks.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ThresholdEvent:
    """Normalized threshold change emitted while the handle is dragged.

    Parameters
    ----------
    threshold : float
        The new threshold value.
    count : int
        Number of values passing ``value <mode> threshold``.
    total : int
        Size of the dataset the count was taken from.
    mode : str
        Canonical comparison operator (``"lt"``, ``"lte"``, ``"gt"``, ``"gte"``).
    old_threshold : float, optional
        Threshold before this update.
    fraction : float, optional
        Clamped pointer position in ``[0, 1]`` that produced ``threshold``.

    Examples
    --------
    >>> ThresholdEvent(threshold=60.0, count=3, total=5, mode="lte")  # doctest: +SKIP
    """

    threshold: float
    count: int
    total: int
    mode: str
    old_threshold: Optional[float] = None
    fraction: Optional[float] = None
