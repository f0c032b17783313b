"""Compact number and label formatting for axis ticks and threshold captions."""

from __future__ import annotations

import numpy as np

from .threshold_count import normalize_filter_mode

__all__ = [
    "format_number_with_suffix",
    "operator_symbol",
    "threshold_caption",
    "count_label",
]

_SUFFIXES = (
    (1e9, "B"),
    (1e6, "M"),
    (1e3, "K"),
)

_OPERATOR_SYMBOLS = {
    "lt": "<",
    "lte": "≤",
    "gt": ">",
    "gte": "≥",
}


def _strip_precision(x: float, sig_figs: int) -> str:
    rounded = float(f"{x:.{sig_figs}g}")
    if rounded.is_integer() and abs(rounded) < 1e21:
        return str(int(rounded))
    if 1e-6 <= abs(rounded) < 1e21:
        return np.format_float_positional(rounded, trim="-")
    # Shortest exponent form, e.g. "1.2e-8" rather than "1.2e-08".
    return np.format_float_scientific(rounded, trim="-", exp_digits=1)


def format_number_with_suffix(value: float, sig_figs: int = 2) -> str:
    """Format ``value`` with a K/M/B suffix and ``sig_figs`` significant digits.

    Examples
    --------
    >>> format_number_with_suffix(1500)
    '1.5K'
    >>> format_number_with_suffix(-2_300_000)
    '-2.3M'
    >>> format_number_with_suffix(123)
    '120'
    >>> format_number_with_suffix(0)
    '0'
    """
    value = float(value)
    magnitude = abs(value)
    if magnitude == 0:
        return "0"
    sign = "-" if value < 0 else ""

    for scale, suffix in _SUFFIXES:
        if magnitude >= scale:
            return sign + _strip_precision(magnitude / scale, sig_figs) + suffix
    return sign + _strip_precision(magnitude, sig_figs)


def operator_symbol(mode: object) -> str:
    return _OPERATOR_SYMBOLS[normalize_filter_mode(mode)]


def threshold_caption(mode: object, threshold: float, sig_figs: int = 2) -> str:
    """Footer text such as ``"≤ 50"``."""
    return f"{operator_symbol(mode)} {format_number_with_suffix(threshold, sig_figs)}"


def count_label(count: int, total: int) -> str:
    return f"{int(count)} / {int(total)}"
