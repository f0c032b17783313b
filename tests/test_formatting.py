from __future__ import annotations

import pytest

from cdf_filter.formatting import count_label, format_number_with_suffix, operator_symbol, threshold_caption


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (0, "0"),
        (5, "5"),
        (123, "120"),
        (0.000123, "0.00012"),
        (0.00001234, "0.000012"),
        (0.000001, "0.000001"),
        (0.00000012, "1.2e-7"),
        (0.00000001, "1e-8"),
        (1500, "1.5K"),
        (1000, "1K"),
        (2_300_000, "2.3M"),
        (1_234_000_000, "1.2B"),
        (-2500, "-2.5K"),
        (-0.5, "-0.5"),
    ],
)
def test_format_number_with_suffix(value: float, expected: str) -> None:
    assert format_number_with_suffix(value) == expected


def test_format_respects_significant_figures() -> None:
    assert format_number_with_suffix(1234, sig_figs=3) == "1.23K"
    assert format_number_with_suffix(3.14159, sig_figs=4) == "3.142"


def test_operator_symbols_and_captions() -> None:
    assert [operator_symbol(m) for m in ("lt", "lte", "gt", "gte")] == ["<", "≤", ">", "≥"]
    assert operator_symbol("unknown") == "≤"
    assert threshold_caption("gte", 1500) == "≥ 1.5K"
    assert count_label(3, 5) == "3 / 5"
