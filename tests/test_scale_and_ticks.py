from __future__ import annotations

import math

import pytest

from cdf_filter.scale import ScaleConfig, fraction_to_value, threshold_to_percentage, value_to_fraction
from cdf_filter.ticks import compute_ticks, resolve_tick_count

try:
    from hypothesis import assume, given
    from hypothesis import strategies as st
except ModuleNotFoundError:  # pragma: no cover - environment-specific fallback
    pytest.skip("hypothesis is required for property-based tests", allow_module_level=True)


def test_linear_percentage_scenarios() -> None:
    assert threshold_to_percentage(0, 100, 50, False) == 50
    assert threshold_to_percentage(10, 10, 10, False) == 0


def test_log_percentage_scenarios() -> None:
    assert value_to_fraction(1, 100, 1, True) == pytest.approx(0.0)
    assert value_to_fraction(1, 100, 100, True) == pytest.approx(100.0)
    assert value_to_fraction(1, 100, 10, True) == pytest.approx(50.0)


def test_log_falls_back_to_linear_for_non_positive_domain() -> None:
    assert value_to_fraction(-10, 10, 0, True) == pytest.approx(50.0)
    assert value_to_fraction(0, 100, 25, True) == pytest.approx(25.0)
    assert fraction_to_value(-10, 10, 50.0, True) == pytest.approx(0.0)
    assert fraction_to_value(0, 100, 25.0, True) == pytest.approx(25.0)


def test_fraction_to_value_degenerate_range_returns_min() -> None:
    assert fraction_to_value(7, 7, 80.0, False) == 7.0
    assert fraction_to_value(7, 7, 80.0, True) == 7.0


def test_scale_config_reports_effective_regime() -> None:
    assert ScaleConfig(1, 100, True).log_active
    assert not ScaleConfig(0, 100, True).log_active
    assert not ScaleConfig(1, 100, False).log_active
    assert ScaleConfig(2, 6).midpoint() == 4.0
    assert ScaleConfig(1, 100, True).fraction_to_value(50.0) == pytest.approx(10.0)


@given(
    lo=st.floats(min_value=-1e6, max_value=1e6, allow_nan=False),
    span=st.floats(min_value=1e-3, max_value=1e6, allow_nan=False),
    t=st.floats(min_value=0.0, max_value=1.0),
)
def test_linear_mapping_roundtrip(lo: float, span: float, t: float) -> None:
    hi = lo + span
    assume(hi > lo)
    x = lo + t * (hi - lo)
    back = fraction_to_value(lo, hi, value_to_fraction(lo, hi, x, False), False)
    assert back == pytest.approx(x, rel=1e-9, abs=1e-6 * max(1.0, span))


@given(
    lo=st.floats(min_value=1e-6, max_value=1e3),
    ratio=st.floats(min_value=1.01, max_value=1e6),
    t=st.floats(min_value=0.0, max_value=1.0),
)
def test_log_mapping_roundtrip(lo: float, ratio: float, t: float) -> None:
    hi = lo * ratio
    x = math.exp(math.log(lo) + t * (math.log(hi) - math.log(lo)))
    back = fraction_to_value(lo, hi, value_to_fraction(lo, hi, x, True), True)
    assert back == pytest.approx(x, rel=1e-9)


def test_explicit_tick_count_spans_range() -> None:
    ticks = compute_ticks(3.0, 11.0, False, 1000, 5)
    assert ticks is not None
    assert len(ticks) == 5
    assert ticks[0] == 3.0
    assert ticks[-1] == 11.0
    assert ticks == pytest.approx([3.0, 5.0, 7.0, 9.0, 11.0])


def test_auto_tick_count_has_floor_and_grows_with_width() -> None:
    narrow = compute_ticks(0, 100, False, 0)
    wide = compute_ticks(0, 100, False, 800)
    assert narrow is not None and len(narrow) == 6
    assert wide is not None and len(wide) == 20
    assert len(compute_ticks(0, 100, False, 1200)) > len(wide)


def test_tick_count_rounds_half_up() -> None:
    assert resolve_tick_count(300) == 8  # 7.5 -> 8
    assert resolve_tick_count(260) == 7  # 6.5 -> 7
    assert resolve_tick_count(100, requested=3) == 3


def test_no_ticks_for_degenerate_range_or_tiny_count() -> None:
    assert compute_ticks(5, 5, False, 800) is None
    assert compute_ticks(0, 0, False, 800) is None
    assert compute_ticks(0, 10, False, 800, 1) is None
    assert compute_ticks(0, 10, False, 800, 0) is None


def test_log_ticks_are_evenly_spaced_in_log_space() -> None:
    ticks = compute_ticks(1, 1000, True, 0, 4)
    assert ticks == pytest.approx([1.0, 10.0, 100.0, 1000.0])
    assert ticks[0] == 1 and ticks[-1] == 1000


def test_log_ticks_fall_back_to_linear_for_non_positive_min() -> None:
    ticks = compute_ticks(0, 30, True, 0, 4)
    assert ticks == pytest.approx([0.0, 10.0, 20.0, 30.0])
