"""Component-level state for one cumulative density filter.

``CumulativeDensityFilter`` is what a renderer binds to: it keeps the
distribution series, axis ticks and the threshold drag controller consistent
with the current inputs (values, operator, scale, tick override, width).

The threshold is initialized once. Changing the values, operator or scale
recounts the existing threshold instead of resetting it.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Hashable, Iterable, List, Optional, Tuple

import numpy as np

from .distribution import Distribution, build_distribution
from .drag_controller import DragController, DragSubscription, PlotRect, SuppressibleEvent
from .formatting import count_label, format_number_with_suffix, threshold_caption
from .InputConvert import InputConvert
from .scale import ScaleConfig, threshold_to_percentage
from .threshold_count import FilterMode, highlight_span, normalize_filter_mode, passing_side
from .ThresholdEvent import ThresholdEvent
from .ticks import compute_ticks

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

__all__ = ["CumulativeDensityFilter"]


def _coerce_tick_count(x_axis_ticks: Any) -> Optional[int]:
    if x_axis_ticks is None:
        return None
    count = InputConvert(x_axis_ticks, int)
    if count < 0:
        raise ValueError(f"x_axis_ticks must be >= 0, got {count}")
    return count


class CumulativeDensityFilter:
    """
    Cumulative distribution plus an interactive threshold over one dataset.

    Parameters
    ----------
    values : iterable of float
        Dataset to explore.
    filter_mode : str, optional
        ``"lt"``, ``"lte"`` (default), ``"gt"`` or ``"gte"``.
    log_scale : bool, optional
        Use a logarithmic x-axis (falls back to linear for non-positive data).
    initial_threshold : float or str, optional
        Starting threshold; defaults to the midpoint of the data range.
        Strings such as ``"1e3"`` or ``"pi"`` are accepted.
    x_axis_ticks : int, optional
        Explicit x-axis tick count; otherwise derived from the width.
    container_width : float, optional
        Plot width in pixels, as last reported by the renderer.
    on_threshold_change : callable, optional
        ``on_threshold_change(threshold, count)``, called on every drag update.

    Examples
    --------
    >>> flt = CumulativeDensityFilter([1, 2, 2, 5, 9], filter_mode="lt", initial_threshold=2)
    >>> flt.count, flt.total
    (1, 5)
    >>> flt.caption
    '< 2'
    """

    def __init__(
        self,
        values: Iterable[float],
        *,
        filter_mode: object = "lte",
        log_scale: bool = False,
        initial_threshold: Any = None,
        x_axis_ticks: Any = None,
        container_width: float = 0,
        on_threshold_change: Optional[Callable[[float, int], Any]] = None,
    ) -> None:
        self._filter_mode: FilterMode = normalize_filter_mode(filter_mode)
        self._log_scale = bool(log_scale)
        self._x_axis_ticks = _coerce_tick_count(x_axis_ticks)
        self._container_width = float(container_width or 0)
        self._distribution = build_distribution(values, log_scale=self._log_scale)
        self._ticks_key: Optional[Tuple[Any, ...]] = None
        self._ticks: Optional[List[float]] = None

        threshold = InputConvert(initial_threshold, float) if initial_threshold is not None else None
        self._controller = DragController(
            self._distribution.sorted_values,
            scale=self._distribution.scale,
            mode=self._filter_mode,
            initial_threshold=threshold,
            on_threshold_change=on_threshold_change,
        )

    # --- Inputs ---

    @property
    def filter_mode(self) -> FilterMode:
        return self._filter_mode

    @property
    def log_scale(self) -> bool:
        return self._log_scale

    @property
    def x_axis_ticks(self) -> Optional[int]:
        return self._x_axis_ticks

    @property
    def container_width(self) -> float:
        return self._container_width

    def set_values(self, values: Iterable[float]) -> None:
        """Replace the dataset; the threshold keeps its value."""
        self._distribution = build_distribution(values, log_scale=self._log_scale)
        self._controller.update_data(self._distribution.sorted_values, scale=self._distribution.scale)
        logger.debug("values replaced: n=%d", self.total)

    def set_filter_mode(self, filter_mode: object) -> None:
        self._filter_mode = normalize_filter_mode(filter_mode)
        self._controller.update_data(mode=self._filter_mode)

    def set_log_scale(self, log_scale: bool) -> None:
        self._log_scale = bool(log_scale)
        scale = ScaleConfig(self.scale.min, self.scale.max, self._log_scale)
        self._distribution = Distribution(self._distribution.sorted_values, scale, self._distribution.points)
        self._controller.update_data(scale=scale)

    def set_x_axis_ticks(self, x_axis_ticks: Any) -> None:
        self._x_axis_ticks = _coerce_tick_count(x_axis_ticks)

    def set_container_width(self, width: float) -> None:
        self._container_width = float(width or 0)

    # --- Derived data ---

    @property
    def distribution(self) -> Distribution:
        return self._distribution

    @property
    def sorted_values(self) -> np.ndarray:
        return self._distribution.sorted_values

    @property
    def scale(self) -> ScaleConfig:
        return self._distribution.scale

    @property
    def min_value(self) -> float:
        return self.scale.min

    @property
    def max_value(self) -> float:
        return self.scale.max

    @property
    def total(self) -> int:
        return self._distribution.total

    @property
    def is_empty(self) -> bool:
        return self._distribution.is_empty

    @property
    def ticks(self) -> Optional[List[float]]:
        """Tick values for the x-axis, recomputed only when their inputs change."""
        key = (self.min_value, self.max_value, self._log_scale, self._container_width, self._x_axis_ticks)
        if key != self._ticks_key:
            self._ticks = compute_ticks(*key)
            self._ticks_key = key
        return None if self._ticks is None else list(self._ticks)

    @property
    def tick_labels(self) -> Optional[List[str]]:
        ticks = self.ticks
        if ticks is None:
            return None
        return [format_number_with_suffix(t) for t in ticks]

    # --- Threshold ---

    @property
    def controller(self) -> DragController:
        return self._controller

    @property
    def threshold(self) -> float:
        return self._controller.threshold

    @property
    def count(self) -> int:
        return self._controller.count

    @property
    def dragging(self) -> bool:
        return self._controller.dragging

    @property
    def percentage(self) -> float:
        """Threshold position along the x-axis, in percent."""
        return threshold_to_percentage(self.min_value, self.max_value, self.threshold, self._log_scale)

    @property
    def passing_side(self) -> str:
        return passing_side(self._filter_mode)

    @property
    def highlight_span(self) -> Tuple[float, float]:
        return highlight_span(self._filter_mode, self.percentage)

    @property
    def caption(self) -> str:
        return threshold_caption(self._filter_mode, self.threshold)

    @property
    def count_label(self) -> str:
        return count_label(self.count, self.total)

    # --- Interaction passthrough ---

    def start_drag(self, event: Optional[SuppressibleEvent] = None) -> DragSubscription:
        return self._controller.start(event)

    def drag_to(self, x: float, rect: PlotRect) -> Optional[ThresholdEvent]:
        return self._controller.handle_move(x, rect)

    def stop_drag(self) -> None:
        self._controller.stop()

    def add_change_hook(
        self, callback: Callable[[ThresholdEvent], Any], hook_id: Optional[Hashable] = None
    ) -> Hashable:
        """Register ``callback(event)`` for every threshold update; see :meth:`DragController.add_change_hook`."""
        return self._controller.add_change_hook(callback, hook_id)

    def remove_change_hook(self, hook_id: Hashable) -> None:
        self._controller.remove_change_hook(hook_id)

    def dispose(self) -> None:
        self._controller.dispose()
