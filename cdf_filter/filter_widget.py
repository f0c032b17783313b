"""Notebook widget for the cumulative density filter.

Assembles a Plotly ``FigureWidget`` of the cumulative distribution, a
:class:`ThresholdDragDriver` for the handle, and a footer showing the range
and the current threshold caption. All state lives in a
:class:`CumulativeDensityFilter`; the widget only mirrors it.

Examples
--------
>>> from cdf_filter import CumulativeDensityFilterWidget  # doctest: +SKIP
>>> w = CumulativeDensityFilterWidget(values, filter_mode="gte",  # doctest: +SKIP
...                                   on_threshold_change=print)
>>> w  # doctest: +SKIP
"""

from __future__ import annotations

import html
import logging
from typing import Any, Callable, Iterable, Optional

import ipywidgets as W
from IPython.display import display

from .drag_driver import ThresholdDragDriver
from .filter_figure import FilterStyle, build_filter_figure, update_filter_figure
from .filter_model import CumulativeDensityFilter
from .formatting import format_number_with_suffix
from .ThresholdEvent import ThresholdEvent

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

__all__ = ["CumulativeDensityFilterWidget"]

_EMPTY_HTML = '<p style="font-size: 0.875rem; color: #6b7280;">No data available</p>'


class CumulativeDensityFilterWidget:
    """
    Interactive cumulative distribution with a draggable threshold.

    Parameters
    ----------
    values:
        Dataset to explore.
    filter_mode:
        ``"lt"``, ``"lte"`` (default), ``"gt"`` or ``"gte"``.
    log_scale:
        Logarithmic x-axis.
    initial_threshold:
        Starting threshold; defaults to the data midpoint.
    x_axis_ticks:
        Explicit x-axis tick count; otherwise derived from the rendered width.
    on_threshold_change:
        ``callback(threshold, count)`` on every drag update.
    style:
        :class:`FilterStyle` colors and sizing.

    Attributes
    ----------
    model:
        The underlying :class:`CumulativeDensityFilter`.
    figure:
        The Plotly ``FigureWidget`` (``None`` while the dataset is empty).
    driver:
        The :class:`ThresholdDragDriver`.
    """

    def __init__(
        self,
        values: Iterable[float],
        *,
        filter_mode: object = "lte",
        log_scale: bool = False,
        initial_threshold: Any = None,
        x_axis_ticks: Any = None,
        on_threshold_change: Optional[Callable[[float, int], Any]] = None,
        style: FilterStyle = FilterStyle(),
    ) -> None:
        self.style = style
        self.model = CumulativeDensityFilter(
            values,
            filter_mode=filter_mode,
            log_scale=log_scale,
            initial_threshold=initial_threshold,
            x_axis_ticks=x_axis_ticks,
            on_threshold_change=on_threshold_change,
        )
        self.figure = build_filter_figure(self.model, style, widget=True) if not self.model.is_empty else None
        self.driver = ThresholdDragDriver(
            self.model.controller,
            percentage=self.model.percentage,
            color=style.threshold_color,
        )
        self.driver.observe(self._on_width_change, names="container_width")
        self._hook_id = self.model.add_change_hook(self._on_threshold_event, hook_id="widget:refresh")

        self._empty = W.HTML(_EMPTY_HTML)
        self._min_label = W.HTML()
        self._caption = W.HTML()
        self._max_label = W.HTML()
        self._footer = W.HBox(
            [self._min_label, self._caption, self._max_label],
            layout=W.Layout(width="100%", justify_content="space-between", padding="0 4px"),
        )
        self._host = W.Box(
            layout=W.Layout(
                width="100%",
                height=f"{int(style.height_px)}px",
                min_width="0",
                display="flex",
                flex_flow="column",
                overflow="visible",
                justify_content="center",
                align_items="stretch",
            ),
        )
        self._wrap = W.VBox(
            [self._host, self._footer],
            layout=W.Layout(width="100%", min_width="0", border=style.border, box_sizing="border-box"),
        )
        self._sync_children()
        self._refresh_labels()

    # --- Public API ---

    @property
    def widget(self) -> W.Widget:
        """The widget to embed in an outer ipywidgets layout."""
        return self._wrap

    @property
    def threshold(self) -> float:
        return self.model.threshold

    @property
    def count(self) -> int:
        return self.model.count

    def set_values(self, values: Iterable[float]) -> None:
        self.model.set_values(values)
        self.refresh()

    def set_filter_mode(self, filter_mode: object) -> None:
        self.model.set_filter_mode(filter_mode)
        self.refresh()

    def set_log_scale(self, log_scale: bool) -> None:
        self.model.set_log_scale(log_scale)
        self.refresh()

    def set_x_axis_ticks(self, x_axis_ticks: Any) -> None:
        self.model.set_x_axis_ticks(x_axis_ticks)
        self.refresh()

    def refresh(self) -> None:
        """Push the model's current state into the figure, handle and footer."""
        if self.model.is_empty:
            if self.figure is not None:
                self.figure.close()
            self.figure = None
        elif self.figure is None:
            self.figure = build_filter_figure(self.model, self.style, widget=True)
        else:
            update_filter_figure(self.figure, self.model, self.style)
        self._sync_children()
        self.driver.percentage = self.model.percentage
        self._refresh_labels()

    def close(self) -> None:
        """Dispose the threshold controller and close every owned widget."""
        self.model.remove_change_hook(self._hook_id)
        self.driver.release()
        self.model.dispose()
        self.driver.close()
        if self.figure is not None:
            self.figure.close()
        self._wrap.close()

    def _ipython_display_(self) -> None:
        display(self._wrap)

    # --- Internal ---

    def _sync_children(self) -> None:
        if self.figure is None:
            children = (self._empty,)
        else:
            children = (self.figure, self.driver)
        if tuple(self._host.children) != children:
            self._host.children = children
        self._footer.layout.display = "none" if self.model.is_empty else "flex"

    def _refresh_labels(self) -> None:
        self._min_label.value = self._small(format_number_with_suffix(self.model.min_value))
        self._max_label.value = self._small(format_number_with_suffix(self.model.max_value))
        self._caption.value = self._small(self.model.caption, strong=True)

    @staticmethod
    def _small(text: str, *, strong: bool = False) -> str:
        weight = "500" if strong else "400"
        return f'<span style="font-size: 0.75rem; font-weight: {weight};">{html.escape(text)}</span>'

    def _on_threshold_event(self, _event: ThresholdEvent) -> None:
        self.refresh()

    def _on_width_change(self, change: Any) -> None:
        new = change.get("new") if isinstance(change, dict) else getattr(change, "new", None)
        self.model.set_container_width(float(new or 0))
        if self.model.x_axis_ticks is None:
            logger.debug("container width now %s px; refreshing ticks", new)
            self.refresh()
